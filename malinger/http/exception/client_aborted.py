# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from typing import TYPE_CHECKING, Optional

from .base import HttpProtocolException


if TYPE_CHECKING:   # pragma: no cover
    from ..parser import HttpParser


class ClientConnectionAborted(HttpProtocolException):
    """Raised when the client goes away before its delayed response was released."""

    def response(self, _request: Optional['HttpParser']) -> None:
        return None
