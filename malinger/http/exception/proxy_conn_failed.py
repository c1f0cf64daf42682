# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.

    .. spelling::

       conn
"""
from typing import TYPE_CHECKING, Any, Optional

from .base import HttpProtocolException
from ..responses import BAD_GATEWAY_RESPONSE_PKT


if TYPE_CHECKING:   # pragma: no cover
    from ..parser import HttpParser


class ProxyConnectionFailed(HttpProtocolException):
    """Exception raised when the relay is unable to connect to, or read a
    complete response from, the upstream server.

    Answered right away with ``502 Bad Gateway``; the configured delay
    never applies to failures."""

    def __init__(self, host: str, port: int, reason: str, **kwargs: Any):
        self.host: str = host
        self.port: int = port
        self.reason: str = reason
        super().__init__('%s %s' % (self.__class__.__name__, reason), **kwargs)

    def response(self, _request: Optional['HttpParser']) -> memoryview:
        return BAD_GATEWAY_RESPONSE_PKT
