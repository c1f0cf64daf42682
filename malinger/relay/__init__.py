# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from .relay import RequestRelay
from .request import InboundRequest
from .exchange import RelayExchange


__all__ = [
    'RequestRelay',
    'InboundRequest',
    'RelayExchange',
]
