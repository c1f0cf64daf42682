# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from .base import HttpProtocolException
from .client_aborted import ClientConnectionAborted
from .proxy_conn_failed import ProxyConnectionFailed
from .http_request_rejected import HttpRequestRejected


__all__ = [
    'HttpProtocolException',
    'HttpRequestRejected',
    'ClientConnectionAborted',
    'ProxyConnectionFailed',
]
