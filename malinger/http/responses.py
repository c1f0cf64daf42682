# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from .codes import httpStatusCodes
from ..common.utils import build_http_response
from ..common.constants import MALINGER_AGENT_HEADER_KEY, MALINGER_AGENT_HEADER_VALUE


BAD_GATEWAY_RESPONSE_PKT = memoryview(
    build_http_response(
        httpStatusCodes.BAD_GATEWAY,
        reason=b'Bad Gateway',
        headers={
            MALINGER_AGENT_HEADER_KEY: MALINGER_AGENT_HEADER_VALUE,
        },
        body=b'Bad Gateway',
        conn_close=True,
    ),
)
