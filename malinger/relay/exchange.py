# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from typing import Dict, Tuple, Optional

from ..http.parser import HttpParser
from ..http.codes import httpStatusCodes


class RelayExchange:
    """State of one inbound request and its upstream response.

    Owned by the task relaying the request, never shared.  Request side
    attributes are views over the inbound request parser, response side
    attributes over the upstream response parser once one exists.
    ``response_raw`` holds the response exactly as upstream sent it, which
    is what eventually gets released to the client.
    """

    def __init__(self, request: HttpParser, start_time: float) -> None:
        self.start_time: float = start_time
        self.request: HttpParser = request
        self.response: Optional[HttpParser] = None
        self.response_raw: bytearray = bytearray()
        # Event loop times at which upstream response was complete
        # and at which it was written to the client
        self.responded_at: Optional[float] = None
        self.released_at: Optional[float] = None

    @property
    def method(self) -> Optional[bytes]:
        return self.request.method

    @property
    def path(self) -> Optional[bytes]:
        return self.request.path

    @property
    def request_headers(self) -> Dict[bytes, Tuple[bytes, bytes]]:
        return self.request.headers or {}

    @property
    def request_body(self) -> bytes:
        return bytes(self.request.body or b'')

    @property
    def response_status(self) -> Optional[int]:
        if self.response is None or self.response.code is None:
            return None
        return int(self.response.code)

    @property
    def response_reason(self) -> Optional[bytes]:
        return self.response.reason if self.response else None

    @property
    def response_headers(self) -> Dict[bytes, Tuple[bytes, bytes]]:
        if self.response is None or self.response.headers is None:
            return {}
        return self.response.headers

    @property
    def response_body(self) -> bytes:
        if self.response is None:
            return b''
        return bytes(self.response.body or b'')

    @property
    def is_response_complete(self) -> bool:
        return self.response is not None and self.response.is_complete

    def remaining(self, now: float, delay: float) -> float:
        """Seconds left until the response may be released, never negative."""
        return max(0.0, self.start_time + delay - now)

    @property
    def held_for(self) -> Optional[float]:
        """Seconds between request start and response release."""
        if self.released_at is None:
            return None
        return self.released_at - self.start_time

    @property
    def upstream_time(self) -> Optional[float]:
        """Seconds upstream took to deliver the complete response."""
        if self.responded_at is None:
            return None
        return self.responded_at - self.start_time

    @property
    def can_reuse_connection(self) -> bool:
        """Whether client connection may carry another request after this exchange."""
        if self.response is None or not self.response.is_complete:
            return False
        return self.request.is_keep_alive and \
            self.response.is_keep_alive and \
            not self.response.is_close_delimited and \
            self.response_status != httpStatusCodes.SWITCHING_PROTOCOLS
