# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from typing import AsyncIterator

from ..http.parser import HttpParser
from ..http.codes import httpStatusCodes
from ..http.exception import (
    ClientConnectionAborted, HttpProtocolException, HttpRequestRejected,
)
from ..core.connection import TcpClientConnection
from ..common.constants import MALINGER_AGENT_HEADER_KEY, MALINGER_AGENT_HEADER_VALUE


class InboundRequest:
    """Inbound request whose head has been parsed and whose body may still be arriving.

    Raw bytes are handed out exactly as received from the client, split
    at the request boundary.  Bytes that follow the request on the
    connection are returned to the client connection as pending data.
    """

    def __init__(
            self,
            client: TcpClientConnection,
            parser: HttpParser,
            start_time: float,
            recvbuf_size: int,
    ) -> None:
        self.client = client
        self.parser = parser
        self.start_time = start_time
        self.recvbuf_size = recvbuf_size
        self._unread = bytearray()
        self._handed_out = 0

    def feed(self, raw: bytes) -> None:
        self._unread += raw
        try:
            self.parser.parse(raw)
        except HttpProtocolException as e:
            raise HttpRequestRejected(
                status_code=httpStatusCodes.BAD_REQUEST,
                reason=b'Bad Request',
                headers={
                    MALINGER_AGENT_HEADER_KEY: MALINGER_AGENT_HEADER_VALUE,
                    b'Content-Length': b'0',
                },
            ) from e

    def take(self) -> bytes:
        """Returns raw request bytes parsed so far and not yet handed out."""
        size = self.parser.consumed - self._handed_out
        data = bytes(self._unread[:size])
        del self._unread[:size]
        self._handed_out += size
        return data

    async def chunks(self) -> AsyncIterator[bytes]:
        """Yields raw request bytes, head first, until the request is complete.

        Raises :exc:`ClientConnectionAborted` if client goes away mid-request."""
        data = self.take()
        if data:
            yield data
        while not self.parser.is_complete:
            raw = await self.client.recv(self.recvbuf_size)
            if raw is None:
                raise ClientConnectionAborted('Client closed connection mid-request')
            self.feed(raw.tobytes())
            data = self.take()
            if data:
                yield data
        # Pipelined bytes belong to the next request
        self.client.pending += self._unread
        self._unread.clear()
