# -*- coding: utf-8 -*-
#
# malinger
# ~~~~~~~~
# Slow-response HTTP/HTTPS proxy for testing how applications cope with
# sluggish or unresponsive dependencies.
#
# :copyright: (c) 2013-present by Abhinav Singh and contributors.
# :license: BSD, see LICENSE for more details.
#
import asyncio
from typing import List, Tuple, Optional

from malinger.http.parser import HttpParser, httpParserTypes


class UpstreamServer:
    """Scripted upstream HTTP server on an ephemeral loopback port.

    Answers every request with ``response`` after ``delay`` seconds.  If
    the relay closes the connection while the response is held back,
    ``aborted`` is set instead."""

    def __init__(
            self,
            response: bytes,
            delay: float = 0.0,
            close_after_response: bool = False,
    ) -> None:
        self.response = response
        self.delay = delay
        self.close_after_response = close_after_response
        self.requests: List[bytes] = []
        self.connections = 0
        self.accepted = asyncio.Event()
        self.received = asyncio.Event()
        self.aborted = asyncio.Event()
        self.closed = asyncio.Event()
        self.server: Optional[asyncio.AbstractServer] = None
        self._port: Optional[int] = None

    @property
    def port(self) -> int:
        assert self.server
        if self._port is None:
            self._port = int(self.server.sockets[0].getsockname()[1])
        return self._port

    @property
    def remote_host(self) -> str:
        return '127.0.0.1:%d' % self.port

    async def __aenter__(self) -> 'UpstreamServer':
        self.server = await asyncio.start_server(self._handle, '127.0.0.1', 0)
        self._port = int(self.server.sockets[0].getsockname()[1])
        return self

    async def __aexit__(self, *args: object) -> None:
        assert self.server
        self.server.close()
        await self.server.wait_closed()

    async def _handle(
            self,
            reader: asyncio.StreamReader,
            writer: asyncio.StreamWriter,
    ) -> None:
        self.connections += 1
        self.accepted.set()
        try:
            request = HttpParser(httpParserTypes.REQUEST_PARSER)
            raw = b''
            while not request.is_complete:
                data = await reader.read(65536)
                if not data:
                    return
                raw += data
                request.parse(data)
            self.requests.append(raw)
            self.received.set()
            if self.delay > 0:
                try:
                    data = await asyncio.wait_for(reader.read(1), self.delay)
                except asyncio.TimeoutError:
                    pass
                else:
                    if not data:
                        self.aborted.set()
                        return
            writer.write(self.response)
            await writer.drain()
            if not self.close_after_response:
                # Wait for relay to close its side
                while await reader.read(65536):
                    pass
        finally:
            writer.close()
            self.closed.set()


async def read_response(
        reader: asyncio.StreamReader,
        request_method: Optional[bytes] = None,
) -> Tuple[HttpParser, bytes]:
    """Reads one complete response, returns parser and raw bytes as received."""
    response = HttpParser(
        httpParserTypes.RESPONSE_PARSER,
        request_method=request_method,
    )
    raw = b''
    while not response.is_complete:
        data = await reader.read(65536)
        if not data:
            response.eof()
            break
        raw += data
        response.parse(data)
    return response, raw
