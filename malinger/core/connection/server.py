# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import ssl
import asyncio
from typing import Optional

from .types import tcpConnectionTypes
from .connection import TcpConnection, TcpConnectionUninitializedException
from ...common.types import HostPort


class TcpServerConnection(TcpConnection):
    """A buffered connection to the upstream server."""

    def __init__(self, host: str, port: int) -> None:
        super().__init__(tcpConnectionTypes.SERVER)
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self.addr: HostPort = (host, port)
        self.closed = True

    @property
    def reader(self) -> asyncio.StreamReader:
        if self._reader is None:
            raise TcpConnectionUninitializedException()
        return self._reader

    @property
    def writer(self) -> asyncio.StreamWriter:
        if self._writer is None:
            raise TcpConnectionUninitializedException()
        return self._writer

    async def connect(self, ssl_context: Optional[ssl.SSLContext] = None) -> None:
        """Open connection, performing TLS handshake with SNI when ``ssl_context`` is given.

        Users must handle OSError exceptions"""
        assert self._writer is None
        host, port = self.addr
        self._reader, self._writer = await asyncio.open_connection(
            host, port,
            ssl=ssl_context,
            server_hostname=host if ssl_context else None,
        )
        self.closed = False

    def close(self) -> bool:
        if self._writer is None:
            return self.closed
        return super().close()
