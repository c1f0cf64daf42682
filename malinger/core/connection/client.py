# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import asyncio
from typing import Optional

from .types import tcpConnectionTypes
from .connection import TcpConnection
from ...common.types import HostPort


class TcpClientConnection(TcpConnection):
    """A buffered client connection object."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        addr: Optional[HostPort] = None,
    ) -> None:
        super().__init__(tcpConnectionTypes.CLIENT)
        self._reader = reader
        self._writer = writer
        self._addr: Optional[HostPort] = addr
        # Bytes received while no request was being read,
        # e.g. pipelined requests.  Consumed by the next request.
        self.pending: bytearray = bytearray()

    @property
    def reader(self) -> asyncio.StreamReader:
        return self._reader

    @property
    def writer(self) -> asyncio.StreamWriter:
        return self._writer

    @property
    def addr(self) -> HostPort:
        if self._addr is None:
            peer = self._writer.get_extra_info('peername')
            self._addr = (peer[0], peer[1]) if peer else ('', 0)
        return self._addr

    @property
    def address(self) -> str:
        return '{0}:{1}'.format(*self.addr)
