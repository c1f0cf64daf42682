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
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from .types import tcpConnectionTypes
from ...common.constants import DEFAULT_BUFFER_SIZE


logger = logging.getLogger(__name__)


class TcpConnectionUninitializedException(Exception):
    pass


class TcpConnection(ABC):
    """TCP server/client connection abstraction.

    Main motivation of this class is to provide a buffer management
    when reading and writing into asyncio streams.

    Implement the ``reader`` and ``writer`` abstract properties to
    return the underlying stream objects.
    """

    def __init__(self, tag: int) -> None:
        self.tag: str = 'server' if tag == tcpConnectionTypes.SERVER else 'client'
        self.buffer: List[memoryview] = []
        self.closed: bool = False

    @property
    @abstractmethod
    def reader(self) -> asyncio.StreamReader:
        """Must return the stream reader to use in this class."""
        raise TcpConnectionUninitializedException()     # pragma: no cover

    @property
    @abstractmethod
    def writer(self) -> asyncio.StreamWriter:
        """Must return the stream writer to use in this class."""
        raise TcpConnectionUninitializedException()     # pragma: no cover

    async def recv(
            self, buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> Optional[memoryview]:
        """Returns None once peer has closed the connection.

        Users must handle OSError exceptions"""
        data: bytes = await self.reader.read(buffer_size)
        if len(data) == 0:
            return None
        logger.debug(
            'received %d bytes from %s' %
            (len(data), self.tag),
        )
        return memoryview(data)

    def has_buffer(self) -> bool:
        return len(self.buffer) != 0

    def queue(self, mv: memoryview) -> None:
        self.buffer.append(mv)

    async def flush(self) -> int:
        """Writes all queued data and waits for the transport to drain.

        Users must handle OSError exceptions"""
        if not self.has_buffer():
            return 0
        sent = 0
        for mv in self.buffer:
            self.writer.write(mv)
            sent += len(mv)
        self.buffer = []
        await self.writer.drain()
        logger.debug('flushed %d bytes to %s' % (sent, self.tag))
        return sent

    def close(self) -> bool:
        if not self.closed:
            self.writer.close()
            self.closed = True
        return self.closed
