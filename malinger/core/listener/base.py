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
from typing import Any, Set, Callable, Optional, Awaitable

from ..config import ServerConfig
from ...common.flag import flags
from ...common.constants import DEFAULT_BACKLOG


flags.add_argument(
    '--backlog',
    type=int,
    default=DEFAULT_BACKLOG,
    help='Default: 100. Maximum number of pending connections to proxy server.',
)

logger = logging.getLogger(__name__)

ConnectionHandler = Callable[
    [asyncio.StreamReader, asyncio.StreamWriter], Awaitable[None],
]


class BaseListener(ABC):
    """Base listener class.

    For usage provide a listen method implementation.  Every accepted
    connection is served by ``handler`` within its own task."""

    def __init__(self, config: ServerConfig, handler: ConnectionHandler) -> None:
        self.config = config
        self.handler = handler
        self._server: Optional[asyncio.AbstractServer] = None
        self._tasks: Set['asyncio.Task[Any]'] = set()

    @abstractmethod
    async def listen(self) -> asyncio.AbstractServer:
        raise NotImplementedError()

    async def __aenter__(self) -> 'BaseListener':
        await self.setup()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.shutdown()

    async def setup(self) -> None:
        self._server = await self.listen()

    async def shutdown(self) -> None:
        assert self._server
        self._server.close()
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        await self._server.wait_closed()

    async def serve_forever(self) -> None:
        assert self._server
        await self._server.serve_forever()

    async def _on_connection(
            self,
            reader: asyncio.StreamReader,
            writer: asyncio.StreamWriter,
    ) -> None:
        task = asyncio.current_task()
        assert task
        self._tasks.add(task)
        try:
            await self.handler(reader, writer)
        finally:
            self._tasks.discard(task)
