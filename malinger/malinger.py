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
import sys
import signal
import asyncio
import logging
from typing import Any, List, Optional

from .core.config import ServerConfig
from .core.listener import TcpSocketListener
from .core.connection import TcpClientConnection
from .http.handler import HttpProtocolHandler
from .common.flag import FlagParser, flags
from .common.utils import new_client_ssl_context
from .common.constants import (
    IS_WINDOWS, DEFAULT_VERSION, DEFAULT_LOG_FILE, DEFAULT_LOG_LEVEL,
    DEFAULT_LOG_FORMAT,
)


logger = logging.getLogger(__name__)


flags.add_argument(
    '--version',
    '-v',
    action='store_true',
    default=DEFAULT_VERSION,
    help='Prints malinger version.',
)

flags.add_argument(
    '--log-level',
    type=str,
    default=DEFAULT_LOG_LEVEL,
    help='Valid options: DEBUG, INFO (default), WARNING, ERROR, CRITICAL. '
    'Both upper and lowercase values are allowed. '
    'You may also simply use the leading character e.g. --log-level d',
)

flags.add_argument(
    '--log-file',
    type=str,
    default=DEFAULT_LOG_FILE,
    help='Default: sys.stdout. Log file destination.',
)

flags.add_argument(
    '--log-format',
    type=str,
    default=DEFAULT_LOG_FORMAT,
    help='Log format for Python logger.',
)


class Malinger:
    """Malinger is an async context manager to control the malinger server.

    Entering the context binds the listener and starts accepting
    connections.  Every accepted connection is served by an
    :class:`~malinger.http.handler.HttpProtocolHandler` within its own task.
    Leaving the context stops the listener and cancels pending exchanges.

    Pass ``port=0`` to listen on an ephemeral port, the actual port is
    available as :attr:`port` after setup.
    """

    def __init__(self, input_args: Optional[List[str]] = None, **opts: Any) -> None:
        self.flags = FlagParser.initialize(input_args, **opts)
        self.config = ServerConfig.from_flags(self.flags)
        self.listener: Optional[TcpSocketListener] = None
        self.ssl_context: Optional[ssl.SSLContext] = None

    async def __aenter__(self) -> 'Malinger':
        await self.setup()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.shutdown()

    async def setup(self) -> None:
        # Upstream TLS context is built once and shared by all exchanges
        if self.config.remote_uses_tls:
            self.ssl_context = new_client_ssl_context(self.config.ca_file)
        self.listener = TcpSocketListener(self.config, self._handle_client)
        await self.listener.setup()
        # Override flags.port to match the actual port
        # we are listening upon.  This is necessary to preserve
        # the server port when `--port=0` is used.
        self.flags.port = self.listener.port
        logger.info(
            'Proxying %s://%s:%d to %s' % (
                self.config.scheme,
                self.config.hostname,
                self.port,
                self.config.upstream,
            ),
        )
        if self.config.delay > 0:
            logger.info(
                'Responses are delayed by %.3f seconds' % self.config.delay,
            )

    async def shutdown(self) -> None:
        if self.listener:
            await self.listener.shutdown()
            self.listener = None

    async def serve_forever(self) -> None:
        assert self.listener
        await self.listener.serve_forever()

    @property
    def port(self) -> int:
        assert self.flags.port is not None
        return int(self.flags.port)

    async def _handle_client(
            self,
            reader: asyncio.StreamReader,
            writer: asyncio.StreamWriter,
    ) -> None:
        handler = HttpProtocolHandler(
            TcpClientConnection(reader, writer),
            self.config,
            self.ssl_context,
        )
        await handler.run()


async def run(input_args: Optional[List[str]] = None, **opts: Any) -> None:
    """Serve until cancelled, or until SIGTERM / SIGHUP on POSIX systems."""
    async with Malinger(input_args, **opts) as m:
        task = asyncio.current_task()
        if not IS_WINDOWS and task:
            loop = asyncio.get_running_loop()
            for signum in (signal.SIGTERM, signal.SIGHUP):
                loop.add_signal_handler(signum, task.cancel)
        await m.serve_forever()


def main(**opts: Any) -> None:
    try:
        asyncio.run(run(sys.argv[1:], **opts))
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    except OSError as e:
        # Includes ssl.SSLError, e.g. missing or broken --cert-file
        logger.critical('Unable to start malinger: %s' % e)
        sys.exit(1)


def entry_point() -> None:
    main()
