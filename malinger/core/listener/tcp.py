# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import socket
import asyncio
import logging
from typing import Any, Optional

from .base import BaseListener
from ...common.flag import flags
from ...common.utils import new_server_ssl_context
from ...common.constants import (
    DEFAULT_PORT, DEFAULT_IPV4_HOSTNAME, DEFAULT_ENABLE_SSL,
    DEFAULT_CERT_FILE, DEFAULT_KEY_FILE, DEFAULT_CLIENT_RECVBUF_SIZE,
)


flags.add_argument(
    '--hostname',
    type=str,
    default=str(DEFAULT_IPV4_HOSTNAME),
    help='Default: 0.0.0.0. Server IP address.',
)

flags.add_argument(
    '--port',
    type=int,
    default=DEFAULT_PORT,
    help='Default: 8080.  Server port.',
)

flags.add_argument(
    '--ssl',
    action='store_true',
    default=DEFAULT_ENABLE_SSL,
    help='Default: False.  Listen for HTTPS connections using --cert-file and --key-file.',
)

flags.add_argument(
    '--cert-file',
    type=str,
    default=DEFAULT_CERT_FILE,
    help='Default: ' + DEFAULT_CERT_FILE + '.  PEM encoded server certificate used with --ssl.',
)

flags.add_argument(
    '--key-file',
    type=str,
    default=DEFAULT_KEY_FILE,
    help='Default: ' + DEFAULT_KEY_FILE + '.  PEM encoded private key used with --ssl.',
)

flags.add_argument(
    '--client-recvbuf-size',
    type=int,
    default=DEFAULT_CLIENT_RECVBUF_SIZE,
    help='Default: 128 KB. Maximum amount of data received from the '
    'client in a single recv() operation.',
)

logger = logging.getLogger(__name__)


class TcpSocketListener(BaseListener):
    """Tcp listener, optionally terminating TLS."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        # Set after binding to a port.
        #
        # Stored here separately for ephemeral port discovery.
        self._port: Optional[int] = None

    @property
    def port(self) -> Optional[int]:
        return self._port

    async def listen(self) -> asyncio.AbstractServer:
        # Load TLS material before binding, broken
        # certificate or key must prevent startup.
        ssl_context = new_server_ssl_context(
            self.config.cert_file, self.config.key_file,
        ) if self.config.use_tls else None
        sock = socket.socket(
            socket.AF_INET6 if self.config.hostname.version == 6 else socket.AF_INET,
            socket.SOCK_STREAM,
        )
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            sock.bind((str(self.config.hostname), self.config.port))
            sock.listen(self.config.backlog)
            sock.setblocking(False)
        except OSError:
            sock.close()
            raise
        self._port = sock.getsockname()[1]
        server = await asyncio.start_server(
            self._on_connection,
            sock=sock,
            ssl=ssl_context,
            limit=self.config.client_recvbuf_size,
        )
        logger.info(
            'Listening on %s:%s' %
            (self.config.hostname, self._port),
        )
        return server
