# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.

    Request relay, the heart of malinger.

    Each inbound request is replayed verbatim to the remote host.  The
    complete upstream response is buffered and released to the client in
    one write, no earlier than ``--delay`` seconds after the request
    started.  Slow upstreams eat into the delay, fast ones are padded up
    to it.  Upstream failures are reported right away with ``502``.
"""
import ssl
import asyncio
import logging
import contextlib
from typing import Any, Dict, NoReturn, Optional

from .request import InboundRequest
from .exchange import RelayExchange
from ..core.config import ServerConfig
from ..core.connection import TcpClientConnection, TcpServerConnection
from ..http.parser import HttpParser, httpParserTypes
from ..http.exception import (
    HttpProtocolException, ProxyConnectionFailed, ClientConnectionAborted,
)
from ..common.flag import flags
from ..common.utils import text_
from ..common.constants import (
    DEFAULT_DELAY, DEFAULT_REMOTE_HOST, DEFAULT_ENABLE_REMOTE_SSL,
    DEFAULT_CA_FILE, DEFAULT_SERVER_RECVBUF_SIZE, DEFAULT_RELAY_ACCESS_LOG_FORMAT,
)


flags.add_argument(
    '--delay',
    type=float,
    default=DEFAULT_DELAY,
    help='Default: 0.  Seconds until response header and body are delivered, '
    'measured from the start of the request.',
)

flags.add_argument(
    '--remote-host',
    type=str,
    default=DEFAULT_REMOTE_HOST,
    help='Required.  Remote host[:port] to which requests are proxied.',
)

flags.add_argument(
    '--remote-ssl',
    action='store_true',
    default=DEFAULT_ENABLE_REMOTE_SSL,
    help='Default: False.  Use HTTPS to proxy the requests to the remote host.',
)

flags.add_argument(
    '--ca-file',
    type=str,
    default=DEFAULT_CA_FILE,
    help='Default: ' + DEFAULT_CA_FILE +
    '. Provide path to custom CA bundle for remote host certificate verification.',
)

flags.add_argument(
    '--server-recvbuf-size',
    type=int,
    default=DEFAULT_SERVER_RECVBUF_SIZE,
    help='Default: 128 KB. Maximum amount of data received from the '
    'remote host in a single recv() operation.',
)

logger = logging.getLogger(__name__)


class RequestRelay:
    """Relays requests of one client connection, one at a time.

    No state is shared with relays of other connections.
    """

    def __init__(
            self,
            config: ServerConfig,
            client: TcpClientConnection,
            ssl_context: Optional[ssl.SSLContext] = None,
    ) -> None:
        self.config = config
        self.client = client
        # Context for upstream TLS connections, required with --remote-ssl
        self.ssl_context = ssl_context
        assert self.ssl_context or not self.config.remote_uses_tls

    async def handle(self, request: InboundRequest) -> RelayExchange:
        """Relay ``request`` and release upstream response after the configured delay.

        Raises :exc:`ProxyConnectionFailed` for upstream failures and
        :exc:`ClientConnectionAborted` when client goes away first."""
        exchange = RelayExchange(request.parser, request.start_time)
        upstream = TcpServerConnection(
            self.config.remote_host, self.config.remote_port,
        )
        logger.debug(
            '-> %s%s', self.config.upstream, text_(exchange.path),
        )
        try:
            await self._until_released(request, exchange, upstream)
        finally:
            upstream.close()
        await self._release(exchange)
        self._access_log(exchange)
        return exchange

    async def _until_released(
            self,
            request: InboundRequest,
            exchange: RelayExchange,
            upstream: TcpServerConnection,
    ) -> None:
        """Relay and wait out the delay, unless client goes away first.

        Client is read by a single task for the whole exchange, so a
        disconnect is noticed while connecting, forwarding or holding."""
        body: 'asyncio.Queue[Optional[bytes]]' = asyncio.Queue()
        reader = asyncio.ensure_future(self._read_client(request, body))
        work = asyncio.ensure_future(self._relay(exchange, upstream, body))
        try:
            done, _ = await asyncio.wait(
                {reader, work},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for task in (reader, work):
                if not task.done():
                    task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await task
        if work in done:
            work.result()
            return
        e = reader.exception()
        if isinstance(e, HttpProtocolException):
            raise e
        raise ClientConnectionAborted(
            'Client %s closed connection before response was released' %
            self.client.address,
        ) from e

    async def _read_client(
            self,
            request: InboundRequest,
            body: 'asyncio.Queue[Optional[bytes]]',
    ) -> None:
        """Returns once client has closed the connection.

        Request bytes are handed to ``body`` as they arrive, None marks
        the end of request.  Anything client sends after the request is
        kept for the next request."""
        async for data in request.chunks():
            body.put_nowait(data)
        body.put_nowait(None)
        while True:
            raw = await self.client.recv(self.config.client_recvbuf_size)
            if raw is None:
                return
            self.client.pending += raw

    async def _relay(
            self,
            exchange: RelayExchange,
            upstream: TcpServerConnection,
            body: 'asyncio.Queue[Optional[bytes]]',
    ) -> None:
        await self._connect(upstream)
        await self._forward_request(body, upstream)
        await self._read_response(exchange, upstream)
        # Response is complete, upstream is not needed while holding it
        upstream.close()
        loop = asyncio.get_running_loop()
        exchange.responded_at = loop.time()
        remaining = exchange.remaining(exchange.responded_at, self.config.delay)
        if remaining > 0:
            logger.debug(
                'Holding response for %s %s another %.3fs',
                text_(exchange.method), text_(exchange.path), remaining,
            )
            await asyncio.sleep(remaining)

    async def _connect(self, upstream: TcpServerConnection) -> None:
        try:
            await upstream.connect(
                self.ssl_context if self.config.remote_uses_tls else None,
            )
        except OSError as e:
            self._upstream_failed(upstream, e)

    async def _forward_request(
            self,
            body: 'asyncio.Queue[Optional[bytes]]',
            upstream: TcpServerConnection,
    ) -> None:
        # Raw bytes, including head, go out as they arrive
        while True:
            data = await body.get()
            if data is None:
                return
            upstream.queue(memoryview(data))
            try:
                await upstream.flush()
            except OSError as e:
                self._upstream_failed(upstream, e)

    async def _read_response(
            self,
            exchange: RelayExchange,
            upstream: TcpServerConnection,
    ) -> None:
        response = HttpParser(
            httpParserTypes.RESPONSE_PARSER,
            request_method=exchange.method,
        )
        exchange.response = response
        raw = bytearray()
        while True:
            try:
                data = await upstream.recv(self.config.server_recvbuf_size)
            except OSError as e:
                self._upstream_failed(upstream, e)
            if data is None:
                if response.eof():
                    break
                self._upstream_failed(
                    upstream, 'connection closed before response was complete',
                )
            raw += data
            try:
                response.parse(data)
                # Interim 1xx responses are not relayed
                while response.is_complete and response.is_interim_response:
                    del raw[:response.consumed]
                    response = HttpParser(
                        httpParserTypes.RESPONSE_PARSER,
                        request_method=exchange.method,
                    )
                    exchange.response = response
                    if raw:
                        response.parse(bytes(raw))
            except HttpProtocolException as e:
                self._upstream_failed(upstream, e)
            if response.is_complete:
                break
        exchange.response_raw = raw[:response.consumed]

    async def _release(self, exchange: RelayExchange) -> None:
        self.client.queue(memoryview(exchange.response_raw))
        await self.client.flush()
        exchange.released_at = asyncio.get_running_loop().time()

    def _upstream_failed(self, upstream: TcpServerConnection, reason: Any) -> NoReturn:
        host, port = upstream.addr
        logger.warning(
            'Upstream %s:%d failed: %s', host, port, reason,
        )
        raise ProxyConnectionFailed(host, port, str(reason))

    def _access_log(self, exchange: RelayExchange) -> None:
        assert exchange.response and exchange.released_at is not None
        held_for = exchange.held_for or 0.0
        upstream_time = exchange.upstream_time or 0.0
        context: Dict[str, Any] = {
            'client_ip': self.client.addr[0],
            'client_port': self.client.addr[1],
            'request_method': text_(exchange.method),
            'request_path': text_(exchange.path),
            'upstream': self.config.upstream,
            'response_code': exchange.response_status,
            'response_reason': text_(exchange.response_reason or b''),
            'response_bytes': len(exchange.response_raw),
            'upstream_ms': round(upstream_time * 1000),
            'held_ms': round((held_for - upstream_time) * 1000),
            'connection_time_ms': '%.2f' % (held_for * 1000),
        }
        logger.info(DEFAULT_RELAY_ACCESS_LOG_FORMAT.format_map(context))
