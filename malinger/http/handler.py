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
import logging
import contextlib
from typing import Optional

from .parser import HttpParser, httpParserTypes
from .exception import HttpProtocolException, ClientConnectionAborted
from ..core.config import ServerConfig
from ..core.connection import TcpClientConnection
from ..relay import RequestRelay, InboundRequest


logger = logging.getLogger(__name__)


class HttpProtocolHandler:
    """HTTP protocol handler, one per accepted client connection.

    Reads inbound requests one after another and hands each of them to
    :class:`RequestRelay`.  The connection is reused for the next request
    only when the previous exchange allows it.
    """

    def __init__(
            self,
            client: TcpClientConnection,
            config: ServerConfig,
            ssl_context: Optional[ssl.SSLContext] = None,
    ) -> None:
        self.client = client
        self.config = config
        self.relay = RequestRelay(config, client, ssl_context)
        # Request currently being served
        self.request: Optional[HttpParser] = None

    async def run(self) -> None:
        logger.debug('Accepted connection from %s', self.client.address)
        try:
            while await self._serve_request():
                pass
        except ClientConnectionAborted as e:
            logger.debug('%s: %s', self.client.address, e)
        except HttpProtocolException as e:
            logger.debug('HttpProtocolException: %s', e)
            response: Optional[memoryview] = e.response(self.request)
            if response:
                self.client.queue(response)
                with contextlib.suppress(OSError):
                    await self.client.flush()
        except OSError as e:
            logger.debug(
                'Connection %s errored: %s', self.client.address, e,
            )
        finally:
            self.client.close()
            logger.debug('Closed connection from %s', self.client.address)

    async def _serve_request(self) -> bool:
        """Serves one request, returns True if connection may be reused."""
        request = await self._read_request()
        if request is None:
            return False
        exchange = await self.relay.handle(request)
        return exchange.can_reuse_connection

    async def _read_request(self) -> Optional[InboundRequest]:
        """Reads until request head is complete.

        Returns None if client closed the connection between requests."""
        self.request = HttpParser(httpParserTypes.REQUEST_PARSER)
        request: Optional[InboundRequest] = None
        while not self.request.is_headers_complete:
            if self.client.pending:
                raw = bytes(self.client.pending)
                self.client.pending.clear()
            else:
                data = await self.client.recv(self.config.client_recvbuf_size)
                if data is None:
                    if request is None:
                        return None
                    raise ClientConnectionAborted(
                        'Client closed connection before sending complete request head',
                    )
                raw = data.tobytes()
            if request is None:
                # Delay is measured from the first byte of the request
                request = InboundRequest(
                    self.client,
                    self.request,
                    asyncio.get_running_loop().time(),
                    self.config.client_recvbuf_size,
                )
            request.feed(raw)
        return request
