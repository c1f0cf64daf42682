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
from unittest import mock

import pytest
from pytest_mock import MockerFixture

from malinger.common.flag import FlagParser
from malinger.core.config import ServerConfig
from malinger.core.connection import TcpClientConnection
from malinger.http.handler import HttpProtocolHandler

from ..test_assertions import Assertions


class TestHttpProtocolHandler(Assertions):

    @pytest.fixture(autouse=True)   # type: ignore[misc]
    def _setUp(self, mocker: MockerFixture) -> None:
        self.config = ServerConfig.from_flags(
            FlagParser.initialize(remote_host='localhost:8000'),
        )
        self.writer = mock.MagicMock()
        self.writer.drain = mock.AsyncMock()
        self.mock_handle = mocker.patch(
            'malinger.relay.RequestRelay.handle',
            new_callable=mock.AsyncMock,
        )

    def handler(self, *packets: bytes) -> HttpProtocolHandler:
        reader = asyncio.StreamReader()
        for packet in packets:
            reader.feed_data(packet)
        reader.feed_eof()
        return HttpProtocolHandler(
            TcpClientConnection(reader, self.writer, addr=('127.0.0.1', 54382)),
            self.config,
        )

    @pytest.mark.asyncio    # type: ignore[misc]
    async def test_client_closes_without_request(self) -> None:
        await self.handler().run()
        self.mock_handle.assert_not_awaited()
        self.writer.write.assert_not_called()
        self.writer.close.assert_called_once()

    @pytest.mark.asyncio    # type: ignore[misc]
    async def test_client_closes_mid_request_head(self) -> None:
        await self.handler(b'GET / HTTP/1.1\r\nHost: exa').run()
        self.mock_handle.assert_not_awaited()
        self.writer.write.assert_not_called()
        self.writer.close.assert_called_once()

    @pytest.mark.asyncio    # type: ignore[misc]
    async def test_request_handed_to_relay(self) -> None:
        self.mock_handle.return_value.can_reuse_connection = True
        handler = self.handler(b'GET /a HTTP/1.1\r\n', b'Host: example.com\r\n\r\n')
        await handler.run()
        self.mock_handle.assert_awaited_once()
        request = self.mock_handle.await_args[0][0]
        self.assertEqual(request.parser.path, b'/a')
        self.assertTrue(request.parser.is_complete)
        self.writer.close.assert_called_once()

    @pytest.mark.asyncio    # type: ignore[misc]
    async def test_connection_not_reused(self) -> None:
        self.mock_handle.return_value.can_reuse_connection = False
        await self.handler(
            b'GET /a HTTP/1.1\r\n\r\nGET /b HTTP/1.1\r\n\r\n',
        ).run()
        self.mock_handle.assert_awaited_once()

    @pytest.mark.asyncio    # type: ignore[misc]
    async def test_bad_request(self) -> None:
        await self.handler(b'GARBAGE\r\n\r\n').run()
        self.mock_handle.assert_not_awaited()
        self.writer.write.assert_called_once()
        self.assertTrue(
            bytes(self.writer.write.call_args[0][0]).startswith(
                b'HTTP/1.1 400 Bad Request\r\n',
            ),
        )
        self.writer.close.assert_called_once()
