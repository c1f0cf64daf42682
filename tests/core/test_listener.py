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
import socket
from unittest import mock

import pytest
from pytest_mock import MockerFixture

from malinger.common.flag import FlagParser
from malinger.core.config import ServerConfig
from malinger.core.listener import TcpSocketListener

from ..test_assertions import Assertions


async def handler(*_args: object) -> None:
    pass    # pragma: no cover


class TestTcpSocketListener(Assertions):

    @pytest.mark.asyncio    # type: ignore[misc]
    async def test_setup_and_teardown(self, mocker: MockerFixture) -> None:
        mock_socket = mocker.patch('socket.socket')
        mock_start_server = mocker.patch(
            'asyncio.start_server', new_callable=mock.AsyncMock,
        )
        server = mock.MagicMock()
        server.wait_closed = mock.AsyncMock()
        mock_start_server.return_value = server
        sock = mock_socket.return_value
        sock.getsockname.return_value = ('0.0.0.0', 8899)

        config = ServerConfig.from_flags(
            FlagParser.initialize(remote_host='localhost', port=0),
        )
        async with TcpSocketListener(config, handler) as listener:
            mock_socket.assert_called_with(
                socket.AF_INET6 if config.hostname.version == 6 else socket.AF_INET,
                socket.SOCK_STREAM,
            )
            self.assertEqual(sock.setsockopt.call_count, 2)
            self.assertEqual(
                sock.setsockopt.call_args_list[0][0],
                (socket.SOL_SOCKET, socket.SO_REUSEADDR, 1),
            )
            self.assertEqual(
                sock.setsockopt.call_args_list[1][0],
                (socket.IPPROTO_TCP, socket.TCP_NODELAY, 1),
            )
            sock.bind.assert_called_with((str(config.hostname), 0))
            sock.listen.assert_called_with(config.backlog)
            sock.setblocking.assert_called_with(False)
            self.assertEqual(listener.port, 8899)
            self.assertEqual(mock_start_server.await_args[1]['ssl'], None)
        server.close.assert_called_once()
        server.wait_closed.assert_awaited_once()

    @pytest.mark.asyncio    # type: ignore[misc]
    async def test_missing_tls_material_prevents_binding(self, mocker: MockerFixture) -> None:
        mock_socket = mocker.patch('socket.socket')
        config = ServerConfig.from_flags(
            FlagParser.initialize(
                remote_host='localhost',
                ssl=True,
                cert_file='/nonexistent/certificate.pem',
                key_file='/nonexistent/privatekey.pem',
            ),
        )
        listener = TcpSocketListener(config, handler)
        with pytest.raises(OSError):
            await listener.setup()
        mock_socket.assert_not_called()

    @pytest.mark.asyncio    # type: ignore[misc]
    async def test_bind_failure_closes_socket(self, mocker: MockerFixture) -> None:
        mock_socket = mocker.patch('socket.socket')
        sock = mock_socket.return_value
        sock.bind.side_effect = OSError('Address already in use')
        config = ServerConfig.from_flags(
            FlagParser.initialize(remote_host='localhost', port=8899),
        )
        with pytest.raises(OSError):
            await TcpSocketListener(config, handler).setup()
        sock.close.assert_called_once()
