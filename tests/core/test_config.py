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
import unittest
import ipaddress

from malinger.common.flag import FlagParser
from malinger.core.config import ServerConfig
from malinger.common.constants import DEFAULT_CA_FILE


class TestServerConfig(unittest.TestCase):

    def test_defaults(self) -> None:
        config = ServerConfig.from_flags(FlagParser.initialize(['--remote-host', 'example.com']))
        self.assertEqual(config.hostname, ipaddress.ip_address('0.0.0.0'))
        self.assertEqual(config.port, 8080)
        self.assertFalse(config.use_tls)
        self.assertEqual(config.delay, 0.0)
        self.assertEqual(config.remote_host, 'example.com')
        self.assertEqual(config.remote_port, 80)
        self.assertFalse(config.remote_uses_tls)
        self.assertEqual(config.ca_file, DEFAULT_CA_FILE)
        self.assertEqual(config.backlog, 100)
        self.assertEqual(config.scheme, 'http')
        self.assertEqual(config.upstream, 'http://example.com:80')

    def test_from_args(self) -> None:
        config = ServerConfig.from_flags(
            FlagParser.initialize([
                '--port', '8443',
                '--ssl',
                '--delay', '2.5',
                '--remote-host', 'api.example.com:9443',
                '--remote-ssl',
            ]),
        )
        self.assertEqual(config.port, 8443)
        self.assertTrue(config.use_tls)
        self.assertEqual(config.scheme, 'https')
        self.assertEqual(config.delay, 2.5)
        self.assertEqual(config.remote_port, 9443)
        self.assertTrue(config.remote_uses_tls)
        self.assertEqual(config.upstream, 'https://api.example.com:9443')

    def test_immutable(self) -> None:
        config = ServerConfig.from_flags(FlagParser.initialize(remote_host='example.com'))
        with self.assertRaises(AttributeError):
            config.delay = 10.0   # type: ignore[misc]
