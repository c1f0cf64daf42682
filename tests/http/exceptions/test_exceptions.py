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

from malinger.http.parser import HttpParser
from malinger.http.exception import (
    HttpRequestRejected, ProxyConnectionFailed, ClientConnectionAborted,
    HttpProtocolException,
)
from malinger.http.responses import BAD_GATEWAY_RESPONSE_PKT
from malinger.common.utils import build_http_response
from malinger.common.constants import CRLF


class TestHttpExceptions(unittest.TestCase):

    def setUp(self) -> None:
        self.request = HttpParser.request(b'GET / HTTP/1.1\r\n\r\n')

    def test_empty_response(self) -> None:
        e = HttpRequestRejected()
        self.assertEqual(e.response(self.request), None)

    def test_status_code_response(self) -> None:
        e = HttpRequestRejected(status_code=400, reason=b'Bad Request')
        self.assertEqual(
            e.response(self.request), CRLF.join([
                b'HTTP/1.1 400 Bad Request',
                b'Connection: close',
                CRLF,
            ]),
        )

    def test_body_response(self) -> None:
        e = HttpRequestRejected(
            status_code=404, reason=b'NOT FOUND',
            body=b'Nothing here',
        )
        self.assertEqual(
            e.response(self.request),
            build_http_response(
                404, reason=b'NOT FOUND',
                body=b'Nothing here',
                conn_close=True,
            ),
        )

    def test_proxy_connection_failed(self) -> None:
        e = ProxyConnectionFailed('example.com', 443, 'Connection refused')
        self.assertEqual(e.host, 'example.com')
        self.assertEqual(e.port, 443)
        self.assertEqual(e.reason, 'Connection refused')
        self.assertEqual(e.response(self.request), BAD_GATEWAY_RESPONSE_PKT)
        self.assertIsInstance(e, HttpProtocolException)

    def test_client_connection_aborted(self) -> None:
        e = ClientConnectionAborted('gone')
        self.assertIsNone(e.response(self.request))
        self.assertEqual(str(e), 'gone')
        self.assertIsInstance(e, HttpProtocolException)
