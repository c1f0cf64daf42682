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
import os
import shutil
import tempfile
import unittest
import subprocess
from unittest import mock

import pytest

from malinger.common import pki


class TestPki(unittest.TestCase):

    def setUp(self) -> None:
        self._tempdir = tempfile.mkdtemp()
        return super().setUp()

    def tearDown(self) -> None:
        shutil.rmtree(self._tempdir)
        return super().tearDown()

    @mock.patch('subprocess.Popen')
    def test_run_openssl_command(self, mock_popen: mock.Mock) -> None:
        command = ['my', 'custom', 'command']
        mock_popen.return_value.returncode = 0
        mock_popen.return_value.communicate.return_value = (b'', b'')
        self.assertTrue(pki.run_openssl_command(command, 10))
        mock_popen.assert_called_with(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        mock_popen.return_value.communicate.assert_called_with(timeout=10)

    @mock.patch('subprocess.Popen')
    def test_run_openssl_command_failure(self, mock_popen: mock.Mock) -> None:
        mock_popen.return_value.returncode = 1
        mock_popen.return_value.communicate.return_value = (b'', b'unable to load key')
        with self.assertLogs('malinger.common.pki', level='ERROR'):
            self.assertFalse(pki.run_openssl_command(['openssl', 'genrsa'], 10))

    def test_get_ext_config(self) -> None:
        self.assertEqual(pki.get_ext_config(None, None), b'')
        self.assertEqual(pki.get_ext_config([], None), b'')
        self.assertEqual(
            pki.get_ext_config(['localhost'], None),
            b'\nsubjectAltName=DNS:localhost',
        )
        self.assertEqual(
            pki.get_ext_config(None, 'serverAuth'),
            b'\nextendedKeyUsage=serverAuth',
        )
        self.assertEqual(
            pki.get_ext_config(['localhost', 'api.local'], 'serverAuth'),
            b'\nsubjectAltName=DNS:localhost,DNS:api.local\nextendedKeyUsage=serverAuth',
        )

    def test_ssl_config_no_ext(self) -> None:
        with pki.ssl_config() as (config_path, has_extension):
            self.assertFalse(has_extension)
            with open(config_path, 'rb') as config:
                self.assertEqual(config.read(), pki.DEFAULT_CONFIG)
        self.assertFalse(os.path.exists(config_path))

    def test_ssl_config(self) -> None:
        with pki.ssl_config(['localhost']) as (config_path, has_extension):
            self.assertTrue(has_extension)
            with open(config_path, 'rb') as config:
                self.assertEqual(
                    config.read(),
                    pki.DEFAULT_CONFIG +
                    b'\n[MALINGER]\nsubjectAltName=DNS:localhost',
                )

    @mock.patch('malinger.common.pki.run_openssl_command')
    def test_gen_private_key(self, mock_run: mock.Mock) -> None:
        mock_run.return_value = True
        self.assertTrue(pki.gen_private_key('key.pem'))
        mock_run.assert_called_with(
            ['openssl', 'genrsa', '-out', 'key.pem', '2048'], 10,
        )
        self.assertTrue(pki.gen_private_key('key.pem', 'secret', bits=4096))
        mock_run.assert_called_with(
            [
                'openssl', 'genrsa', '-aes256', '-passout', 'pass:secret',
                '-out', 'key.pem', '4096',
            ], 10,
        )

    @mock.patch('malinger.common.pki.run_openssl_command')
    def test_gen_self_signed(self, mock_run: mock.Mock) -> None:
        mock_run.return_value = True
        self.assertTrue(pki.gen_self_signed('cert.pem', 'key.pem', hostname='api.local'))
        self.assertEqual(mock_run.call_count, 2)
        gen_cert_command = mock_run.call_args_list[1][0][0]
        self.assertIn('/CN=api.local', gen_cert_command)
        self.assertIn('MALINGER', gen_cert_command)
        self.assertEqual(gen_cert_command[gen_cert_command.index('-key') + 1], 'key.pem')
        self.assertEqual(gen_cert_command[gen_cert_command.index('-out') + 1], 'cert.pem')

    @mock.patch('malinger.common.pki.run_openssl_command')
    def test_gen_self_signed_stops_when_key_fails(self, mock_run: mock.Mock) -> None:
        mock_run.return_value = False
        self.assertFalse(pki.gen_self_signed('cert.pem', 'key.pem'))
        mock_run.assert_called_once()

    @mock.patch('malinger.common.pki.gen_self_signed')
    def test_main_gen_self_signed(self, mock_gen: mock.Mock) -> None:
        mock_gen.return_value = True
        self.assertEqual(
            pki.main([
                'gen_self_signed',
                '--public-key-path', 'cert.pem',
                '--private-key-path', 'key.pem',
                '--hostname', 'api.local',
            ]),
            0,
        )
        mock_gen.assert_called_once_with(
            'cert.pem', 'key.pem', hostname='api.local', openssl='openssl',
        )

    def test_main_invalid_action(self) -> None:
        with self.assertLogs('malinger.common.pki', level='ERROR'):
            self.assertEqual(pki.main(['make_coffee']), 1)

    def test_main_remove_passphrase_requires_password(self) -> None:
        with self.assertLogs('malinger.common.pki', level='ERROR'):
            self.assertEqual(pki.main(['remove_passphrase']), 1)

    @pytest.mark.skipif(
        shutil.which('openssl') is None,
        reason='openssl binary not available',
    )  # type: ignore[misc]
    def test_gen_self_signed_with_openssl(self) -> None:
        cert_path = os.path.join(self._tempdir, 'certificate.pem')
        key_path = os.path.join(self._tempdir, 'privatekey.pem')
        self.assertTrue(pki.gen_self_signed(cert_path, key_path))
        self.assertTrue(os.path.exists(cert_path))
        self.assertTrue(os.path.exists(key_path))
