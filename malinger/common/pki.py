# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.

    .. spelling::

       pki

    Wraps the ``openssl`` binary to produce the PEM encoded
    ``privatekey.pem`` / ``certificate.pem`` pair consumed by ``--ssl``::

        python -m malinger.common.pki gen_self_signed --hostname localhost
"""
import os
import sys
import uuid
import logging
import argparse
import tempfile
import contextlib
import subprocess
from typing import List, Tuple, Optional, Generator

from .utils import bytes_
from .version import __version__
from .constants import COMMA, DEFAULT_CERT_FILE, DEFAULT_KEY_FILE


logger = logging.getLogger(__name__)


DEFAULT_CONFIG = b'''[ req ]
distinguished_name	= req_distinguished_name
attributes		    = req_attributes

[ req_distinguished_name ]
countryName			    = Country Name (2 letter code)
countryName_min			= 2
countryName_max			= 2
stateOrProvinceName		= State or Province Name (full name)
localityName			= Locality Name (eg, city)
organizationName		= Organization Name (eg, company)
organizationalUnitName	= Organizational Unit Name (eg, section)
commonName			    = Common Name (eg, fully qualified host name)
commonName_max			= 64
emailAddress			= Email Address
emailAddress_max		= 64

[ req_attributes ]
challengePassword		= A challenge password
challengePassword_min	= 4
challengePassword_max	= 20'''


def remove_passphrase(
        key_in_path: str,
        password: str,
        key_out_path: str,
        timeout: int = 10,
        openssl: str = 'openssl',
) -> bool:
    """Remove passphrase from a private key."""
    command = [
        openssl, 'rsa',
        '-passin', 'pass:%s' % password,
        '-in', key_in_path,
        '-out', key_out_path,
    ]
    return run_openssl_command(command, timeout)


def gen_private_key(
        key_path: str,
        password: Optional[str] = None,
        bits: int = 2048,
        timeout: int = 10,
        openssl: str = 'openssl',
) -> bool:
    """Generates a private key, encrypted only when a password is given."""
    command = [openssl, 'genrsa']
    if password is not None:
        command.extend(['-aes256', '-passout', 'pass:%s' % password])
    command.extend(['-out', key_path, str(bits)])
    return run_openssl_command(command, timeout)


def gen_public_key(
        public_key_path: str,
        private_key_path: str,
        private_key_password: Optional[str],
        subject: str,
        alt_subj_names: Optional[List[str]] = None,
        extended_key_usage: Optional[str] = None,
        validity_in_days: int = 365,
        timeout: int = 10,
        openssl: str = 'openssl',
) -> bool:
    """For a given private key, generates a corresponding self-signed certificate."""
    with ssl_config(alt_subj_names, extended_key_usage) as (config_path, has_extension):
        command = [
            openssl, 'req', '-new', '-x509', '-sha256',
            '-days', str(validity_in_days), '-subj', subject,
            '-config', config_path,
            '-key', private_key_path, '-out', public_key_path,
        ]
        if private_key_password is not None:
            command.extend(['-passin', 'pass:%s' % private_key_password])
        if has_extension:
            command.extend([
                '-extensions', 'MALINGER',
            ])
        return run_openssl_command(command, timeout)


def gen_self_signed(
        cert_path: str = DEFAULT_CERT_FILE,
        key_path: str = DEFAULT_KEY_FILE,
        hostname: str = 'localhost',
        validity_in_days: int = 365,
        timeout: int = 10,
        openssl: str = 'openssl',
) -> bool:
    """Generates an unencrypted private key and a self-signed certificate for ``hostname``."""
    if not gen_private_key(key_path, timeout=timeout, openssl=openssl):
        return False
    return gen_public_key(
        cert_path, key_path, None, '/CN=%s' % hostname,
        alt_subj_names=[hostname],
        extended_key_usage='serverAuth',
        validity_in_days=validity_in_days,
        timeout=timeout,
        openssl=openssl,
    )


def get_ext_config(
        alt_subj_names: Optional[List[str]] = None,
        extended_key_usage: Optional[str] = None,
) -> bytes:
    config = b''
    # Add SAN extension
    if alt_subj_names is not None and len(alt_subj_names) > 0:
        alt_names = []
        for cname in alt_subj_names:
            alt_names.append(b'DNS:%s' % bytes_(cname))
        config += b'\nsubjectAltName=' + COMMA.join(alt_names)
    # Add extendedKeyUsage section
    if extended_key_usage is not None:
        config += b'\nextendedKeyUsage=' + bytes_(extended_key_usage)
    return config


@contextlib.contextmanager
def ssl_config(
        alt_subj_names: Optional[List[str]] = None,
        extended_key_usage: Optional[str] = None,
) -> Generator[Tuple[str, bool], None, None]:
    config = DEFAULT_CONFIG

    has_extension = False
    if (alt_subj_names is not None and len(alt_subj_names) > 0) or \
            extended_key_usage is not None:
        has_extension = True
        config += b'\n[MALINGER]'

    # Add custom extensions
    config += get_ext_config(alt_subj_names, extended_key_usage)

    # Write config to temp file
    config_path = os.path.join(tempfile.gettempdir(), uuid.uuid4().hex)
    with open(config_path, 'wb') as cnf:
        cnf.write(config)

    try:
        yield config_path, has_extension
    finally:
        os.remove(config_path)


def run_openssl_command(command: List[str], timeout: int) -> bool:
    cmd = subprocess.Popen(
        command,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )
    _, err = cmd.communicate(timeout=timeout)
    if cmd.returncode != 0:
        logger.error('%s failed: %s', command[1], err.decode('utf-8', 'replace'))
    return cmd.returncode == 0


def main(input_args: Optional[List[str]] = None) -> int:
    available_actions = (
        'remove_passphrase', 'gen_private_key', 'gen_public_key',
        'gen_self_signed',
    )

    parser = argparse.ArgumentParser(
        description='malinger v%s : PKI Utility' % __version__,
    )
    parser.add_argument(
        'action',
        type=str,
        default=None,
        help='Valid actions: ' + ', '.join(available_actions),
    )
    parser.add_argument(
        '--password',
        type=str,
        default=None,
        help='Password to use for encryption. Default: no encryption',
    )
    parser.add_argument(
        '--private-key-path',
        type=str,
        default=DEFAULT_KEY_FILE,
        help='Private key path. Default: %s' % DEFAULT_KEY_FILE,
    )
    parser.add_argument(
        '--public-key-path',
        type=str,
        default=DEFAULT_CERT_FILE,
        help='Public key path. Default: %s' % DEFAULT_CERT_FILE,
    )
    parser.add_argument(
        '--subject',
        type=str,
        default='/CN=localhost',
        help='Subject to use for public key generation. Default: /CN=localhost',
    )
    parser.add_argument(
        '--hostname',
        type=str,
        default='localhost',
        help='Hostname the self-signed certificate is issued for. Default: localhost',
    )
    parser.add_argument(
        '--openssl',
        type=str,
        default='openssl',
        help='Path to openssl binary.  By default, we assume openssl is in your PATH',
    )
    args = parser.parse_args(input_args)

    if args.action not in available_actions:
        logger.error(
            'Invalid action. Valid values ' +
            ', '.join(available_actions),
        )
        return 1
    if args.action == 'remove_passphrase' and args.password is None:
        logger.error('--password is required for remove_passphrase')
        return 1

    if args.action == 'gen_private_key':
        ok = gen_private_key(
            args.private_key_path,
            args.password, openssl=args.openssl,
        )
    elif args.action == 'gen_public_key':
        ok = gen_public_key(
            args.public_key_path, args.private_key_path,
            args.password, args.subject, openssl=args.openssl,
        )
    elif args.action == 'remove_passphrase':
        ok = remove_passphrase(
            args.private_key_path, args.password,
            args.private_key_path, openssl=args.openssl,
        )
    else:
        ok = gen_self_signed(
            args.public_key_path, args.private_key_path,
            hostname=args.hostname, openssl=args.openssl,
        )
    return 0 if ok else 1


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
