# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import argparse
from typing import NamedTuple, Optional

from ..common.types import IpAddress


class ServerConfig(NamedTuple):
    """Immutable runtime configuration, built once at startup.

    Every connection handler receives the same instance.
    """
    hostname: IpAddress
    port: int
    use_tls: bool
    cert_file: str
    key_file: str
    delay: float
    remote_host: str
    remote_port: int
    remote_uses_tls: bool
    ca_file: Optional[str]
    backlog: int
    client_recvbuf_size: int
    server_recvbuf_size: int

    @classmethod
    def from_flags(cls, flags: argparse.Namespace) -> 'ServerConfig':
        return cls(
            hostname=flags.hostname,
            port=flags.port,
            use_tls=flags.ssl,
            cert_file=flags.cert_file,
            key_file=flags.key_file,
            delay=flags.delay,
            remote_host=flags.remote_host,
            remote_port=flags.remote_port,
            remote_uses_tls=flags.remote_ssl,
            ca_file=flags.ca_file,
            backlog=flags.backlog,
            client_recvbuf_size=flags.client_recvbuf_size,
            server_recvbuf_size=flags.server_recvbuf_size,
        )

    @property
    def scheme(self) -> str:
        return 'https' if self.use_tls else 'http'

    @property
    def remote_scheme(self) -> str:
        return 'https' if self.remote_uses_tls else 'http'

    @property
    def upstream(self) -> str:
        """Human readable upstream origin, e.g. ``https://example.com:443``."""
        return '%s://%s:%d' % (self.remote_scheme, self.remote_host, self.remote_port)
