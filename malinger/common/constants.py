# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import os
import platform
import ipaddress

import certifi

from .version import __version__


SYS_PLATFORM = platform.system()
IS_WINDOWS = SYS_PLATFORM == 'Windows'

CRLF = b'\r\n'
COLON = b':'
WHITESPACE = b' '
COMMA = b','
SLASH = b'/'
HTTP_PROTO = b'http'
HTTPS_PROTO = HTTP_PROTO + b's'
HTTP_1_0 = HTTP_PROTO.upper() + SLASH + b'1.0'
HTTP_1_1 = HTTP_PROTO.upper() + SLASH + b'1.1'

MALINGER_AGENT_HEADER_KEY = b'Server'
MALINGER_AGENT_HEADER_VALUE = b'malinger v' + \
    __version__.encode('utf-8', 'strict')

# Defaults
DEFAULT_BACKLOG = 100
DEFAULT_BUFFER_SIZE = 128 * 1024
DEFAULT_TIMEOUT = 10.0
DEFAULT_CLIENT_RECVBUF_SIZE = DEFAULT_BUFFER_SIZE
DEFAULT_SERVER_RECVBUF_SIZE = DEFAULT_BUFFER_SIZE
DEFAULT_CERT_FILE = os.path.join(os.curdir, 'certificate.pem')
DEFAULT_KEY_FILE = os.path.join(os.curdir, 'privatekey.pem')
DEFAULT_CA_FILE = certifi.where()
DEFAULT_DELAY = 0.0
DEFAULT_ENABLE_SSL = False
DEFAULT_ENABLE_REMOTE_SSL = False
DEFAULT_REMOTE_HOST = None
DEFAULT_IPV4_HOSTNAME = ipaddress.IPv4Address('0.0.0.0')
DEFAULT_PORT = 8080
DEFAULT_HTTP_PORT = 80
DEFAULT_HTTPS_PORT = 443
DEFAULT_LOG_FILE = None
DEFAULT_LOG_FORMAT = '%(asctime)s - pid:%(process)d [%(levelname)-.1s] %(module)s.%(funcName)s:%(lineno)d - %(message)s'
DEFAULT_LOG_LEVEL = 'INFO'
DEFAULT_RELAY_ACCESS_LOG_FORMAT = '{client_ip}:{client_port} - ' + \
    '{request_method} {request_path} -> {upstream} - ' + \
    '{response_code} {response_reason} - {response_bytes} bytes - ' + \
    'upstream {upstream_ms}ms - held {held_ms}ms - {connection_time_ms}ms'
DEFAULT_VERSION = False
