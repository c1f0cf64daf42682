# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import ipaddress
from typing import Tuple, Union


IpAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
HostPort = Tuple[str, int]
