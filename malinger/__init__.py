# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from .malinger import Malinger, main, run, entry_point
from .testing import TestCase


__all__ = [
    # PyPi package entry_point
    'entry_point',
    # Embed malinger
    'main',
    'run',
    'Malinger',
    # Unit testing against a slow upstream
    'TestCase',
]
