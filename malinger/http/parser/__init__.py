# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.

    .. spelling::

       http
       Submodules
"""
from .chunk import ChunkParser, chunkParserStates
from .types import httpParserTypes, httpParserStates
from .parser import HttpParser


__all__ = [
    'HttpParser',
    'httpParserTypes',
    'httpParserStates',
    'ChunkParser',
    'chunkParserStates',
]
