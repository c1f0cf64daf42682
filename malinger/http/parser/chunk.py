# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
from typing import List, Tuple, Optional, NamedTuple

from ..exception import HttpProtocolException
from ...common.utils import bytes_, find_http_line
from ...common.constants import CRLF, DEFAULT_BUFFER_SIZE


# Chunk sizes are bare hex tokens, no sign, prefix or separators
HEX_DIGITS = b'0123456789abcdefABCDEF'


ChunkParserStates = NamedTuple(
    'ChunkParserStates', [
        ('WAITING_FOR_SIZE', int),
        ('WAITING_FOR_DATA', int),
        ('WAITING_FOR_DATA_END', int),
        ('WAITING_FOR_TRAILER', int),
        ('COMPLETE', int),
    ],
)
chunkParserStates = ChunkParserStates(1, 2, 3, 4, 5)


class ChunkParser:
    """HTTP chunked encoding body parser.

    ``parse`` returns bytes found after the terminating chunk, which belong
    to whatever follows on the connection."""

    def __init__(self) -> None:
        self.state = chunkParserStates.WAITING_FOR_SIZE
        self.body = bytearray()     # Parsed chunks
        self.chunk = b''            # Partial size/trailer line or chunk data
        # Expected size of next following chunk
        self.size: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return self.state == chunkParserStates.COMPLETE

    def parse(self, raw: bytes) -> bytes:
        more = len(raw) > 0
        while more and self.state != chunkParserStates.COMPLETE:
            more, raw = self.process(raw)
        return raw

    def process(self, raw: bytes) -> Tuple[bool, bytes]:
        if self.state in (
                chunkParserStates.WAITING_FOR_SIZE,
                chunkParserStates.WAITING_FOR_DATA_END,
                chunkParserStates.WAITING_FOR_TRAILER,
        ):
            # Consume prior partial line in buffer
            raw = self.chunk + raw
            self.chunk = b''
            line, raw = find_http_line(raw)
            if line is None:
                self.chunk = raw
                return False, b''
            self._process_line(line)
        elif self.state == chunkParserStates.WAITING_FOR_DATA:
            assert self.size is not None
            remaining = self.size - len(self.chunk)
            self.chunk += raw[:remaining]
            raw = raw[remaining:]
            if len(self.chunk) == self.size:
                self.body += self.chunk
                self.state = chunkParserStates.WAITING_FOR_DATA_END
                self.chunk = b''
                self.size = None
        return len(raw) > 0, raw

    def _process_line(self, line: bytes) -> None:
        if self.state == chunkParserStates.WAITING_FOR_DATA_END:
            if line != b'':
                raise HttpProtocolException('Invalid chunk terminator %r' % line)
            self.state = chunkParserStates.WAITING_FOR_SIZE
        elif self.state == chunkParserStates.WAITING_FOR_TRAILER:
            if line == b'':
                self.state = chunkParserStates.COMPLETE
        else:
            # Ignore chunk extensions, if any
            size = line.split(b';', 1)[0].strip()
            if not size or size.strip(HEX_DIGITS):
                raise HttpProtocolException('Invalid chunk size %r' % line)
            self.size = int(size, 16)
            if self.size == 0:
                self.size = None
                self.state = chunkParserStates.WAITING_FOR_TRAILER
            else:
                self.state = chunkParserStates.WAITING_FOR_DATA

    @staticmethod
    def to_chunks(raw: bytes, chunk_size: int = DEFAULT_BUFFER_SIZE) -> bytes:
        chunks: List[bytes] = []
        for i in range(0, len(raw), chunk_size):
            chunk = raw[i: i + chunk_size]
            chunks.append(bytes_('{:x}'.format(len(chunk))))
            chunks.append(chunk)
        chunks.append(bytes_('{:x}'.format(0)))
        chunks.append(b'')
        return CRLF.join(chunks) + CRLF
