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
"""
from typing import Dict, List, Type, Tuple, Union, TypeVar, Optional

from .chunk import ChunkParser
from .types import httpParserTypes, httpParserStates
from ..codes import httpStatusCodes
from ..methods import httpMethods
from ..exception import HttpProtocolException
from ...common.utils import text_
from ...common.constants import CRLF, COLON, HTTP_1_0, HTTP_1_1, WHITESPACE


T = TypeVar('T', bound='HttpParser')


class HttpParser:
    """HTTP request/response parser.

    Parser only observes the framing of a message.  Callers that need the
    message verbatim keep the raw bytes they feed and use :attr:`consumed`
    to find out how many of them belong to the current message.  Bytes
    following a complete message are left in :attr:`buffer`.
    """

    def __init__(
            self, parser_type: int,
            request_method: Optional[bytes] = None,
    ) -> None:
        self.state: int = httpParserStates.INITIALIZED
        self.type: int = parser_type
        # Request attributes
        self.path: Optional[bytes] = None
        self.method: Optional[bytes] = None
        # Response attributes
        self.code: Optional[bytes] = None
        self.reason: Optional[bytes] = None
        self.version: Optional[bytes] = None
        # Method of the request this response answers
        self.request_method: Optional[bytes] = request_method
        # Total size of raw bytes passed for parsing
        self.total_size: int = 0
        # Buffer to hold unprocessed bytes
        self.buffer: Optional[bytes] = None
        # Internal headers data structure:
        # - Keys are lower case header names.
        # - Values are 2-tuple containing original
        #   header and it's value as received.
        self.headers: Optional[Dict[bytes, Tuple[bytes, bytes]]] = None
        self.body: Optional[bytearray] = None
        self.chunk: Optional[ChunkParser] = None
        # Deduced states from the packet
        self._is_chunked_encoded: bool = False
        self._content_expected: bool = False
        self._content_length: Optional[int] = None
        self._skipped_empty_line: bool = False

    @classmethod
    def request(cls: Type[T], raw: bytes) -> T:
        parser = cls(httpParserTypes.REQUEST_PARSER)
        parser.parse(raw)
        return parser

    @classmethod
    def response(cls: Type[T], raw: bytes, request_method: Optional[bytes] = None) -> T:
        parser = cls(httpParserTypes.RESPONSE_PARSER, request_method=request_method)
        parser.parse(raw)
        return parser

    def header(self, key: bytes) -> bytes:
        """Convenient method to return original header value from internal data structure."""
        if self.headers is None or key.lower() not in self.headers:
            raise KeyError('%s not found in headers' % text_(key))
        return self.headers[key.lower()][1]

    def has_header(self, key: bytes) -> bool:
        """Returns true if header key was found in payload."""
        if self.headers is None:
            return False
        return key.lower() in self.headers

    def add_header(self, key: bytes, value: bytes) -> bytes:
        """Add/Update a header to internal data structure.

        Returns key with which passed (key, value) tuple is available."""
        if self.headers is None:
            self.headers = {}
        k = key.lower()
        self.headers[k] = (key, value)
        return k

    def add_headers(self, headers: List[Tuple[bytes, bytes]]) -> None:
        """Add/Update multiple headers to internal data structure"""
        for (key, value) in headers:
            self.add_header(key, value)

    @property
    def is_complete(self) -> bool:
        return self.state == httpParserStates.COMPLETE

    @property
    def is_headers_complete(self) -> bool:
        return self.state >= httpParserStates.HEADERS_COMPLETE

    @property
    def consumed(self) -> int:
        """Number of bytes fed so far that belong to this message."""
        return self.total_size - (len(self.buffer) if self.buffer else 0)

    @property
    def is_keep_alive(self) -> bool:
        """Returns true when the connection may carry another message after this one."""
        tokens: List[bytes] = [] if not self.has_header(b'Connection') else [
            token.strip() for token in self.header(b'Connection').lower().split(b',')
        ]
        if self.version == HTTP_1_1:
            return b'close' not in tokens
        if self.version == HTTP_1_0:
            return b'keep-alive' in tokens
        return False

    @property
    def is_interim_response(self) -> bool:
        """Returns true for 1xx informational responses, except protocol switching."""
        return self.type == httpParserTypes.RESPONSE_PARSER and \
            self.code is not None and \
            self.code.startswith(b'1') and \
            int(self.code) != httpStatusCodes.SWITCHING_PROTOCOLS

    @property
    def is_chunked_encoded(self) -> bool:
        """Returns true if transfer-encoding chunked is used."""
        return self._is_chunked_encoded

    @property
    def content_expected(self) -> bool:
        """Returns true if content-length is present and not 0."""
        return self._content_expected

    @property
    def body_expected(self) -> bool:
        """Returns true if content or chunked response is expected."""
        return self._content_expected or self._is_chunked_encoded

    @property
    def is_close_delimited(self) -> bool:
        """Returns true for responses whose body ends only when upstream closes the connection."""
        return self.type == httpParserTypes.RESPONSE_PARSER and \
            self.is_headers_complete and \
            not self._bodiless_response() and \
            not self._is_chunked_encoded and \
            self._content_length is None

    def parse(self, raw: Union[bytes, memoryview]) -> None:
        """Parses HTTP request or response out of raw bytes.

        Check for `HttpParser.state` after `parse` has successfully returned."""
        raw = bytes(raw)
        self.total_size += len(raw)
        if self.buffer:
            raw = self.buffer + raw
        self.buffer, more = None, len(raw) > 0
        while more and self.state != httpParserStates.COMPLETE:
            # gte with HEADERS_COMPLETE also encapsulated RCVING_BODY state
            if self.state >= httpParserStates.HEADERS_COMPLETE:
                more, raw = self._process_body(raw)
            elif self.state == httpParserStates.INITIALIZED:
                more, raw = self._process_line(raw)
            else:
                more, raw = self._process_headers(raw)
        self.buffer = None if raw == b'' else raw

    def eof(self) -> bool:
        """Signal that the peer closed its side of the connection.

        Completes close delimited responses.  Returns whether the
        message is now complete."""
        if self.is_close_delimited:
            self.state = httpParserStates.COMPLETE
        return self.is_complete

    def _process_body(self, raw: bytes) -> Tuple[bool, bytes]:
        # Ref: https://datatracker.ietf.org/doc/html/rfc7230#section-3.3.3
        # Transfer-Encoding takes preference over Content-Length.
        if self.body is None:
            self.body = bytearray()
        if self._is_chunked_encoded:
            if not self.chunk:
                self.chunk = ChunkParser()
            raw = self.chunk.parse(raw)
            self.body = self.chunk.body
            self.state = httpParserStates.COMPLETE \
                if self.chunk.is_complete \
                else httpParserStates.RCVING_BODY
            return False, raw
        if self._content_expected:
            assert self._content_length is not None
            self.state = httpParserStates.RCVING_BODY
            remaining = self._content_length - len(self.body)
            self.body += raw[:remaining]
            if len(self.body) == self._content_length:
                self.state = httpParserStates.COMPLETE
            return False, raw[remaining:]
        # Close delimited response body, everything
        # until connection close belongs to the body.
        self.state = httpParserStates.RCVING_BODY
        self.body += raw
        return False, b''

    def _process_headers(self, raw: bytes) -> Tuple[bool, bytes]:
        """Returns False when no CRLF could be found in received bytes."""
        while True:
            parts = raw.split(CRLF, 1)
            if len(parts) == 1:
                return False, raw
            line, raw = parts[0], parts[1]
            if line.strip() == b'':  # Blank line received.
                self._on_headers_complete()
                break
            self.state = httpParserStates.RCVING_HEADERS
            self._process_header(line)
        return len(raw) > 0, raw

    def _on_headers_complete(self) -> None:
        self.state = httpParserStates.HEADERS_COMPLETE
        if self.type == httpParserTypes.RESPONSE_PARSER:
            if self._bodiless_response():
                self.state = httpParserStates.COMPLETE
            elif self.is_close_delimited:
                self.state = httpParserStates.RCVING_BODY
        if self.state == httpParserStates.HEADERS_COMPLETE and \
                not self.body_expected:
            # Requests without framing headers carry no body.
            self.state = httpParserStates.COMPLETE

    def _process_line(self, raw: bytes) -> Tuple[bool, bytes]:
        while True:
            parts = raw.split(CRLF, 1)
            if len(parts) == 1:
                return False, raw
            line, raw = parts[0], parts[1]
            # Ref: https://datatracker.ietf.org/doc/html/rfc7230#section-3.5
            # Ignore one empty line received prior to the request-line.
            if line == b'' and self.type == httpParserTypes.REQUEST_PARSER \
                    and not self._skipped_empty_line:
                self._skipped_empty_line = True
                continue
            parts = line.split(WHITESPACE, 2)
            if self.type == httpParserTypes.REQUEST_PARSER:
                # Ref: https://datatracker.ietf.org/doc/html/rfc7230#section-3.1.1
                if len(parts) != 3 or not parts[2].startswith(b'HTTP/'):
                    # To avoid a possible attack vector, we raise exception
                    # if parser receives an invalid request line.
                    raise HttpProtocolException('Invalid request line %r' % line)
                self.method, self.path, self.version = parts
            else:
                if len(parts) < 2 or not parts[0].startswith(b'HTTP/') or \
                        len(parts[1]) != 3 or not parts[1].isdigit():
                    raise HttpProtocolException('Invalid response line %r' % line)
                self.version, self.code = parts[0], parts[1]
                if len(parts) == 3:
                    self.reason = parts[2]
            self.state = httpParserStates.LINE_RCVD
            break
        return len(raw) > 0, raw

    def _process_header(self, raw: bytes) -> None:
        parts = raw.split(COLON, 1)
        key, value = (
            parts[0].strip(),
            b'' if len(parts) == 1 else parts[1].strip(),
        )
        k = self.add_header(key, value)
        if k == b'content-length':
            try:
                self._content_length = int(value)
            except ValueError:
                raise HttpProtocolException('Invalid content-length %r' % value)
            if self._content_length < 0:
                raise HttpProtocolException('Invalid content-length %r' % value)
            self._content_expected = self._content_length > 0
        elif k == b'transfer-encoding' and value.lower().endswith(b'chunked'):
            self._is_chunked_encoded = True

    def _bodiless_response(self) -> bool:
        # Ref: https://datatracker.ietf.org/doc/html/rfc7230#section-3.3
        if self.request_method == httpMethods.HEAD:
            return True
        if self.code is None:
            return False
        code = int(self.code)
        return code < 200 or code in (
            httpStatusCodes.NO_CONTENT, httpStatusCodes.NOT_MODIFIED,
        )
