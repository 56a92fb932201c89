"""Filters the header block of a request or response as it is relayed."""

from __future__ import annotations

from enum import Enum, auto

from relayproxy.media_range import MatchResult, MediaRange

MAX_HEADER_NAME_LENGTH = 20
CHUNKED = "chunked"
IDENTITY = "identity"

CHUNKED_HEADER = "transfer-encoding: chunked\r\n"
CLOSE_HEADER = "connection: close\r\n\r\n"

_OWS = " \t"
_HOP_BY_HOP = frozenset({"keep-alive", "connection", "upgrade"})


class HeaderState(Enum):
    FIRST_LINE = auto()
    HEADERS_START = auto()
    HEADER_NAME = auto()
    HEADER_VALUE = auto()
    HEADER_END = auto()
    HEADER_DONE = auto()
    BODY_START = auto()


_S = HeaderState


class HeadersParser:
    """Character-driven filter for an HTTP header block.

    Header names are written out in lower case. Hop-by-hop headers are
    dropped; when body transformation is on, ``trailer`` is dropped too and,
    in responses, ``transfer-encoding`` and ``content-length`` as well. The
    ``content-type`` value is matched against the configured media range and
    the ``transfer-encoding`` and ``content-encoding`` values are inspected.
    At the blank line that ends the block, ``connection: close`` (and, for a
    transformed response, ``transfer-encoding: chunked``) is appended.
    """

    def __init__(
        self,
        is_request: bool,
        *,
        transformation_on: bool = False,
        media_range: MediaRange | None = None,
    ) -> None:
        self.is_request = is_request
        self.transformation_on = transformation_on
        self._media_range = media_range.copy() if media_range is not None else None
        self.state = HeaderState.FIRST_LINE
        self.content_match = MatchResult.NO
        self.is_chunked = False
        self._first_line: list[str] = []
        self._output: list[str] = []
        self._name: list[str] = []
        self._media_index = 0
        self._has_encoding = False
        self._identity_encoding = False
        self._reset_header(HeaderState.FIRST_LINE)

    def _reset_header(self, state: HeaderState = HeaderState.HEADERS_START) -> None:
        self._name = []
        self._transfer_value: list[str] = []
        self._content_value: list[str] = []
        self.state = state
        self._censure = False
        self._is_mime = False
        self._is_transfer = False
        self._is_encoded = False
        self._has_char = False

    @property
    def first_line(self) -> str:
        """The request or status line as read, without its line feed."""
        return "".join(self._first_line)

    @property
    def done(self) -> bool:
        return self.state is HeaderState.BODY_START

    @property
    def transform_content(self) -> bool:
        """Whether the Content-Type matched the configured media range."""
        return self.content_match is not MatchResult.NO

    @property
    def transform_encode(self) -> bool:
        """Whether the body may be transformed given its Content-Encoding."""
        return not self._has_encoding or self._identity_encoding

    def feed_char(self, char: str) -> bool:
        """Consume one character; return True while more header input is wanted."""
        state = self.state
        if state is _S.BODY_START:
            return False
        if state is _S.FIRST_LINE:
            self._first_line_char(char)
        elif state is _S.HEADERS_START:
            self._headers_start(char)
        elif state is _S.HEADER_NAME:
            self._header_name(char)
        elif state is _S.HEADER_VALUE:
            self._header_value(char)
        elif state is _S.HEADER_END:
            self._header_end(char)

        if self.state is _S.HEADER_DONE:
            self._reset_header()
        elif self.state is _S.BODY_START:
            self.add_last_headers()
            return False
        return True

    def feed(self, data: str) -> int:
        """Feed ``data`` until the header block ends; return characters consumed."""
        consumed = 0
        for char in data:
            if self.state is _S.BODY_START:
                break
            consumed += 1
            self.feed_char(char)
        return consumed

    def add_last_headers(self) -> None:
        """Append the headers the proxy adds at the end of every block."""
        if not self.is_request and self.transformation_on:
            self._output.append(CHUNKED_HEADER)
        self._output.append(CLOSE_HEADER)

    def take_output(self) -> str:
        """Return the filtered text produced so far and clear it."""
        out = "".join(self._output)
        self._output.clear()
        return out

    def _first_line_char(self, char: str) -> None:
        if char == "\n":
            self.state = _S.HEADERS_START
        else:
            self._first_line.append(char)
        self._output.append(char)

    def _headers_start(self, char: str) -> None:
        if char == "\n":
            self.state = _S.BODY_START
        elif char == "\r":
            self.state = _S.HEADER_END
        elif char == ":":
            self._censure = False
            self.state = _S.HEADER_VALUE
        else:
            self._name.append(char.lower())
            self.state = _S.HEADER_NAME

    def _header_name(self, char: str) -> None:
        if char == ":":
            self._end_name("".join(self._name))
            self.state = _S.HEADER_VALUE
            return
        self._name.append(char.lower())
        if len(self._name) >= MAX_HEADER_NAME_LENGTH:
            # Too long to be a header we filter: pass it through untouched.
            self._output.append("".join(self._name))
            self._name = []
            self.state = _S.HEADER_VALUE

    def _end_name(self, name: str) -> None:
        transforming = self.transformation_on
        response = not self.is_request
        if len(name) + 1 >= MAX_HEADER_NAME_LENGTH:
            pass
        elif name in _HOP_BY_HOP:
            self._censure = True
            return
        elif transforming and name == "trailer":
            self._censure = True
            return
        elif transforming and response and name == "transfer-encoding":
            self._is_transfer = True
            self._censure = True
            return
        elif transforming and response and name == "content-length":
            self._censure = True
            return
        elif transforming and response and name == "content-encoding":
            self._is_encoded = True
            self._has_encoding = True
            self._identity_encoding = False
        elif transforming and name == "content-type":
            self._is_mime = True
        self._output.append(name + ":")
        self._censure = False

    def _header_value(self, char: str) -> None:
        if char == "\n":
            self.state = _S.HEADER_DONE
        else:
            if char not in _OWS:
                self._has_char = True
            if self._is_mime and char != "\r":
                self._match_media(char)
            elif (
                self._is_transfer
                and char != "\r"
                and self._has_char
                and len(self._transfer_value) < len(CHUNKED)
            ):
                self._transfer_value.append(char.lower())
                if len(self._transfer_value) == len(CHUNKED) and "".join(self._transfer_value) == CHUNKED:
                    self.is_chunked = True
            elif (
                self._is_encoded
                and char != "\r"
                and self._has_char
                and len(self._content_value) < len(IDENTITY)
            ):
                self._content_value.append(char.lower())
                if len(self._content_value) == len(IDENTITY) and "".join(self._content_value) == IDENTITY:
                    self._identity_encoding = True
        if not self._censure:
            self._output.append(char)

    def _match_media(self, char: str) -> None:
        if self._media_range is None:
            return
        if char not in _OWS and char != ";" and self._media_index != -1:
            self.content_match = self._media_range.match_at(self._media_index, char)
            self._media_index += 1
            if self.content_match is MatchResult.ALL:
                self._media_index = -1
        elif self._media_index != 0:
            self._media_index = -1

    def _header_end(self, char: str) -> None:
        if char == "\n":
            self.state = _S.BODY_START
        elif char != ":":
            self._name.append(char.lower())
            self.state = _S.HEADER_NAME
        else:
            self.state = _S.HEADER_VALUE