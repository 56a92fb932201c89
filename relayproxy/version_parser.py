"""Parses the HTTP-version that ends a request or status line."""

from __future__ import annotations

from enum import Enum, auto

_DIGITS = "0123456789"


class VersionState(Enum):
    START = auto()
    H = auto()
    HT = auto()
    HTT = auto()
    HTTP = auto()
    HTTP_BAR = auto()
    VERSION_ONE = auto()
    DOT = auto()
    VERSION_TWO = auto()
    FINISH = auto()
    ERROR = auto()


_S = VersionState

_LITERAL = {
    _S.START: ("H", _S.H),
    _S.H: ("T", _S.HT),
    _S.HT: ("T", _S.HTT),
    _S.HTT: ("P", _S.HTTP),
    _S.HTTP: ("/", _S.HTTP_BAR),
}


class VersionParser:
    """Character-driven parser for ``HTTP/<major>.<minor>`` and its line end.

    Parsing is complete once the line feed has been read.
    """

    def __init__(self) -> None:
        self.state = VersionState.START
        self.characters_read = 0
        self._version = [0, 0]
        self._complete = False

    @property
    def version(self) -> tuple[int, int]:
        return (self._version[0], self._version[1])

    @property
    def done(self) -> bool:
        return self._complete

    @property
    def error(self) -> bool:
        return self.state is VersionState.ERROR

    def _transition(self, char: str) -> VersionState:
        state = self.state
        if state in _LITERAL:
            expected, following = _LITERAL[state]
            return following if char == expected else _S.ERROR
        if state is _S.HTTP_BAR:
            if char in _DIGITS:
                self._version[0] = int(char)
                return _S.VERSION_ONE
            return _S.ERROR
        if state is _S.VERSION_ONE:
            if char in _DIGITS:
                self._version[0] = self._version[0] * 10 + int(char)
                return _S.VERSION_ONE
            return _S.DOT if char == "." else _S.ERROR
        if state is _S.DOT:
            if char in _DIGITS:
                self._version[1] = int(char)
                return _S.VERSION_TWO
            return _S.ERROR
        if state is _S.VERSION_TWO:
            if char in _DIGITS:
                self._version[1] = self._version[1] * 10 + int(char)
                return _S.VERSION_TWO
            return _S.FINISH if char in "\r\n" else _S.ERROR
        return _S.ERROR

    def feed(self, char: str) -> bool:
        """Consume one character; return True while more input is wanted."""
        self.characters_read += 1
        if self.state is _S.ERROR:
            return False
        if self.state is _S.FINISH:
            if char == "\n":
                self._complete = True
            else:
                self.state = _S.ERROR
            return False
        self.state = self._transition(char)
        if self.state is _S.FINISH and char == "\n":
            self._complete = True
            return False
        return self.state is not _S.ERROR

    def parse(self, data: str) -> int:
        """Feed ``data`` until parsing stops; return the characters consumed."""
        consumed = 0
        for char in data:
            consumed += 1
            if not self.feed(char):
                break
        return consumed