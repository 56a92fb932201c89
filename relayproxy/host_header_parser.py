"""Finds the Host header in a block of request headers and splits it."""

from __future__ import annotations

from enum import Enum, auto

_DIGITS = "0123456789"
_OWS = " \t"
_LINE_END = "\r\n"


class HostState(Enum):
    START = auto()
    H = auto()
    HO = auto()
    HOS = auto()
    HOST = auto()
    HOST_COLON = auto()
    IPV6 = auto()
    END_IPV6 = auto()
    HOST_NAME = auto()
    PORT = auto()
    START_PORT = auto()
    NOT_HOST_HEADER = auto()
    CR = auto()
    OWS = auto()
    FINISH = auto()
    ERROR = auto()


_S = HostState

_NAME_LETTERS = {
    _S.START: ("h", _S.H),
    _S.H: ("o", _S.HO),
    _S.HO: ("s", _S.HOS),
    _S.HOS: ("t", _S.HOST),
}


class HostHeaderParser:
    """Character-driven scanner for the ``Host`` header of a request.

    Lines that are not the Host header are skipped. The value may be a host
    name, an IPv4 address or a bracketed IPv6 address, optionally followed by
    ``:port`` and trailing whitespace. Scanning stops once the line feed that
    ends the Host header has been read, or on a malformed value.
    """

    def __init__(self) -> None:
        self.state = HostState.START
        self.characters_read = 0
        self.port: int | None = None
        self.found = False
        self._host: list[str] | None = None

    @property
    def host(self) -> str | None:
        """The host taken from the header, or None if none was read."""
        return None if self._host is None else "".join(self._host)

    @property
    def error(self) -> bool:
        return self.state is HostState.ERROR

    def _append_host(self, char: str) -> None:
        if self._host is None:
            self._host = []
        self._host.append(char)

    def _close_host(self) -> None:
        if self._host is None:
            self._host = []

    def _start_port(self) -> None:
        self.port = 0

    def _add_port_digit(self, char: str) -> None:
        self.port = (self.port or 0) * 10 + int(char)

    def _transition(self, char: str) -> HostState:
        state = self.state
        if state in _NAME_LETTERS:
            expected, following = _NAME_LETTERS[state]
            return following if char.lower() == expected else _S.NOT_HOST_HEADER
        if state is _S.HOST:
            return _S.HOST_COLON if char == ":" else _S.NOT_HOST_HEADER
        if state is _S.HOST_COLON:
            if char == "[":
                return _S.IPV6
            if char in _OWS:
                return _S.HOST_COLON
            self._append_host(char)
            return _S.HOST_NAME
        if state is _S.IPV6:
            if char == "]":
                self._close_host()
                return _S.END_IPV6
            self._append_host(char)
            return _S.IPV6
        if state is _S.END_IPV6:
            if char in _LINE_END:
                return _S.FINISH
            if char == ":":
                self._start_port()
                return _S.START_PORT
            return _S.OWS if char in _OWS else _S.ERROR
        if state is _S.HOST_NAME:
            if char in _LINE_END:
                self._close_host()
                return _S.FINISH
            if char == ":":
                self._close_host()
                self._start_port()
                return _S.START_PORT
            if char in _OWS:
                self._close_host()
                return _S.OWS
            self._append_host(char)
            return _S.HOST_NAME
        if state is _S.START_PORT:
            if char in _DIGITS:
                self._add_port_digit(char)
                return _S.PORT
            return _S.ERROR
        if state is _S.PORT:
            if char in _LINE_END:
                return _S.FINISH
            if char in _DIGITS:
                self._add_port_digit(char)
                return _S.PORT
            return _S.ERROR
        if state is _S.OWS:
            if char in _LINE_END:
                return _S.FINISH
            return _S.OWS if char in _OWS else _S.ERROR
        if state is _S.CR:
            return _S.START if char == "\n" else _S.NOT_HOST_HEADER
        if state is _S.NOT_HOST_HEADER:
            if char == "\r":
                return _S.CR
            if char == "\n":
                return _S.START
            return _S.NOT_HOST_HEADER
        return _S.ERROR

    def feed(self, char: str) -> bool:
        """Consume one character; return True while more input is wanted.

        A malformed value moves the parser to the error state; the character
        after that is refused.
        """
        self.characters_read += 1
        if self.found or self.state is _S.ERROR:
            return False
        if self.state is _S.FINISH:
            if char == "\n":
                self.found = True
            else:
                self.state = _S.ERROR
            return False
        self.state = self._transition(char)
        if self.state is _S.FINISH and char == "\n":
            self.found = True
            return False
        return True

    def parse(self, data: str) -> int:
        """Feed ``data`` until scanning stops; return the characters consumed."""
        consumed = 0
        for char in data:
            consumed += 1
            if not self.feed(char):
                break
        return consumed