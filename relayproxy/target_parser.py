"""Extracts the host and port from the request-target of a request line."""

from __future__ import annotations

from enum import Enum, auto

DEFAULT_PORT = 80

_DIGITS = "0123456789"


class TargetState(Enum):
    START = auto()
    AUTHORITY_OR_SCHEME = auto()
    SLASH_AFTER_SCHEME = auto()
    DOUBLE_SLASH = auto()
    USERINFO = auto()
    START_PORT = auto()
    PORT = auto()
    AFTER_AUTHORITY = auto()
    END = auto()
    ERROR = auto()


_S = TargetState


class TargetParser:
    """Character-driven parser for the request-target, ended by a space.

    Handles absolute form (``http://host:port/path``), authority form
    (``host:port``) and origin form (``/path``, which carries no host). The
    whole target is kept as well. A line feed before the space is an error.
    """

    def __init__(self) -> None:
        self.state = TargetState.START
        self.characters_read = 0
        self.port = DEFAULT_PORT
        self._target: list[str] = []
        self._host: list[str] | None = None

    @property
    def target(self) -> str:
        return "".join(self._target)

    @property
    def host(self) -> str | None:
        """The host read so far; empty once the target ends without one."""
        return None if self._host is None else "".join(self._host)

    @property
    def done(self) -> bool:
        return self.state is TargetState.END

    @property
    def error(self) -> bool:
        return self.state is TargetState.ERROR

    def _append_host(self, char: str) -> None:
        if self._host is None:
            self._host = []
        self._host.append(char)

    def _clear_host(self) -> None:
        self._host = None

    def _transition(self, char: str) -> TargetState:
        state = self.state
        if state is _S.START:
            if char == "/":
                self._clear_host()
                return _S.AFTER_AUTHORITY
            if char == ":":
                return _S.AUTHORITY_OR_SCHEME
            self._append_host(char)
            return _S.START
        if state is _S.AUTHORITY_OR_SCHEME:
            if char in _DIGITS:
                self.port = int(char)
                return _S.PORT
            self._clear_host()
            return _S.SLASH_AFTER_SCHEME if char == "/" else _S.AFTER_AUTHORITY
        if state is _S.SLASH_AFTER_SCHEME:
            return _S.DOUBLE_SLASH if char == "/" else _S.AFTER_AUTHORITY
        if state is _S.DOUBLE_SLASH:
            if char == ":":
                return _S.START_PORT
            if char == "@":
                self._clear_host()
                return _S.USERINFO
            if char == "/":
                return _S.AFTER_AUTHORITY
            self._append_host(char)
            return _S.DOUBLE_SLASH
        if state is _S.USERINFO:
            if char == ":":
                return _S.START_PORT
            if char == "/":
                return _S.AFTER_AUTHORITY
            self._append_host(char)
            return _S.USERINFO
        if state is _S.START_PORT:
            if char in _DIGITS:
                self.port = int(char)
                return _S.PORT
            return _S.AFTER_AUTHORITY
        if state is _S.PORT:
            if char in _DIGITS:
                self.port = self.port * 10 + int(char)
                return _S.PORT
            if char != "/":
                self.port = DEFAULT_PORT
            return _S.AFTER_AUTHORITY
        return state

    def feed(self, char: str) -> bool:
        """Consume one character; return True while more input is wanted."""
        self.characters_read += 1
        if self.state in (_S.END, _S.ERROR):
            return False
        if char == " ":
            self.state = _S.END
            if self._host is None:
                self._host = []
            return False
        self._target.append(char)
        self.state = self._transition(char)
        if char == "\n":
            self.state = _S.ERROR
            return False
        return True

    def parse(self, data: str) -> int:
        """Feed ``data`` until parsing stops; return the characters consumed."""
        consumed = 0
        for char in data:
            consumed += 1
            if not self.feed(char):
                break
        return consumed