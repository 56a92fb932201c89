"""Recognises the method at the start of an HTTP request line."""

from __future__ import annotations

from enum import Enum, auto


class Method(Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class MethodState(Enum):
    START = auto()
    CR = auto()
    G = auto()
    GE = auto()
    GET = auto()
    H = auto()
    HE = auto()
    HEA = auto()
    HEAD = auto()
    P = auto()
    PO = auto()
    POS = auto()
    POST = auto()
    PU = auto()
    PUT = auto()
    D = auto()
    DE = auto()
    DEL = auto()
    DELE = auto()
    DELET = auto()
    DELETE = auto()
    DONE = auto()
    ERROR = auto()


_S = MethodState

_FIRST = {"G": _S.G, "H": _S.H, "P": _S.P, "D": _S.D}

_TRANSITIONS = {
    _S.G: {"E": _S.GE},
    _S.GE: {"T": _S.GET},
    _S.H: {"E": _S.HE},
    _S.HE: {"A": _S.HEA},
    _S.HEA: {"D": _S.HEAD},
    _S.P: {"O": _S.PO, "U": _S.PU},
    _S.PO: {"S": _S.POS},
    _S.POS: {"T": _S.POST},
    _S.PU: {"T": _S.PUT},
    _S.D: {"E": _S.DE},
    _S.DE: {"L": _S.DEL},
    _S.DEL: {"E": _S.DELE},
    _S.DELE: {"T": _S.DELET},
    _S.DELET: {"E": _S.DELETE},
}

_COMPLETE = {
    _S.GET: Method.GET,
    _S.HEAD: Method.HEAD,
    _S.POST: Method.POST,
    _S.PUT: Method.PUT,
    _S.DELETE: Method.DELETE,
}


class MethodParser:
    """Character-driven parser for GET, HEAD, POST, PUT and DELETE.

    Empty lines before the method are skipped. The method must be followed by
    a single space, which ends parsing.
    """

    def __init__(self) -> None:
        self.state = MethodState.START
        self.method: Method | None = None
        self.characters_read = 0

    @property
    def done(self) -> bool:
        return self.state is MethodState.DONE

    @property
    def error(self) -> bool:
        return self.state is MethodState.ERROR

    def feed(self, char: str) -> bool:
        """Consume one character; return True while more input is wanted."""
        self.characters_read += 1
        state = self.state
        if state in (_S.DONE, _S.ERROR):
            return False
        if state is _S.START:
            if char in _FIRST:
                self.state = _FIRST[char]
            elif char == "\r":
                self.state = _S.CR
            elif char != "\n":
                self.state = _S.ERROR
        elif state is _S.CR:
            self.state = _S.START if char == "\n" else _S.ERROR
        elif state in _COMPLETE:
            if char == " ":
                self.method = _COMPLETE[state]
                self.state = _S.DONE
            else:
                self.state = _S.ERROR
        else:
            self.state = _TRANSITIONS[state].get(char, _S.ERROR)
        return self.state not in (_S.DONE, _S.ERROR)

    def parse(self, data: str) -> int:
        """Feed ``data`` until parsing stops; return the characters consumed."""
        consumed = 0
        for char in data:
            consumed += 1
            if not self.feed(char):
                break
        return consumed