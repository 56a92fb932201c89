"""Decodes a chunked transfer-coded body into its plain bytes."""

from __future__ import annotations

from enum import Enum, auto

from relayproxy.utilities import hex_to_int

DEFAULT_CAPACITY = 4096
MAX_CHUNK_SIZE_DIGITS = 15

_HEX = frozenset(b"0123456789abcdefABCDEF")
_LF = ord("\n")


class ChunkState(Enum):
    SIZE = auto()
    DATA = auto()
    ERROR = auto()


class UnchunkParser:
    """Byte-driven chunked decoder with a bounded output buffer.

    Chunk sizes longer than :data:`MAX_CHUNK_SIZE_DIGITS` hexadecimal digits
    are an error; bytes fed in the error state are consumed and ignored.
    Decoded data collects until :meth:`take` is called; :meth:`feed` stops
    once ``capacity`` bytes are waiting.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.state = ChunkState.SIZE
        self.pending = 0
        self._digits = bytearray()
        self._size_read = False
        self._output = bytearray()

    @property
    def error(self) -> bool:
        return self.state is ChunkState.ERROR

    @property
    def full(self) -> bool:
        return len(self._output) >= self.capacity

    def feed_byte(self, byte: int) -> None:
        """Consume one byte of the chunked body."""
        if self.state is ChunkState.SIZE:
            if len(self._digits) == MAX_CHUNK_SIZE_DIGITS + 1:
                self.state = ChunkState.ERROR
            elif byte in _HEX:
                self._digits.append(byte)
            else:
                if not self._size_read:
                    self.pending = hex_to_int(self._digits.decode("ascii"))
                    self._size_read = True
                if byte == _LF:
                    self._size_read = False
                    self.state = ChunkState.DATA
        elif self.state is ChunkState.DATA:
            if self.pending > 0:
                self._output.append(byte)
                self.pending -= 1
            elif byte == _LF:
                self._digits.clear()
                self.state = ChunkState.SIZE

    def feed(self, data: bytes) -> int:
        """Consume ``data`` until it runs out or the output is full.

        Returns how many bytes were consumed.
        """
        consumed = 0
        for byte in data:
            if self.full:
                break
            self.feed_byte(byte)
            consumed += 1
        return consumed

    def take(self) -> bytes:
        """Return the decoded bytes collected so far and clear them."""
        out = bytes(self._output)
        self._output.clear()
        return out