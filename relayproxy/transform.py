"""Chunked encoding of relayed bodies and the external command that transforms them."""

from __future__ import annotations

import os
import subprocess
from enum import Enum, auto
from typing import Optional

from relayproxy.utilities import format_hex

VERSION_VARIABLE = "HTTPD_VERSION"
VERSION_VALUE = "1.0.0"
SHELL = "/bin/sh"

_CRLF = b"\r\n"


def encode_chunk(data: bytes) -> bytes:
    """Frame ``data`` as one chunk of a chunked transfer-coded body."""
    return format_hex(len(data)).encode("ascii") + _CRLF + bytes(data) + _CRLF


def last_chunk() -> bytes:
    """Return the zero-length chunk that ends a chunked body."""
    return format_hex(0).encode("ascii") + _CRLF + _CRLF


class CommandStatus(Enum):
    """Outcome of starting the transformation command."""

    OK = auto()
    PIPE_CREATION_ERROR = auto()
    FORK_ERROR = auto()
    NONBLOCKING_ERROR = auto()
    EXEC_ERROR = auto()
    SELECT_ERROR = auto()


class TransformProcess:
    """A shell command fed the response body on stdin, its stdout relayed back.

    The command runs under ``/bin/sh -c`` with ``HTTPD_VERSION`` set in its
    environment and its stderr sent to ``stderr_path``. Both pipes are
    non-blocking so they can be watched by a selector.
    """

    def __init__(self, command: str, stderr_path: Optional[str] = os.devnull) -> None:
        self.command = command
        self.stderr_path = stderr_path
        self.status: Optional[CommandStatus] = None
        self._process: Optional[subprocess.Popen] = None
        self._input_open = False

    @property
    def pid(self) -> Optional[int]:
        return None if self._process is None else self._process.pid

    @property
    def input_fd(self) -> int:
        """Descriptor the body is written to."""
        return self._require().stdin.fileno()

    @property
    def output_fd(self) -> int:
        """Descriptor the transformed body is read from."""
        return self._require().stdout.fileno()

    @property
    def returncode(self) -> Optional[int]:
        """The command's exit status, or None while it still runs."""
        if self._process is None:
            return None
        return self._process.poll()

    def _require(self) -> subprocess.Popen:
        if self._process is None:
            raise RuntimeError("transformation command has not been started")
        return self._process

    def _open_stderr(self) -> Optional[int]:
        if self.stderr_path is None:
            return None
        try:
            return os.open(self.stderr_path, os.O_WRONLY | os.O_APPEND)
        except OSError:
            return None

    def start(self) -> CommandStatus:
        """Launch the command and return how that went."""
        if self._process is not None:
            raise RuntimeError("transformation command already started")
        env = dict(os.environ)
        env[VERSION_VARIABLE] = VERSION_VALUE
        stderr_fd = self._open_stderr()
        try:
            self._process = subprocess.Popen(
                [SHELL, "-c", self.command],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=stderr_fd,
                env=env,
                bufsize=0,
            )
        except OSError:
            self.status = CommandStatus.FORK_ERROR
            return self.status
        finally:
            if stderr_fd is not None:
                os.close(stderr_fd)
        self._input_open = True
        try:
            os.set_blocking(self._process.stdin.fileno(), False)
            os.set_blocking(self._process.stdout.fileno(), False)
        except OSError:
            self.status = CommandStatus.NONBLOCKING_ERROR
            return self.status
        if self._process.poll() is not None:
            self.status = CommandStatus.EXEC_ERROR
            return self.status
        self.status = CommandStatus.OK
        return self.status

    def write(self, data: bytes) -> int:
        """Write what the pipe accepts of ``data``; return how many bytes went.

        Returns 0 when the pipe is full. Raises BrokenPipeError once the
        command no longer reads its input.
        """
        process = self._require()
        if not self._input_open:
            raise BrokenPipeError("input of the transformation command is closed")
        if not data:
            return 0
        try:
            return os.write(process.stdin.fileno(), data)
        except BlockingIOError:
            return 0

    def read(self, size: int) -> Optional[bytes]:
        """Read up to ``size`` bytes of output.

        Returns b"" once the command has closed its output and None when
        nothing is available yet.
        """
        process = self._require()
        try:
            return os.read(process.stdout.fileno(), size)
        except BlockingIOError:
            return None

    def close_input(self) -> None:
        """Close the command's stdin so that it sees the end of the body."""
        process = self._require()
        if self._input_open:
            self._input_open = False
            try:
                process.stdin.close()
            except OSError:
                pass

    def stop(self) -> Optional[int]:
        """Close both pipes, end the command if still running and reap it."""
        if self._process is None:
            return None
        process = self._process
        self._input_open = False
        for stream in (process.stdin, process.stdout):
            try:
                stream.close()
            except OSError:
                pass
        if process.poll() is None:
            process.terminate()
        return process.wait()

    def __enter__(self) -> "TransformProcess":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()