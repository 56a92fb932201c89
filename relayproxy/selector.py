"""An I/O multiplexer that dispatches readiness events to per-descriptor handlers.

Blocking work done on other threads reports back through
:meth:`Selector.notify_block`. The handler's ``handle_block`` callback then runs
on the thread that calls :meth:`Selector.select`.
"""

from __future__ import annotations

import selectors
import socket
import threading
from dataclasses import dataclass
from enum import IntFlag
from typing import Any, Callable, Optional, Union

DEFAULT_TIMEOUT = 10.0

FileObj = Union[int, Any]
Callback = Callable[["SelectorKey"], None]


class Interest(IntFlag):
    """Events a registered descriptor wants to hear about."""

    NOOP = 0
    READ = 1 << 0
    WRITE = 1 << 2


class SelectorError(Exception):
    """Raised when the selector is misused or the underlying wait fails."""


@dataclass(frozen=True)
class Handler:
    """Callbacks run for a descriptor; any of them may be left out."""

    handle_read: Optional[Callback] = None
    handle_write: Optional[Callback] = None
    handle_close: Optional[Callback] = None
    handle_block: Optional[Callback] = None


@dataclass(frozen=True)
class SelectorKey:
    """What a callback receives: the selector, the file object and its data."""

    selector: "Selector"
    fileobj: FileObj
    fd: int
    data: Any


@dataclass
class _Item:
    fileobj: FileObj
    fd: int
    handler: Handler
    interest: Interest
    data: Any


def _fileno(fileobj: FileObj) -> int:
    if isinstance(fileobj, int):
        return fileobj
    try:
        return int(fileobj.fileno())
    except (AttributeError, OSError, ValueError) as exc:
        raise SelectorError("Illegal argument") from exc


class Selector:
    """Readiness multiplexer with read/write interests and blocking-job wakeups."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout
        self._selector = selectors.DefaultSelector()
        self._items: dict[int, _Item] = {}
        self._active: set[int] = set()
        self._jobs: list[int] = []
        self._jobs_lock = threading.Lock()
        self._wake_r, self._wake_w = socket.socketpair()
        self._wake_r.setblocking(False)
        self._wake_w.setblocking(False)
        self._selector.register(self._wake_r, selectors.EVENT_READ)
        self._closed = False

    # -- bookkeeping -------------------------------------------------------

    def _lookup(self, fileobj: FileObj) -> _Item:
        if not isinstance(fileobj, int):
            for item in self._items.values():
                if item.fileobj is fileobj:
                    return item
        fd = _fileno(fileobj)
        if fd < 0 or fd not in self._items:
            raise SelectorError("Illegal argument")
        return self._items[fd]

    def _sync(self, item: _Item) -> None:
        events = 0
        if item.interest & Interest.READ:
            events |= selectors.EVENT_READ
        if item.interest & Interest.WRITE:
            events |= selectors.EVENT_WRITE
        try:
            if events and item.fd in self._active:
                self._selector.modify(item.fd, events)
            elif events:
                self._selector.register(item.fd, events)
                self._active.add(item.fd)
            elif item.fd in self._active:
                self._active.discard(item.fd)
                self._selector.unregister(item.fd)
        except (OSError, ValueError, KeyError) as exc:
            raise SelectorError("I/O error") from exc

    def _key(self, item: _Item) -> SelectorKey:
        return SelectorKey(self, item.fileobj, item.fd, item.data)

    def _check_open(self) -> None:
        if self._closed:
            raise SelectorError("selector is closed")

    # -- public interface --------------------------------------------------

    def register(
        self,
        fileobj: FileObj,
        handler: Handler,
        interest: Interest = Interest.READ,
        data: Any = None,
    ) -> None:
        """Start watching ``fileobj`` with ``handler`` for ``interest``."""
        self._check_open()
        if handler is None:
            raise SelectorError("Illegal argument")
        fd = _fileno(fileobj)
        if fd < 0:
            raise SelectorError("Illegal argument")
        if fd in self._items:
            raise SelectorError(f"file descriptor {fd} already in use")
        item = _Item(fileobj, fd, handler, Interest(interest), data)
        self._items[fd] = item
        try:
            self._sync(item)
        except SelectorError:
            del self._items[fd]
            raise

    def unregister(self, fileobj: FileObj) -> None:
        """Stop watching ``fileobj``, running its ``handle_close`` first."""
        item = self._lookup(fileobj)
        if item.handler.handle_close is not None:
            item.handler.handle_close(self._key(item))
        item.interest = Interest.NOOP
        if item.fd in self._active:
            self._active.discard(item.fd)
            try:
                self._selector.unregister(item.fd)
            except (OSError, ValueError, KeyError):
                pass
        self._items.pop(item.fd, None)

    def set_interest(self, fileobj: FileObj, interest: Interest) -> None:
        """Replace the events ``fileobj`` is watched for."""
        self._check_open()
        item = self._lookup(fileobj)
        item.interest = Interest(interest)
        self._sync(item)

    def notify_block(self, fileobj: FileObj) -> None:
        """Report, from any thread, that blocking work for ``fileobj`` finished."""
        self._check_open()
        fd = _fileno(fileobj) if isinstance(fileobj, int) else self._resolve_fd(fileobj)
        with self._jobs_lock:
            self._jobs.append(fd)
        try:
            self._wake_w.send(b"\0")
        except (BlockingIOError, OSError):
            pass

    def _resolve_fd(self, fileobj: Any) -> int:
        for item in list(self._items.values()):
            if item.fileobj is fileobj:
                return item.fd
        return _fileno(fileobj)

    def select(self, timeout: Optional[float] = None) -> int:
        """Wait once for events and dispatch them; return how many were ready.

        Read callbacks run before write callbacks for each descriptor, in
        ascending descriptor order. Finished blocking jobs are handled last,
        most recent first.
        """
        self._check_open()
        wait = self.timeout if timeout is None else timeout
        try:
            events = self._selector.select(wait)
        except (OSError, ValueError) as exc:
            raise SelectorError("I/O error") from exc

        ready: dict[int, int] = {}
        for key, mask in events:
            if key.fileobj is self._wake_r:
                self._drain_wake()
                continue
            ready[key.fd] = mask

        for fd in sorted(ready):
            mask = ready[fd]
            if mask & selectors.EVENT_READ:
                self._dispatch(fd, Interest.READ, "handle_read")
            if mask & selectors.EVENT_WRITE:
                self._dispatch(fd, Interest.WRITE, "handle_write")

        self._run_block_jobs()
        return len(ready)

    def _dispatch(self, fd: int, op: Interest, name: str) -> None:
        item = self._items.get(fd)
        if item is None or not item.interest & op:
            return
        callback = getattr(item.handler, name)
        if callback is None:
            raise SelectorError(f"{op.name} arrived but no handler")
        callback(self._key(item))

    def _drain_wake(self) -> None:
        try:
            while self._wake_r.recv(4096):
                pass
        except (BlockingIOError, OSError):
            pass

    def _run_block_jobs(self) -> None:
        with self._jobs_lock:
            jobs, self._jobs = self._jobs, []
        for fd in reversed(jobs):
            item = self._items.get(fd)
            if item is None:
                continue
            if item.handler.handle_block is None:
                raise SelectorError("block notification arrived but no handler")
            item.handler.handle_block(self._key(item))

    def close(self) -> None:
        """Unregister every descriptor and release the selector."""
        if self._closed:
            return
        for item in sorted(self._items.values(), key=lambda it: it.fd):
            if item.fd in self._items:
                self.unregister(item.fileobj)
        with self._jobs_lock:
            self._jobs.clear()
        self._selector.close()
        self._wake_r.close()
        self._wake_w.close()
        self._closed = True

    def __contains__(self, fileobj: FileObj) -> bool:
        try:
            self._lookup(fileobj)
        except SelectorError:
            return False
        return True

    def __len__(self) -> int:
        return len(self._items)

    def __enter__(self) -> "Selector":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()