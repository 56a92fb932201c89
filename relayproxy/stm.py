"""A small state machine driven by selector readiness events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

ArrivalHandler = Callable[[int, Any], None]
ReadyHandler = Callable[[Any], int]


@dataclass(frozen=True)
class StateDefinition:
    """Callbacks for one state; ``state`` must equal its position in the table."""

    state: int
    on_arrival: Optional[ArrivalHandler] = None
    on_departure: Optional[ArrivalHandler] = None
    on_read_ready: Optional[ReadyHandler] = None
    on_write_ready: Optional[ReadyHandler] = None
    on_block_ready: Optional[ReadyHandler] = None


class StateMachine:
    """Runs the callbacks of the current state and moves to the state they return.

    The initial state is entered, and its arrival callback run, on the first
    event. Moving to another state runs the departure callback of the old
    state and then the arrival callback of the new one.
    """

    def __init__(self, states: Sequence[StateDefinition], initial: int) -> None:
        self._states = tuple(states)
        for index, definition in enumerate(self._states):
            if definition.state != index:
                raise ValueError(
                    f"state at position {index} is numbered {definition.state}"
                )
        if not 0 <= initial < self.max_state:
            raise ValueError(f"initial state {initial} out of range")
        self._initial = initial
        self._current: StateDefinition | None = None

    @property
    def max_state(self) -> int:
        return len(self._states) - 1

    @property
    def state(self) -> int:
        """The current state, or the initial one before any event."""
        if self._current is None:
            return self._initial
        return self._current.state

    def _ensure_started(self, key: Any) -> StateDefinition:
        if self._current is None:
            self._current = self._states[self._initial]
            if self._current.on_arrival is not None:
                self._current.on_arrival(self._current.state, key)
        return self._current

    def _jump(self, next_state: int, key: Any) -> None:
        if not 0 <= next_state <= self.max_state:
            raise ValueError(f"state {next_state} out of range")
        target = self._states[next_state]
        if self._current is target:
            return
        if self._current is not None and self._current.on_departure is not None:
            self._current.on_departure(self._current.state, key)
        self._current = target
        if target.on_arrival is not None:
            target.on_arrival(target.state, key)

    def _dispatch(self, event: str, key: Any) -> int:
        current = self._ensure_started(key)
        handler = getattr(current, event)
        if handler is None:
            raise RuntimeError(f"state {current.state} has no {event} handler")
        next_state = handler(key)
        self._jump(next_state, key)
        return next_state

    def handle_read(self, key: Any) -> int:
        """Run the read callback of the current state; return the next state."""
        return self._dispatch("on_read_ready", key)

    def handle_write(self, key: Any) -> int:
        """Run the write callback of the current state; return the next state."""
        return self._dispatch("on_write_ready", key)

    def handle_block(self, key: Any) -> int:
        """Run the blocking-job callback of the current state; return the next state."""
        return self._dispatch("on_block_ready", key)

    def handle_close(self, key: Any) -> None:
        """Run the departure callback of the current state, if any."""
        if self._current is not None and self._current.on_departure is not None:
            self._current.on_departure(self._current.state, key)