"""Proxy counters and the time tags that mark when each resource changed."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable

_UINT64_MASK = (1 << 64) - 1


class ResourceId(IntEnum):
    """Resources that the management protocol can query or change."""

    MIME = 0
    COMMAND = 1
    CONCURRENT_CONNECTIONS = 2
    HISTORIC_ACCESS = 3
    TRANSFERRED_BYTES = 4
    TRANSFORMATION = 5


class TimeTags:
    """Last-modified timestamps, in whole seconds, one per resource."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._tags: dict[ResourceId, int] = {}
        self.reset()

    def _now(self) -> int:
        return int(self._clock())

    def update(self, resource_id: ResourceId) -> int:
        """Stamp a resource with the current time and return the new tag."""
        tag = self._now()
        self._tags[ResourceId(resource_id)] = tag
        return tag

    def get(self, resource_id: ResourceId) -> int:
        """Return the current tag of a resource."""
        return self._tags[ResourceId(resource_id)]

    def reset(self) -> None:
        """Give every resource the same, current, tag."""
        now = self._now()
        self._tags = {resource: now for resource in ResourceId}

    def __getitem__(self, resource_id: ResourceId) -> int:
        return self.get(resource_id)


@dataclass
class Metrics:
    """Connection and traffic counters; each change refreshes its time tag."""

    concurrent_connections: int = 0
    historic_access: int = 0
    transfer_bytes: int = 0
    time_tags: TimeTags = field(default_factory=TimeTags)

    def increase_concurrent_connections(self) -> None:
        self.concurrent_connections = (self.concurrent_connections + 1) & _UINT64_MASK
        self.time_tags.update(ResourceId.CONCURRENT_CONNECTIONS)

    def decrease_concurrent_connections(self) -> None:
        self.concurrent_connections = (self.concurrent_connections - 1) & _UINT64_MASK
        self.time_tags.update(ResourceId.CONCURRENT_CONNECTIONS)

    def increase_historic_access(self) -> None:
        self.historic_access = (self.historic_access + 1) & _UINT64_MASK
        self.time_tags.update(ResourceId.HISTORIC_ACCESS)

    def increase_transfer_bytes(self, n: int) -> None:
        self.transfer_bytes = (self.transfer_bytes + n) & _UINT64_MASK
        self.time_tags.update(ResourceId.TRANSFERRED_BYTES)