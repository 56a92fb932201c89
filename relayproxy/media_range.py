"""Configured media ranges and the incremental matcher used on Content-Type."""

from __future__ import annotations

from enum import Enum
from typing import Iterator

from relayproxy.metrics import ResourceId, TimeTags

_OWS = " \t"


class MatchResult(Enum):
    """Outcome of matching one character of a media type."""

    NO = 0
    YES = 1
    ALL = 2


class MediaRange:
    """An ordered list of media types matched character by character.

    Each entry keeps a flag telling whether it can still match the media type
    being fed; :meth:`reset` makes every entry a candidate again.
    """

    def __init__(self, text: str | None = None, *, time_tags: TimeTags | None = None) -> None:
        self._types: list[str] = []
        self._can_match: list[bool] = []
        self._time_tags = time_tags
        if text is not None:
            self.add(text)

    @property
    def types(self) -> tuple[str, ...]:
        return tuple(self._types)

    def add(self, text: str) -> None:
        """Append the comma-separated media types in ``text``.

        Whitespace right after a comma is dropped; anything else is kept.
        """
        first, *rest = text.split(",")
        for entry in [first, *(part.lstrip(_OWS) for part in rest)]:
            self._types.append(entry)
            self._can_match.append(True)
        if self._time_tags is not None:
            self._time_tags.update(ResourceId.MIME)

    def match_at(self, n: int, char: str) -> MatchResult:
        """Match ``char`` at position ``n`` against every remaining candidate.

        Returns ALL as soon as a candidate has a wildcard at that position,
        YES if some candidate has the same character, NO otherwise. Candidates
        that differ are dropped until the next :meth:`reset`.
        """
        result = MatchResult.NO
        for index, media_type in enumerate(self._types):
            if not self._can_match[index]:
                continue
            expected = media_type[n] if 0 <= n < len(media_type) else "\0"
            if expected == char:
                result = MatchResult.YES
            elif expected == "*":
                return MatchResult.ALL
            else:
                self._can_match[index] = False
        return result

    def reset(self) -> None:
        """Make every media type a candidate again."""
        self._can_match = [True] * len(self._types)

    def copy(self) -> MediaRange:
        """Return an independent copy whose entries are all candidates."""
        duplicate = MediaRange(time_tags=self._time_tags)
        duplicate._types = list(self._types)
        duplicate._can_match = [True] * len(self._types)
        return duplicate

    def __len__(self) -> int:
        return len(self._types)

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __str__(self) -> str:
        out = ""
        for media_type in self._types:
            if out:
                out += ", "
            elif media_type == ";":
                continue
            out += media_type
        return out

    def __repr__(self) -> str:
        return f"MediaRange({str(self)!r})"