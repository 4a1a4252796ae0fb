"""Replacement policy for the set-associative cache.

Recency is tracked with a logical clock (an access counter owned by the
simulator) instead of wall-clock time, so two accesses never share a stamp
and the eviction order does not depend on how fast the host runs.

API (methods):
- on_insert(line, stamp): a line was (re)filled at logical time `stamp`
- on_hit(line, stamp): a lookup hit `line` at logical time `stamp`
- victim(lines): index of the way to evict from a full set

By default a hit does not refresh the line, which makes the policy evict the
least-recently-*inserted* line. Pass refresh_on_hit=True for true LRU.
"""
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .cache import CacheLine


class LRUReplacement:
    """Approximate least-recently-used replacement.

    The victim is the line with the smallest `last_access`. Ties go to the
    lowest way.
    """

    def __init__(self, refresh_on_hit: bool = False):
        self.refresh_on_hit = refresh_on_hit

    def on_insert(self, line: "CacheLine", stamp: int) -> None:
        line.last_access = stamp

    def on_hit(self, line: "CacheLine", stamp: int) -> None:
        if self.refresh_on_hit:
            line.last_access = stamp

    def victim(self, lines: Sequence["CacheLine"]) -> int:
        if not lines:
            raise ValueError("cannot pick a victim from an empty set")
        # seed the incumbent with way 0, only a strictly older line replaces it
        oldest = 0
        for wi in range(1, len(lines)):
            if lines[wi].last_access < lines[oldest].last_access:
                oldest = wi
        return oldest

    def __repr__(self):
        return f"LRUReplacement(refresh_on_hit={self.refresh_on_hit})"


__all__ = ["LRUReplacement"]
