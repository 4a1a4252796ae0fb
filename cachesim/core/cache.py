"""Core cache implementation

This file provides the set-associative cache store used by the simulator.
Behavior:
- Cache is composed of `num_sets` sets; each set has `associativity` ways.
- Every line carries an explicit `valid` flag. Tag 0 is a real tag, an
  empty way is one with valid == False.
- lookup(index, tag) has no side effects.
- insert(index, tag, stamp) fills the first invalid way, or evicts the way
  chosen by the replacement policy when the set is full.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from .config import CacheConfig
from .replacement_policies import LRUReplacement


@dataclass
class CacheLine:
    """container for a cache line (way).

    Fields:
    - tag: the tag stored in the line (meaningless while valid is False)
    - valid: whether the line currently holds a block
    - last_access: logical timestamp used by the replacement policy
    """

    tag: Optional[int] = None
    valid: bool = False
    last_access: int = 0


class Cache:
    """Set-associative cache store.

    The store is allocated once from `config` and never grows.
    """

    def __init__(self, config: CacheConfig, policy: Optional[LRUReplacement] = None):
        self.config = config
        self.num_sets = config.num_sets
        self.associativity = config.associativity
        self.policy = policy or LRUReplacement(refresh_on_hit=config.refresh_on_hit)
        # num_sets x associativity matrix of lines, all invalid
        self.sets: List[List[CacheLine]] = [
            [CacheLine() for _ in range(self.associativity)] for _ in range(self.num_sets)
        ]

    def find(self, index: int, tag: int) -> Optional[int]:
        """Return the way holding `tag` in set `index`, or None."""
        for wi, line in enumerate(self.sets[index]):
            if line.valid and line.tag == tag:
                return wi
        return None

    def lookup(self, index: int, tag: int) -> bool:
        return self.find(index, tag) is not None

    def touch(self, index: int, way: int, stamp: int) -> None:
        """Tell the policy that a lookup hit (index, way) at `stamp`."""
        self.policy.on_hit(self.sets[index][way], stamp)

    def insert(self, index: int, tag: int, stamp: int) -> Tuple[int, Optional[CacheLine]]:
        """Place `tag` in set `index`.

        Returns (way_index, evicted) where `evicted` is a copy of the line
        that was replaced, or None if an empty way was used.
        """
        cache_set = self.sets[index]

        # try to find a free way
        for wi, line in enumerate(cache_set):
            if not line.valid:
                line.tag = tag
                line.valid = True
                self.policy.on_insert(line, stamp)
                return wi, None

        # need to evict: ask policy for a victim
        victim_index = self.policy.victim(cache_set)
        victim = cache_set[victim_index]
        evicted = replace(victim)
        victim.tag = tag
        victim.valid = True
        self.policy.on_insert(victim, stamp)
        return victim_index, evicted

    def reset(self):
        """Invalidate every line."""
        for s in self.sets:
            for line in s:
                line.tag = None
                line.valid = False
                line.last_access = 0

    def used_lines(self) -> int:
        return sum(1 for s in self.sets for line in s if line.valid)

    def resident_tags(self, index: int) -> List[int]:
        """Tags currently valid in set `index`, in way order."""
        return [line.tag for line in self.sets[index] if line.valid]
