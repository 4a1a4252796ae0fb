"""Unit tests for the cache store.

These tests drive `Cache.lookup` / `Cache.insert` directly, without the
simulator, and pass the logical timestamps by hand.
"""

from cachesim.core.cache import Cache, CacheLine
from cachesim.core.config import CacheConfig


def test_new_cache_is_empty(reference_config):
    c = Cache(reference_config)
    assert len(c.sets) == 2
    assert all(len(s) == 4 for s in c.sets)
    assert all(not line.valid for s in c.sets for line in s)
    assert c.used_lines() == 0


def test_tag_zero_is_not_empty(reference_config):
    # Input: an empty cache, then insert tag 0 into set 0.
    # Expected: before the insert tag 0 misses (an empty way is not tag 0),
    # afterwards it hits, and only one way is occupied.
    c = Cache(reference_config)
    assert c.lookup(0, 0) is False
    way, evicted = c.insert(0, 0, stamp=1)
    assert (way, evicted) == (0, None)
    assert c.lookup(0, 0) is True
    assert c.used_lines() == 1
    # inserting another tag must use the next free way, not overwrite tag 0
    assert c.insert(0, 5, stamp=2) == (1, None)
    assert c.resident_tags(0) == [0, 5]


def test_lookup_has_no_side_effects(reference_config):
    c = Cache(reference_config)
    c.insert(1, 7, stamp=3)
    before = [CacheLine(l.tag, l.valid, l.last_access) for l in c.sets[1]]
    assert c.lookup(1, 7) is True
    assert c.lookup(1, 8) is False
    assert c.sets[1] == before


def test_insert_fills_free_ways_in_order(reference_config):
    c = Cache(reference_config)
    for stamp, tag in enumerate((10, 11, 12, 13), start=1):
        way, evicted = c.insert(0, tag, stamp)
        assert way == stamp - 1
        assert evicted is None
    assert c.resident_tags(0) == [10, 11, 12, 13]
    # the other set is untouched
    assert c.resident_tags(1) == []


def test_full_set_evicts_oldest_and_returns_copy(reference_config):
    c = Cache(reference_config)
    for stamp, tag in enumerate((10, 11, 12, 13), start=1):
        c.insert(0, tag, stamp)
    way, evicted = c.insert(0, 14, stamp=5)
    assert way == 0
    assert evicted == CacheLine(tag=10, valid=True, last_access=1)
    # the copy is detached from the live line
    assert c.sets[0][0].tag == 14
    assert c.sets[0][0].last_access == 5
    assert c.find(0, 10) is None
    assert c.find(0, 14) == 0


def test_reset_invalidates_everything(reference_config):
    c = Cache(reference_config)
    c.insert(0, 1, stamp=1)
    c.insert(1, 2, stamp=2)
    c.reset()
    assert c.used_lines() == 0
    assert c.lookup(0, 1) is False
    assert all(line.last_access == 0 for s in c.sets for line in s)


def test_direct_mapped_always_replaces_way_zero():
    c = Cache(CacheConfig(block_size=4, num_sets=4, associativity=1))
    c.insert(2, 1, stamp=1)
    way, evicted = c.insert(2, 9, stamp=2)
    assert way == 0
    assert evicted.tag == 1
    assert c.resident_tags(2) == [9]
