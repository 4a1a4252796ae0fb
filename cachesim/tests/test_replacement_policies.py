import pytest

from cachesim.core.cache import Cache, CacheLine
from cachesim.core.config import CacheConfig
from cachesim.core.replacement_policies import LRUReplacement


def _lines(*stamps):
    return [CacheLine(tag=i, valid=True, last_access=s) for i, s in enumerate(stamps)]


def test_victim_is_smallest_stamp():
    assert LRUReplacement().victim(_lines(4, 2, 9, 3)) == 1


def test_victim_when_first_line_is_oldest():
    # the first way is already the minimum: it must still be chosen
    assert LRUReplacement().victim(_lines(1, 2, 3, 4)) == 0


def test_victim_ties_go_to_lowest_way():
    assert LRUReplacement().victim(_lines(5, 3, 3, 7)) == 1
    assert LRUReplacement().victim(_lines(0, 0, 0, 0)) == 0


def test_victim_single_way():
    assert LRUReplacement().victim(_lines(42)) == 0


def test_victim_empty_set():
    with pytest.raises(ValueError):
        LRUReplacement().victim([])


def test_hit_does_not_refresh_by_default():
    line = CacheLine(tag=1, valid=True, last_access=3)
    LRUReplacement().on_hit(line, 10)
    assert line.last_access == 3


def test_hit_refreshes_when_enabled():
    line = CacheLine(tag=1, valid=True, last_access=3)
    LRUReplacement(refresh_on_hit=True).on_hit(line, 10)
    assert line.last_access == 10


@pytest.mark.parametrize("assoc", [1, 2, 4, 8])
def test_least_recently_inserted_is_evicted(assoc):
    # Input: fill set 0 of a cache with `assoc` ways, then insert one more tag.
    # Expected: the first inserted tag (0) is evicted.
    c = Cache(CacheConfig(block_size=4, num_sets=2, associativity=assoc))
    for stamp in range(assoc):
        c.insert(0, stamp, stamp + 1)
    way, evicted = c.insert(0, assoc, assoc + 1)
    assert evicted is not None
    assert evicted.tag == 0
    assert way == 0


def test_cache_uses_policy_from_config():
    c = Cache(CacheConfig(refresh_on_hit=True))
    assert c.policy.refresh_on_hit is True
