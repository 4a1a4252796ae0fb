"""CacheSimulator replays a trace against the cache and keeps statistics.

For each record, in order: decompose the address, look it up, count a hit or
insert the block and count a miss, then (if enabled) let the prefetcher fetch
the next block. One forward pass, nothing is retried.

The logical clock advances once per demand access and once more for a
prefetch fill, so every insertion gets a distinct stamp.
"""
import logging
from typing import Callable, Iterable, List, Optional, Tuple

from .address import decompose
from .cache import Cache
from .config import CacheConfig
from .prefetcher import NextBlockPrefetcher
from ..data.stats_export import Statistics
from ..trace.reader import Operation, TraceRecord

logger = logging.getLogger(__name__)


class CacheSimulator:
    def __init__(self, config: CacheConfig, stats: Optional[Statistics] = None,
                 prefetcher: Optional[NextBlockPrefetcher] = None):
        self.config = config
        self.cache = Cache(config)
        self.stats = stats or Statistics()
        self.prefetcher = prefetcher or NextBlockPrefetcher()
        self.clock = 0
        self.sequence: List[TraceRecord] = []
        self.index = 0

    @property
    def hits(self) -> int:
        return self.stats.hits

    @property
    def misses(self) -> int:
        return self.stats.misses

    def reset(self):
        # clear stats and the clock, rewind the sequence pointer, empty the cache
        self.stats.reset()
        self.clock = 0
        self.index = 0
        self.cache.reset()

    def load_sequence(self, records: Iterable):
        """Load records to replay with `step()`.

        Items may be TraceRecord, (operation, address) pairs or bare integer
        addresses (treated as reads).
        """
        self.sequence = [self._as_record(r) for r in records]
        self.index = 0

    @staticmethod
    def _as_record(item) -> TraceRecord:
        if isinstance(item, TraceRecord):
            return item
        if isinstance(item, int):
            return TraceRecord(Operation.READ, item)
        operation, address = item
        return TraceRecord(Operation(operation), int(address))

    def has_next(self) -> bool:
        return self.index < len(self.sequence)

    def access(self, record: TraceRecord) -> dict:
        """Run one record through the cache and return its outcome event."""
        # read and write are handled identically
        parts = decompose(record.address, self.config)
        self.clock += 1
        way_index = self.cache.find(parts.index, parts.tag)
        hit = way_index is not None
        evicted = None
        prefetch = None

        if hit:
            self.cache.touch(parts.index, way_index, self.clock)
            self.stats.record_access(True)
            logger.debug("hit  %#x set %d way %d", record.address, parts.index, way_index)
        else:
            way_index, evicted = self.cache.insert(parts.index, parts.tag, self.clock)
            self.stats.record_access(False, evicted=evicted is not None)
            if evicted is not None:
                logger.debug("miss %#x set %d way %d, evicted tag %#x",
                             record.address, parts.index, way_index, evicted.tag)
            else:
                logger.debug("miss %#x set %d way %d", record.address, parts.index, way_index)
            if self.config.prefetch_enabled:
                self.clock += 1
                prefetch = self.prefetcher.maybe_prefetch(record.address, self.config, self.cache, self.clock)
                if prefetch is not None:
                    self.stats.record_prefetch(evicted=prefetch['evicted'] is not None)

        return {
            'address': record.address,
            'operation': record.operation,
            'hit': hit,
            'set_index': parts.index,
            'way_index': way_index,
            'tag': parts.tag,
            'offset': parts.offset,
            'evicted': evicted,
            'prefetch': prefetch,
            'stats': {
                'accesses': self.stats.accesses,
                'hits': self.stats.hits,
                'misses': self.stats.misses,
                'prefetch_misses': self.stats.prefetch_misses,
                'hit_rate': self.stats.hit_rate,
            },
        }

    def step(self) -> Optional[dict]:
        if not self.has_next():
            return None
        record = self.sequence[self.index]
        self.index += 1
        return self.access(record)

    def run_all(self, callback: Optional[Callable[[dict], None]] = None) -> Tuple[int, int]:
        while self.has_next():
            info = self.step()
            if callback:
                callback(info)
        return self._finish()

    def _finish(self) -> Tuple[int, int]:
        logger.info("replayed %d accesses: %d hits, %d misses (%d from prefetch)",
                    self.stats.accesses, self.stats.hits, self.stats.misses, self.stats.prefetch_misses)
        return self.stats.hits, self.stats.misses

    def run(self, records: Iterable, callback: Optional[Callable[[dict], None]] = None) -> Tuple[int, int]:
        """Replay `records` from the current cache state; returns (hits, misses).

        Records are consumed one at a time, so `records` may be a generator.
        """
        for item in records:
            info = self.access(self._as_record(item))
            if callback:
                callback(info)
        return self._finish()


def simulate(records: Iterable, config: CacheConfig) -> Tuple[int, int]:
    """Run a fresh simulation and return the final (hits, misses)."""
    return CacheSimulator(config).run(records)
