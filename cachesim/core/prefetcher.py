"""Next-block prefetcher.

After a demand miss on address A the block at A + block_size is fetched
speculatively, unless it is already resident. A fill done here counts as one
extra miss. The prefetcher looks exactly one block ahead and never triggers
itself.
"""
import logging
from typing import Optional

from .address import decompose
from .cache import Cache
from .config import CacheConfig

logger = logging.getLogger(__name__)


class NextBlockPrefetcher:

    def maybe_prefetch(self, miss_address: int, config: CacheConfig, cache: Cache, stamp: int) -> Optional[dict]:
        """Prefetch the block following `miss_address`.

        Returns an event dict describing the fill, or None when the block
        was already present (no insertion, no extra miss).
        """
        next_address = miss_address + config.block_size
        parts = decompose(next_address, config)
        if cache.lookup(parts.index, parts.tag):
            logger.debug("prefetch skipped for %#x: already resident in set %d", next_address, parts.index)
            return None
        way_index, evicted = cache.insert(parts.index, parts.tag, stamp)
        logger.debug("prefetch filled %#x into set %d way %d", next_address, parts.index, way_index)
        return {
            'address': next_address,
            'set_index': parts.index,
            'way_index': way_index,
            'tag': parts.tag,
            'offset': parts.offset,
            'evicted': evicted,
        }
