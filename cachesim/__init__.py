"""Set-associative cache simulator.

This module re-exports the pieces most callers need so that
`from cachesim import CacheConfig, CacheSimulator` works.
"""
from .core.address import AddressParts, compose, decompose
from .core.cache import Cache, CacheLine
from .core.config import CacheConfig, load_config
from .core.errors import ConfigurationError, TraceFormatError
from .core.simulator import CacheSimulator, simulate
from .trace.reader import Operation, TraceRecord, parse_trace, read_trace

__all__ = [
    "AddressParts", "compose", "decompose",
    "Cache", "CacheLine",
    "CacheConfig", "load_config",
    "ConfigurationError", "TraceFormatError",
    "CacheSimulator", "simulate",
    "Operation", "TraceRecord", "parse_trace", "read_trace",
]
