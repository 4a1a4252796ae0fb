"""Cache configuration.

A CacheConfig is fixed for the lifetime of a simulation run. The bit widths
used by the address decomposer are derived once here:

  offset_bits = log2(block_size)
  index_bits  = log2(num_sets)

Defaults describe a 1 KiB cache with 128-byte blocks, 4 ways and 2 sets.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from .errors import ConfigurationError


def _is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


def _check_int(name: str, value: Any) -> int:
    # bool is an int subclass, but `block_size=True` is never what the caller meant
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    return value


def _check_bool(name: str, value: Any) -> bool:
    # JSON strings such as "false" must not turn a switch on
    if not isinstance(value, bool):
        raise ConfigurationError(f"{name} must be true or false, got {value!r}")
    return value


@dataclass(frozen=True)
class CacheConfig:
    """Geometry and policy switches of one simulated cache."""

    block_size: int = 128
    num_sets: int = 2
    associativity: int = 4
    prefetch_enabled: bool = False
    # True LRU: a hit also refreshes the line's recency
    refresh_on_hit: bool = False
    offset_bits: int = field(init=False, repr=False)
    index_bits: int = field(init=False, repr=False)

    def __post_init__(self):
        block_size = _check_int("block_size", self.block_size)
        num_sets = _check_int("num_sets", self.num_sets)
        associativity = _check_int("associativity", self.associativity)
        _check_bool("prefetch_enabled", self.prefetch_enabled)
        _check_bool("refresh_on_hit", self.refresh_on_hit)
        if not _is_power_of_two(block_size):
            raise ConfigurationError(f"block_size must be a power of two, got {block_size}")
        if not _is_power_of_two(num_sets):
            raise ConfigurationError(f"num_sets must be a power of two, got {num_sets}")
        if associativity <= 0:
            raise ConfigurationError(f"associativity must be >= 1, got {associativity}")
        # frozen dataclass: derived fields have to go through object.__setattr__
        object.__setattr__(self, "offset_bits", block_size.bit_length() - 1)
        object.__setattr__(self, "index_bits", num_sets.bit_length() - 1)

    @property
    def num_lines(self) -> int:
        return self.num_sets * self.associativity

    @property
    def capacity(self) -> int:
        """Total number of cached bytes."""
        return self.num_lines * self.block_size

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CacheConfig":
        """Build a config from a plain mapping (e.g. a parsed JSON file).

        Accepts either the flat keys or a nested ``{"cache": {...}}`` object.
        `prefetch` is accepted as an alias for `prefetch_enabled`.
        """
        if "cache" in data and isinstance(data["cache"], Mapping):
            data = data["cache"]
        known = {"block_size", "num_sets", "associativity", "prefetch", "prefetch_enabled", "refresh_on_hit"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"unknown configuration keys: {', '.join(unknown)}")
        kwargs: Dict[str, Any] = {k: data[k] for k in ("block_size", "num_sets", "associativity") if k in data}
        if "prefetch" in data and "prefetch_enabled" in data:
            raise ConfigurationError("give either prefetch or prefetch_enabled, not both")
        if "prefetch" in data:
            kwargs["prefetch_enabled"] = data["prefetch"]
        if "prefetch_enabled" in data:
            kwargs["prefetch_enabled"] = data["prefetch_enabled"]
        if "refresh_on_hit" in data:
            kwargs["refresh_on_hit"] = data["refresh_on_hit"]
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "block_size": self.block_size,
            "num_sets": self.num_sets,
            "associativity": self.associativity,
            "prefetch_enabled": self.prefetch_enabled,
            "refresh_on_hit": self.refresh_on_hit,
        }


def load_config(path: str) -> CacheConfig:
    """Read a JSON configuration file."""
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"{path}: invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a JSON object")
    return CacheConfig.from_dict(data)
