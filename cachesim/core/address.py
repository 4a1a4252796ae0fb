"""Address decomposition into (offset, index, tag).

  offset = address & (block_size - 1)
  index  = (address >> offset_bits) & (num_sets - 1)
  tag    = address >> (offset_bits + index_bits)

Addresses are plain Python ints so nothing is ever truncated to a fixed width.
"""
from typing import NamedTuple

from .config import CacheConfig


class AddressParts(NamedTuple):
    offset: int
    index: int
    tag: int


def decompose(address: int, config: CacheConfig) -> AddressParts:
    if address < 0:
        raise ValueError(f"address must be non-negative, got {address}")
    offset = address & (config.block_size - 1)
    index = (address >> config.offset_bits) & (config.num_sets - 1)
    tag = address >> (config.offset_bits + config.index_bits)
    return AddressParts(offset, index, tag)


def compose(tag: int, index: int, offset: int, config: CacheConfig) -> int:
    """Inverse of `decompose`: rebuild the address from its parts."""
    return (tag << (config.offset_bits + config.index_bits)) | (index << config.offset_bits) | offset


def block_address(address: int, config: CacheConfig) -> int:
    """Base (offset 0) address of the block containing `address`."""
    return address & ~(config.block_size - 1)
