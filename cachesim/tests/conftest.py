"""Test configuration for pytest.

Ensure the repository root is on sys.path so tests can import the `cachesim`
package without installing it first.
"""
import os
import sys

import pytest

# Compute project root: two directories above this file (cachesim/tests -> cachesim -> project root)
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from cachesim.core.config import CacheConfig  # noqa: E402


@pytest.fixture
def reference_config():
    # 128-byte blocks (7 offset bits), 2 sets (1 index bit), 4 ways, no prefetch
    return CacheConfig(block_size=128, num_sets=2, associativity=4, prefetch_enabled=False)
