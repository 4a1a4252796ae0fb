"""Entry point for the cache simulator.

Usage:
    python run.py trace.txt             # Hits: <n>, Misses: <m>
    python run.py trace.txt --prefetch  # same, with next-block prefetching
    python run.py --help
"""
from cachesim.cli import main


if __name__ == '__main__':
    main()
