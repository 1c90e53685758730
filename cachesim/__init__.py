"""Trace-driven cache simulator: LRU, NRU and SRRIP sets, two-level, victim cache and prefetching models."""

__version__ = "0.1.0"

__all__ = ["__version__"]