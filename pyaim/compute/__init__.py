"""Concurrent grid sweep."""

from pyaim.compute.parallel import ConcurrentSweep

__all__ = [
    'ConcurrentSweep',
]
