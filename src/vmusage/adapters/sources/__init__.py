"""Source adapters implementing core ports."""

from vmusage.adapters.sources.in_memory import InMemoryInventory, InMemoryMetricSource

__all__ = [
    "InMemoryInventory",
    "InMemoryMetricSource",
]
