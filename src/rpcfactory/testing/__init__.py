"""Testing utilities for the RPC controller factory."""

from .mocks import InMemoryContainer

__all__ = [
    "InMemoryContainer",
]
