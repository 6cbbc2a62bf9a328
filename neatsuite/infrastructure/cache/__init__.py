"""Caching Service Implementation.

Provides the in-memory, TTL based response cache.
Bounded Context: Cache Management
"""

from .response_cache import ResponseCache

__all__ = ["ResponseCache"]
