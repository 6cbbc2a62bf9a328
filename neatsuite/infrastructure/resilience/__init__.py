"""API Resilience Implementations.

Contains the retry-with-backoff controller, the sliding window rate limiter
and the request batcher.
Bounded Context: API Resilience
"""

from .api_retry import RetryController, retry_with_backoff
from .batcher import BatchState, RequestBatcher
from .rate_limiter import RateLimiter

__all__ = ["RetryController", "retry_with_backoff", "BatchState", "RequestBatcher", "RateLimiter"]
