"""Defines common Value Objects used across the client.

These are simple values such as account ids, cache keys and HTTP verbs,
named for clarity at the seams where they are passed around.
"""

from typing import Literal, NewType, Tuple

# === Account / record addressing ===
AccountId = NewType("AccountId", str)      # NetSuite account URL id, e.g. "1234567" or "1234567_SB1"
InternalId = NewType("InternalId", str)    # NetSuite record internal id

# === Caching Context ===
CacheKey = NewType("CacheKey", str)        # Unique key for a cache entry

# === HTTP ===
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
HTTP_METHODS: Tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE")
BODY_METHODS: Tuple[str, ...] = ("POST", "PUT", "PATCH")
