"""Pure helper functions: cache keys, error parsing, dates, search queries,
field sanitisation and configuration validation.
"""

import dataclasses
import json
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from neatsuite.domain.models.common import CacheKey, InternalId
from neatsuite.domain.models.errors import ErrorKind

_CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F]")

# (field, message) pairs checked inside the ``oauth`` block, in order
_OAUTH_FIELDS = (
    ("consumer_key", "OAuth consumer key is required"),
    ("consumer_secret", "OAuth consumer secret is required"),
    ("token_key", "OAuth token key is required"),
    ("token_secret", "OAuth token secret is required"),
    ("realm", "OAuth realm is required"),
)


def create_cache_key(url: str, method: str, params: Optional[Mapping[str, Any]] = None) -> CacheKey:
    """Builds a cache key from the verb, URL and (order-independent) params."""
    sorted_params = {k: params[k] for k in sorted(params)} if params else {}
    return CacheKey(f"{method}:{url}:{json.dumps(sorted_params, separators=(',', ':'), default=str)}")


def parse_netsuite_error(error: Any) -> Dict[str, Any]:
    """Extracts ``message``, ``code`` and ``details`` from any failure.

    Understands ``NetSuiteError``, exceptions carrying an ``httpx`` response
    with a NetSuite error body, and arbitrary exceptions.
    """
    if isinstance(getattr(error, "kind", None), ErrorKind):
        return {"message": error.message, "code": error.code, "details": error.details}

    response = getattr(error, "response", None)
    data = None
    if response is not None:
        try:
            data = response.json()
        except ValueError:
            data = None
    if isinstance(data, dict):
        return {
            "message": data.get("detail") or data.get("message") or "NetSuite API error",
            "code": data.get("o:errorCode") or data.get("code"),
            "details": data.get("o:errorDetails") or data,
        }

    return {
        "message": str(error) or "Unknown error",
        "code": getattr(error, "code", None),
        "details": error,
    }


def format_netsuite_date(value: Union[date, datetime]) -> str:
    """Formats a date as ``YYYY-MM-DD`` (UTC for aware datetimes)."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%d")


def parse_netsuite_date(date_string: str) -> datetime:
    """Parses ``YYYY-MM-DD`` into an aware datetime at UTC midnight."""
    return datetime.strptime(date_string, "%Y-%m-%d").replace(tzinfo=timezone.utc)


def _quote(value: Any) -> str:
    return f"'{value}'"


def build_search_query(filters: Mapping[str, Any]) -> str:
    """Builds a ``field = value AND ...`` search expression.

    None values are skipped, sequences become ``IN`` lists and strings are
    quoted.
    """
    clauses = []
    for key, value in filters.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            clauses.append(f"{key} IN ({','.join(_quote(v) for v in value)})")
        elif isinstance(value, str):
            clauses.append(f"{key} = {_quote(value)}")
        elif isinstance(value, bool):
            clauses.append(f"{key} = {str(value).lower()}")
        else:
            clauses.append(f"{key} = {value}")
    return " AND ".join(clauses)


def sanitize_field_value(value: Any) -> Any:
    """Strips control characters and surrounding whitespace from field values.

    Recurses into lists and dicts; None becomes an empty string.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return _CONTROL_CHARS.sub("", value).strip()
    if isinstance(value, (list, tuple)):
        return [sanitize_field_value(v) for v in value]
    if isinstance(value, dict):
        return {k: sanitize_field_value(v) for k, v in value.items()}
    return value


def to_internal_id(record_id: Union[str, int]) -> InternalId:
    return InternalId(str(record_id))


def _as_mapping(value: Any) -> Mapping[str, Any]:
    """Shallow field view of a dataclass instance; mappings pass through."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    return value or {}


def validate_config(config: Any) -> List[str]:
    """Checks a client configuration for missing required fields.

    Args:
        config: A ``ClientConfig`` or a plain mapping with the same shape.

    Returns:
        One human readable message per missing field; empty when valid.
    """
    config = _as_mapping(config)

    errors: List[str] = []
    oauth = config.get("oauth")
    if not oauth:
        errors.append("OAuth configuration is required")
    else:
        oauth = _as_mapping(oauth)
        for field_name, message in _OAUTH_FIELDS:
            if not oauth.get(field_name):
                errors.append(message)

    if not config.get("account_id"):
        errors.append("Account ID is required")

    return errors
