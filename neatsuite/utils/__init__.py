"""Helper functions for working with NetSuite requests and records."""

from .helpers import (
    build_search_query,
    create_cache_key,
    format_netsuite_date,
    parse_netsuite_date,
    parse_netsuite_error,
    sanitize_field_value,
    to_internal_id,
    validate_config,
)

__all__ = [
    "build_search_query",
    "create_cache_key",
    "format_netsuite_date",
    "parse_netsuite_date",
    "parse_netsuite_error",
    "sanitize_field_value",
    "to_internal_id",
    "validate_config",
]
