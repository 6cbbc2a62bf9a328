"""HTTP transport adapters."""

from .transport import HttpxTransport

__all__ = ["HttpxTransport"]
