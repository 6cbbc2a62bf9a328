"""Interface for the optional logger collaborator of the client.

Any object with these four methods can be handed to ``NetSuiteClient``;
``meta`` carries structured context for the message. Loggers exposing
``warning`` instead of ``warn`` are accepted as well.
"""

from typing import Any, Mapping, Optional, Protocol


class Logger(Protocol):
    """Structured logger accepted by the client."""

    def debug(self, message: str, meta: Optional[Mapping[str, Any]] = None) -> None: ...

    def info(self, message: str, meta: Optional[Mapping[str, Any]] = None) -> None: ...

    def warn(self, message: str, meta: Optional[Mapping[str, Any]] = None) -> None: ...

    def error(self, message: str, meta: Optional[Mapping[str, Any]] = None) -> None: ...
