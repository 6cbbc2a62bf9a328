"""Interface for presenting command results to the user.

Defines the contract for displaying responses, errors and informational
messages, allowing different UI implementations.
"""

import abc
from typing import Any, List


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_response(self, data: Any, status: int, duration_ms: float, **kwargs: Any) -> None:
        """Displays the body of a successful API response.

        Args:
            data: Decoded response body.
            status: HTTP status code.
            duration_ms: Measured request duration.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass

    def display_validation_errors(self, errors: List[str]) -> None:
        """Displays configuration validation errors, one per line.

        Args:
            errors: Messages returned by ``validate_config``.
        """
        for error in errors:
            self.display_error(error)
