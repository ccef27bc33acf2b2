"""Interface for reporting command results to the user.

Defines the contract for displaying information, errors, warnings, cached
values and cache statistics, allowing different UI implementations.
"""

import abc
from typing import Any

from cliniccache.domain.models.cache import CacheStats


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_value(self, key: str, value: Any, **kwargs: Any) -> None:
        """Displays a cached payload.

        Args:
            key: The key the payload was read from.
            value: The payload.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_stats(self, stats: CacheStats) -> None:
        """Displays per-tier cache statistics."""
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
