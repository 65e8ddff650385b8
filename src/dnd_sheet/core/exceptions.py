"""Custom exception hierarchy for the D&D 2024 character rules engine.

The rules themselves never raise: invalid numbers are clamped and missing
optional resources turn commands into no-ops. Exceptions are reserved for
the boundary, where settings are loaded and raw documents are turned into
Character models. All exceptions inherit from DndSheetError so callers can
wrap the whole engine in a single except clause.

Example:
    >>> from dnd_sheet.core.exceptions import CharacterDataError
    >>> raise CharacterDataError("Character payload is not a mapping", source="games/abc")
"""

from __future__ import annotations

from typing import Any


class DndSheetError(Exception):
    """Base exception for all character rules engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception.

        Returns:
            String representation suitable for debugging.
        """
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Rules Engine Exceptions
# =============================================================================


class RulesEngineError(DndSheetError):
    """Base exception for errors surfaced by the rules engine.

    Raised at the engine boundary when a request cannot be turned into
    a consistent character state at all.
    """


class CharacterDataError(RulesEngineError):
    """Raised when a stored character document cannot be read.

    Clamping handles out-of-range numbers. This error only covers payloads
    that are not character documents at all (wrong top-level type, a
    ``classes`` field that is not a list, and so on).
    """

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        field_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize character data error with document context.

        Args:
            message: Human-readable error description.
            source: Identifier of the document that failed to load.
            field_name: Name of the offending field, when known.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if source:
            combined_details["source"] = source
        if field_name:
            combined_details["field_name"] = field_name
        super().__init__(message, details=combined_details)


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(DndSheetError):
    """Raised when application configuration is invalid.

    This includes invalid environment values or incompatible
    configuration combinations.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


__all__ = [
    "DndSheetError",
    "RulesEngineError",
    "CharacterDataError",
    "ConfigurationError",
]
