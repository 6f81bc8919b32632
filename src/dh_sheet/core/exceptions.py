"""Custom exception hierarchy for the Daggerheart sheet editor.

Every error raised by the application inherits from SheetError, so the
UI boundary can catch one type while each domain keeps its own context
in ``details``.

Example:
    >>> from dh_sheet.core.exceptions import SheetImportError
    >>> raise SheetImportError("Invalid JSON", reason="Expecting value")
"""

from __future__ import annotations

from typing import Any


class SheetError(Exception):
    """Base exception for all sheet editor errors.

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
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Engine Domain Exceptions
# =============================================================================


class EngineError(SheetError):
    """Base exception for dice, trait roll and class action errors."""


class DiceRollError(EngineError):
    """Raised when a die cannot be rolled.

    This typically occurs when a die size is not a positive integer.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


class ActionError(EngineError):
    """Raised when a class action cannot be executed."""

    def __init__(
        self,
        message: str,
        *,
        action_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize action error with the offending action id.

        Args:
            message: Human-readable error description.
            action_id: Identifier of the action involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if action_id:
            combined_details["action_id"] = action_id
        super().__init__(message, details=combined_details)


class UnknownActionError(ActionError):
    """Raised when an action payload matches none of the known variants.

    This is a programming or schema error, never a user error. The full
    payload is kept so the offending variant can be identified.
    """

    def __init__(
        self,
        message: str,
        *,
        payload: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        combined_details["payload"] = payload
        self.payload = payload
        super().__init__(message, details=combined_details)


class ActionNotFoundError(ActionError):
    """Raised when an action id is not offered by the active class."""


# =============================================================================
# Persistence Domain Exceptions
# =============================================================================


class PersistenceError(SheetError):
    """Base exception for storage, import and export errors."""


class SheetImportError(PersistenceError):
    """Raised when imported bytes do not hold a valid character document.

    The import is all-or-nothing: when this is raised the working
    document has not been touched.
    """

    def __init__(
        self,
        message: str,
        *,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize import error with the parser's reason.

        Args:
            message: Human-readable error description.
            reason: Underlying decoder or validation message.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if reason:
            combined_details["reason"] = reason
        super().__init__(message, details=combined_details)


class StorageError(PersistenceError):
    """Raised when the backing key-value store fails."""

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if key:
            combined_details["key"] = key
        super().__init__(message, details=combined_details)


class CatalogError(SheetError):
    """Raised when the external class catalog cannot be read.

    The catalog loader catches this itself and degrades to the built-in
    class table.
    """

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if source:
            combined_details["source"] = source
        super().__init__(message, details=combined_details)


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(SheetError):
    """Raised when application configuration is invalid."""

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


class ValidationError(SheetError):
    """Raised when sheet data fails validation.

    Numeric inputs are clamped rather than rejected; this covers
    structural problems such as an unknown trait or weapon slot.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    "SheetError",
    # Engine exceptions
    "EngineError",
    "DiceRollError",
    "ActionError",
    "UnknownActionError",
    "ActionNotFoundError",
    # Persistence exceptions
    "PersistenceError",
    "SheetImportError",
    "StorageError",
    "CatalogError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
]
