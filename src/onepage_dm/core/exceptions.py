"""Custom exception hierarchy for the One Page DM adventure engine.

This module defines the exception hierarchy shared by the rules engine,
the character builder and the adventure session. All exceptions inherit
from OnePageError, enabling unified error handling at the application
boundary while preserving domain-specific context.

Example:
    >>> from onepage_dm.core.exceptions import DiceRollError
    >>> raise DiceRollError("Unsupported die", expression="1d0")
"""

from __future__ import annotations

from typing import Any


class OnePageError(Exception):
    """Base exception for all One Page DM errors.

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
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(OnePageError):
    """Base exception for rules engine and character builder errors."""


class InvalidBuildStateError(GameEngineError):
    """Raised when a build operation is called in the wrong stage.

    Unmet user-input preconditions (missing assignments, empty name,
    insufficient gold) never raise; they are reported through the
    builder's predicates. This error signals a caller bug.
    """

    def __init__(
        self,
        message: str,
        *,
        current_stage: str | None = None,
        expected_stages: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid build state error with stage context.

        Args:
            message: Human-readable error description.
            current_stage: The stage the builder is in.
            expected_stages: Stages in which the operation is allowed.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if current_stage:
            combined_details["current_stage"] = current_stage
        if expected_stages:
            combined_details["expected_stages"] = expected_stages
        super().__init__(message, details=combined_details)


class DiceRollError(GameEngineError):
    """Raised when dice cannot be rolled."""

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


class RulesLookupError(GameEngineError):
    """Raised when a rules table has no entry with the requested name."""

    def __init__(
        self,
        message: str,
        *,
        kind: str | None = None,
        name: str | int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if kind:
            combined_details["kind"] = kind
        if name is not None:
            combined_details["name"] = name
        super().__init__(message, details=combined_details)


# =============================================================================
# Narration Domain Exceptions
# =============================================================================


class NarrationError(OnePageError):
    """Base exception for narration and portrait collaborator failures.

    These never escape the adventure session: the session converts them
    into fixed in-story messages.
    """

    def __init__(
        self,
        message: str,
        *,
        model: str | None = None,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize narration error with model context.

        Args:
            message: Human-readable error description.
            model: Name of the language model involved.
            provider: Name of the provider (e.g., 'openrouter').
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if model:
            combined_details["model"] = model
        if provider:
            combined_details["provider"] = provider
        super().__init__(message, details=combined_details)


class NarrationConnectionError(NarrationError):
    """Raised when the narration service cannot be reached or is misconfigured."""


class NarrationResponseError(NarrationError):
    """Raised when the narration service returns an unusable response."""


class NarrationRateLimitError(NarrationError):
    """Raised when the narration service rate limit is exceeded."""

    def __init__(
        self,
        message: str,
        *,
        retry_after_seconds: float | None = None,
        model: str | None = None,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if retry_after_seconds is not None:
            combined_details["retry_after_seconds"] = retry_after_seconds
        super().__init__(message, model=model, provider=provider, details=combined_details)


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(OnePageError):
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


class ValidationError(OnePageError):
    """Raised when data validation fails.

    This includes constraint violations on character fields such as
    negative gold or hit points outside the allowed range.
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
    # Base exception
    "OnePageError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidBuildStateError",
    "DiceRollError",
    "RulesLookupError",
    # Narration exceptions
    "NarrationError",
    "NarrationConnectionError",
    "NarrationResponseError",
    "NarrationRateLimitError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
]
