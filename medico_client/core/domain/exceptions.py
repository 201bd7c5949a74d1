"""
Domain Exceptions

These exceptions represent business rule violations inside entities.
Workflow controllers catch them and translate them into structured
``WorkflowResult`` failures; they never reach the presentation layer raw.
"""

from typing import Any


class DomainException(Exception):
    """
    Base exception for all domain-related errors.
    """

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "INVALID_TRANSITION")
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}


class ValidationException(DomainException):
    """
    Raised when local validation fails before any remote call is made.
    """

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class InvalidTransitionException(DomainException):
    """Raised when an entity is asked to move to a state its state machine forbids."""

    def __init__(self, entity_type: str, current_state: str, target_state: str, message: str | None = None):
        self.entity_type = entity_type
        self.current_state = current_state
        self.target_state = target_state
        msg = message or f"{entity_type} cannot move from '{current_state}' to '{target_state}'"
        super().__init__(
            msg,
            "INVALID_TRANSITION",
            {"entity_type": entity_type, "current_state": current_state, "target_state": target_state},
        )
