# ============================================================================
# SCOPE: APPLICATION LAYER (Shared)
# Description: Result shape returned by every workflow operation.
# ============================================================================
"""Workflow result types."""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from .error_classifier import ClassifiedError, ErrorCategory

T = TypeVar("T")


class Outcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class WorkflowError:
    """Failure payload presented to the user as a single blocking notice.

    ``step`` is only set by multi-step workflows (the ingestion pipeline) to
    say which step failed.
    """

    category: "ErrorCategory"
    message: str
    should_force_logout: bool = False
    status_code: int | None = None
    field_errors: dict[str, str] = field(default_factory=dict)
    step: str | None = None

    @classmethod
    def from_classified(
        cls,
        classified: "ClassifiedError",
        step: str | None = None,
        message: str | None = None,
    ) -> "WorkflowError":
        return cls(
            category=classified.category,
            message=message or classified.message,
            should_force_logout=classified.should_force_logout,
            status_code=classified.status_code,
            field_errors=dict(classified.field_errors),
            step=step,
        )


@dataclass(frozen=True)
class WorkflowResult(Generic[T]):
    """Outcome of a controller operation: a value or a ``WorkflowError``."""

    outcome: Outcome
    value: T | None = None
    error: WorkflowError | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "WorkflowResult[T]":
        """Create successful result."""
        return cls(outcome=Outcome.SUCCESS, value=value)

    @classmethod
    def fail(cls, error: WorkflowError) -> "WorkflowResult[T]":
        """Create failed result."""
        return cls(outcome=Outcome.FAILURE, error=error)

    @classmethod
    def failure(
        cls,
        category: "ErrorCategory",
        message: str,
        step: str | None = None,
        **kwargs: Any,
    ) -> "WorkflowResult[T]":
        """Shortcut for client-side failures that never touched the network."""
        return cls.fail(WorkflowError(category=category, message=message, step=step, **kwargs))

    @property
    def success(self) -> bool:
        return self.outcome == Outcome.SUCCESS

    @property
    def failed(self) -> bool:
        return self.outcome == Outcome.FAILURE

    @property
    def category(self) -> "ErrorCategory | None":
        return self.error.category if self.error else None

    @property
    def message(self) -> str | None:
        return self.error.message if self.error else None

    @property
    def should_force_logout(self) -> bool:
        return bool(self.error and self.error.should_force_logout)

    def unwrap(self) -> T:
        """Return the value or raise if the workflow failed."""
        if self.error is not None:
            raise RuntimeError(f"Workflow failed ({self.error.category.value}): {self.error.message}")
        return self.value  # type: ignore[return-value]
