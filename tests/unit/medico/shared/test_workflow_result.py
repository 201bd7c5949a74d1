"""Unit tests for WorkflowResult and WorkflowError."""

import pytest

from medico_client.domains.shared.application import (
    ClassifiedError,
    ErrorCategory,
    Outcome,
    WorkflowError,
    WorkflowResult,
)


class TestWorkflowResult:
    """Tests for WorkflowResult factories and accessors."""

    def test_ok_result(self) -> None:
        """Should carry the value and no error."""
        result = WorkflowResult.ok("value")
        assert result.outcome == Outcome.SUCCESS
        assert result.success is True
        assert result.failed is False
        assert result.value == "value"
        assert result.error is None
        assert result.unwrap() == "value"

    def test_failure_result(self) -> None:
        """Should expose category and message of the error."""
        result = WorkflowResult.failure(ErrorCategory.VALIDATION_FAILED, "Bad input", step="validate")
        assert result.failed is True
        assert result.category == ErrorCategory.VALIDATION_FAILED
        assert result.message == "Bad input"
        assert result.error is not None
        assert result.error.step == "validate"

    def test_unwrap_failure_raises(self) -> None:
        """Should raise when unwrapping a failure."""
        result = WorkflowResult.failure(ErrorCategory.NOT_FOUND, "Missing")
        with pytest.raises(RuntimeError):
            result.unwrap()

    def test_force_logout_propagates(self) -> None:
        """Should report forced logout from the classified error."""
        classified = ClassifiedError(
            category=ErrorCategory.UNAUTHENTICATED,
            message="Session expired",
            should_force_logout=True,
            status_code=401,
        )
        result = WorkflowResult.fail(WorkflowError.from_classified(classified))
        assert result.should_force_logout is True
        assert result.error is not None
        assert result.error.status_code == 401

    def test_from_classified_overrides_message(self) -> None:
        """Should allow a step-specific message."""
        classified = ClassifiedError(category=ErrorCategory.SERVER_ERROR, message="Server error.")
        error = WorkflowError.from_classified(classified, step="confirm", message="Confirm failed: Server error.")
        assert error.step == "confirm"
        assert error.message == "Confirm failed: Server error."
        assert error.category == ErrorCategory.SERVER_ERROR
