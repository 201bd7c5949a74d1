# ============================================================================
# SCOPE: APPLICATION LAYER (Shared)
# Description: Maps remote-call failures to user-facing error categories.
# ============================================================================
"""Error Classifier.

Turns a failed ``ExternalResponse`` into a ``ClassifiedError`` with a
category, a user-facing message and the forced-logout flag.

Classification is a pure function of the response: classifying the same
response twice yields identical results.

Object-storage transfers are a separate failure domain. Their bodies are
never parsed as service errors; only "no response" vs "rejected" matters.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .response import ExternalResponse, ResponseSource


class ErrorCategory(str, Enum):
    """Error categories.

    The first eight are produced by ``ErrorClassifier``. The remaining ones
    are raised client-side by controllers and never come from a response.
    """

    NETWORK_UNREACHABLE = "network_unreachable"
    INVALID_REQUEST = "invalid_request"  # 400
    UNAUTHENTICATED = "unauthenticated"  # 401
    FORBIDDEN = "forbidden"  # 403
    NOT_FOUND = "not_found"  # 404
    VALIDATION_FAILED = "validation_failed"  # 422 and local validation
    SERVER_ERROR = "server_error"  # 500 / 503
    UNCLASSIFIED_HTTP_ERROR = "unclassified_http_error"

    # Client-side only
    INVALID_TRANSITION = "invalid_transition"
    COOLDOWN_ACTIVE = "cooldown_active"


@dataclass(frozen=True)
class ClassifiedError:
    """Classifier output."""

    category: ErrorCategory
    message: str
    should_force_logout: bool = False
    status_code: int | None = None
    field_errors: dict[str, str] = field(default_factory=dict)


class ErrorClassifier:
    """Classify remote failures into ``ErrorCategory`` values.

    Example:
        >>> classifier = ErrorClassifier()
        >>> error = classifier.classify(ExternalResponse.http_error(403))
        >>> error.category
        <ErrorCategory.FORBIDDEN: 'forbidden'>
    """

    NETWORK_MESSAGE = "Network error. Please check your internet connection."
    INVALID_REQUEST_MESSAGE = "Invalid request. Please check your input."
    UNAUTHENTICATED_MESSAGE = "Session expired. Please login again."
    FORBIDDEN_MESSAGE = "Access denied. You do not have permission to perform this action."
    NOT_FOUND_MESSAGE = "Resource not found."
    VALIDATION_MESSAGE = "Validation error. Please check your input."
    SERVER_ERROR_MESSAGE = "Server error. Please try again later."
    UNAVAILABLE_MESSAGE = "Service temporarily unavailable. Please try again later."
    UNCLASSIFIED_TEMPLATE = "An error occurred ({status}). Please try again."

    STORAGE_REJECTED_TEMPLATE = "File storage rejected the upload ({status}). Please try again."
    STORAGE_EXPIRED_MESSAGE = "The upload link was rejected or has expired. Please try again."

    def classify(self, response: ExternalResponse) -> ClassifiedError:
        """Classify a failed response.

        Args:
            response: A response with ``success == False``.

        Returns:
            ClassifiedError for presentation.
        """
        if response.source == ResponseSource.STORAGE:
            return self.classify_storage_failure(response)

        if response.no_response:
            return ClassifiedError(category=ErrorCategory.NETWORK_UNREACHABLE, message=self.NETWORK_MESSAGE)

        status = response.status_code
        detail = self._detail_text(response.detail)

        if status == 400:
            return ClassifiedError(
                category=ErrorCategory.INVALID_REQUEST,
                message=detail or self.INVALID_REQUEST_MESSAGE,
                status_code=400,
            )

        if status == 401:
            return ClassifiedError(
                category=ErrorCategory.UNAUTHENTICATED,
                message=detail or self.UNAUTHENTICATED_MESSAGE,
                should_force_logout=True,
                status_code=401,
            )

        if status == 403:
            return ClassifiedError(
                category=ErrorCategory.FORBIDDEN,
                message=detail or self.FORBIDDEN_MESSAGE,
                status_code=403,
            )

        if status == 404:
            return ClassifiedError(
                category=ErrorCategory.NOT_FOUND,
                message=detail or self.NOT_FOUND_MESSAGE,
                status_code=404,
            )

        if status == 422:
            return self._classify_validation(response.detail, detail)

        if status == 500:
            return ClassifiedError(
                category=ErrorCategory.SERVER_ERROR,
                message=self.SERVER_ERROR_MESSAGE,
                status_code=500,
            )

        if status == 503:
            return ClassifiedError(
                category=ErrorCategory.SERVER_ERROR,
                message=self.UNAVAILABLE_MESSAGE,
                status_code=503,
            )

        return ClassifiedError(
            category=ErrorCategory.UNCLASSIFIED_HTTP_ERROR,
            message=detail or self.UNCLASSIFIED_TEMPLATE.format(status=status),
            status_code=status,
        )

    def classify_storage_failure(self, response: ExternalResponse) -> ClassifiedError:
        """Classify a failed object-storage transfer (transport failure only)."""
        if response.no_response:
            return ClassifiedError(category=ErrorCategory.NETWORK_UNREACHABLE, message=self.NETWORK_MESSAGE)

        status = response.status_code
        if status == 403:
            message = self.STORAGE_EXPIRED_MESSAGE
        else:
            message = self.STORAGE_REJECTED_TEMPLATE.format(status=status)
        return ClassifiedError(
            category=ErrorCategory.UNCLASSIFIED_HTTP_ERROR,
            message=message,
            status_code=status,
        )

    def _classify_validation(self, raw_detail: Any, detail_text: str | None) -> ClassifiedError:
        """Aggregate FastAPI-style ``detail`` lists into one message."""
        if isinstance(raw_detail, list) and raw_detail:
            lines: list[str] = []
            field_errors: dict[str, str] = {}
            for item in raw_detail:
                if not isinstance(item, dict):
                    continue
                loc = item.get("loc") or []
                field_name = loc[1] if isinstance(loc, list) and len(loc) > 1 else None
                msg = str(item.get("msg", "Invalid value"))
                lines.append(f"{field_name or 'Field'}: {msg}")
                field_errors[str(field_name or "general")] = msg
            if lines:
                return ClassifiedError(
                    category=ErrorCategory.VALIDATION_FAILED,
                    message="Validation error:\n" + "\n".join(lines),
                    status_code=422,
                    field_errors=field_errors,
                )

        return ClassifiedError(
            category=ErrorCategory.VALIDATION_FAILED,
            message=detail_text or self.VALIDATION_MESSAGE,
            status_code=422,
        )

    @staticmethod
    def _detail_text(detail: Any) -> str | None:
        """Server detail as text, only when the server sent a plain string."""
        if isinstance(detail, str) and detail.strip():
            return detail.strip()
        return None
