# ============================================================================
# SCOPE: APPLICATION LAYER (Shared)
# Description: Result and error types shared by every workflow controller.
# ============================================================================
"""Shared application layer.

Every controller talks to the remote service through ``ExternalResponse``,
classifies failures with ``ErrorClassifier`` and returns ``WorkflowResult``.
"""

from .error_classifier import ClassifiedError, ErrorCategory, ErrorClassifier
from .response import ExternalResponse, ResponseSource
from .response_extractor import ResponseExtractor
from .workflow_result import Outcome, WorkflowError, WorkflowResult

__all__ = [
    "ClassifiedError",
    "ErrorCategory",
    "ErrorClassifier",
    "ExternalResponse",
    "Outcome",
    "ResponseExtractor",
    "ResponseSource",
    "WorkflowError",
    "WorkflowResult",
]
