# ============================================================================
# SCOPE: APPLICATION LAYER (Auth)
# Description: Forgot-password and reset-password flow.
# ============================================================================
"""Password Recovery Service.

First and last stage of the reset flow around ``VerificationCodeController``:
request a code by email, then set the new password with the submitted code.
"""

import logging
from typing import TYPE_CHECKING

from medico_client.config.settings import get_settings
from medico_client.domains.shared.application import (
    ErrorCategory,
    ErrorClassifier,
    WorkflowError,
    WorkflowResult,
)

from ...domain.value_objects.password_strength import PasswordStrength
from .verification_controller import VerificationSubmission

if TYPE_CHECKING:
    from ..ports import IAuthService

logger = logging.getLogger(__name__)


class PasswordRecoveryService:
    """Request a verification code and reset the password with it."""

    def __init__(self, service: "IAuthService", classifier: ErrorClassifier | None = None):
        self._service = service
        self._classifier = classifier or ErrorClassifier()
        self._min_length = get_settings().PASSWORD_MIN_LENGTH

    def password_strength(self, password: str) -> PasswordStrength:
        return PasswordStrength.evaluate(password or "", self._min_length)

    async def request_code(self, email: str) -> WorkflowResult[str]:
        """Send a verification code to ``email``.

        Returns:
            WorkflowResult with the normalized email, used to start the
            code-entry step.
        """
        email = (email or "").strip()
        if not email or "@" not in email:
            return WorkflowResult.failure(
                ErrorCategory.VALIDATION_FAILED,
                "Please enter a valid email address",
                field_errors={"email": "Invalid email"},
            )

        response = await self._service.forgot_password(email)
        if not response.success:
            classified = self._classifier.classify(response)
            logger.warning(f"Password reset request failed: {classified.category.value}")
            return WorkflowResult.fail(WorkflowError.from_classified(classified))

        logger.info("Password reset code requested")
        return WorkflowResult.ok(email)

    async def reset_password(
        self,
        submission: VerificationSubmission,
        new_password: str,
        confirm_password: str,
    ) -> WorkflowResult[None]:
        """Set a new password.

        Local checks run first (no remote call when they fail): both entries
        match and the password meets the minimum strength.
        """
        if new_password != confirm_password:
            return WorkflowResult.failure(
                ErrorCategory.VALIDATION_FAILED,
                "Passwords do not match",
                field_errors={"confirm_password": "Passwords do not match"},
            )

        strength = self.password_strength(new_password)
        if not strength.is_acceptable:
            message = "Password must contain " + ", ".join(strength.missing_requirements()) + "."
            return WorkflowResult.failure(
                ErrorCategory.VALIDATION_FAILED,
                message,
                field_errors={"new_password": message},
            )

        response = await self._service.reset_password(submission.code, new_password)
        if not response.success:
            classified = self._classifier.classify(response)
            logger.warning(
                f"Password reset failed: {classified.category.value} (status={classified.status_code})"
            )
            return WorkflowResult.fail(WorkflowError.from_classified(classified))

        logger.info("Password reset completed")
        return WorkflowResult.ok(None)
