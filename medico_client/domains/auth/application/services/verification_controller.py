# ============================================================================
# SCOPE: APPLICATION LAYER (Auth)
# Description: One-time code entry with a resend cooldown.
# ============================================================================
"""Verification Code Controller.

Backs the code-entry screen of the password reset flow: six single-digit
slots with automatic focus movement, a 60 second resend cooldown that ticks
on a background task, and the hand-off of the completed code to the reset
step.

The controller owns its ticker. Use it as an async context manager (or call
``start``/``close``) so the ticker is cancelled on every exit path.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from medico_client.config.settings import get_settings
from medico_client.domains.shared.application import (
    ErrorCategory,
    ErrorClassifier,
    WorkflowError,
    WorkflowResult,
)

from ...domain.entities.verification_session import VerificationSession
from .cooldown_timer import CooldownTimer, SleepFunc

if TYPE_CHECKING:
    from ..ports import IAuthService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationSubmission:
    """Completed code, handed to the password reset step."""

    email: str
    code: str


class VerificationCodeController:
    """Owns a ``VerificationSession`` and its cooldown ticker.

    Example:
        >>> async with VerificationCodeController(api, "jane@example.com") as otp:
        ...     otp.enter_digit(0, "4")
        ...     result = otp.submit()
    """

    def __init__(
        self,
        service: "IAuthService",
        email: str,
        classifier: ErrorClassifier | None = None,
        cooldown_seconds: int | None = None,
        code_length: int | None = None,
        sleep: SleepFunc | None = None,
    ):
        settings = get_settings()
        if cooldown_seconds is None:
            cooldown_seconds = settings.OTP_RESEND_COOLDOWN_SECONDS
        if code_length is None:
            code_length = settings.OTP_CODE_LENGTH
        if cooldown_seconds < 0:
            raise ValueError("cooldown_seconds must be 0 or greater")
        if code_length < 1:
            raise ValueError("code_length must be at least 1")
        self._service = service
        self._classifier = classifier or ErrorClassifier()
        self._cooldown_seconds = cooldown_seconds
        self._session = VerificationSession(
            email=email,
            code_length=code_length,
            cooldown_remaining_seconds=self._cooldown_seconds,
        )
        self._timer = CooldownTimer(on_tick=self.tick, sleep=sleep)
        self._closed = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def __aenter__(self) -> "VerificationCodeController":
        await self.start()
        return self

    async def __aexit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        await self.close()

    async def start(self) -> None:
        """Begin the cooldown for the code that was just sent."""
        self._closed = False
        self._session.reset(self._cooldown_seconds)
        self._timer.start()
        logger.info(f"Verification started, resend available in {self._cooldown_seconds}s")

    async def close(self) -> None:
        """Cancel the ticker. Safe to call more than once."""
        self._closed = True
        await self._timer.stop()

    # =========================================================================
    # State
    # =========================================================================

    @property
    def session(self) -> VerificationSession:
        return self._session

    @property
    def cooldown_remaining_seconds(self) -> int:
        return self._session.cooldown_remaining_seconds

    @property
    def can_resend(self) -> bool:
        return self._session.can_resend

    @property
    def focus_index(self) -> int:
        return self._session.focus_index

    @property
    def is_ticking(self) -> bool:
        return self._timer.is_running

    def tick(self) -> int:
        """Advance the cooldown by one second; returns the seconds remaining."""
        return self._session.tick()

    def enter_digit(self, index: int, text: str) -> int:
        """Slot input handler; returns the slot that should hold focus."""
        return self._session.set_digit(index, text)

    def backspace(self, index: int) -> int:
        """Backspace handler; returns the slot that should hold focus."""
        return self._session.backspace(index)

    # =========================================================================
    # Actions
    # =========================================================================

    def submit(self) -> WorkflowResult[VerificationSubmission]:
        """Package the email and the complete code for the reset step.

        No remote call: the code is verified when the new password is set.
        """
        if not self._session.is_complete:
            return WorkflowResult.failure(
                ErrorCategory.VALIDATION_FAILED,
                f"Please enter the complete {self._session.code_length}-digit code.",
                field_errors={"code": "Incomplete code"},
            )
        return WorkflowResult.ok(VerificationSubmission(email=self._session.email, code=self._session.code))

    async def resend(self) -> WorkflowResult[VerificationSession]:
        """Request a new code.

        While the cooldown is running this is a no-op that returns a
        ``cooldown_active`` failure without calling the service. On success
        the slots are cleared, focus returns to the first slot and the
        cooldown restarts.
        """
        if not self._session.can_resend:
            remaining = self._session.cooldown_remaining_seconds
            return WorkflowResult.failure(
                ErrorCategory.COOLDOWN_ACTIVE,
                f"Please wait {remaining} seconds before requesting a new code.",
            )

        response = await self._service.forgot_password(self._session.email)
        if not response.success:
            classified = self._classifier.classify(response)
            logger.warning(
                f"Resending verification code failed: {classified.category.value} (status={classified.status_code})"
            )
            return WorkflowResult.fail(WorkflowError.from_classified(classified))

        self._session.reset(self._cooldown_seconds)
        if not self._closed:
            self._timer.start()
        logger.info("Verification code resent")
        return WorkflowResult.ok(self._session)
