from .cooldown_timer import CooldownTimer
from .password_recovery_service import PasswordRecoveryService
from .verification_controller import VerificationCodeController, VerificationSubmission

__all__ = [
    "CooldownTimer",
    "PasswordRecoveryService",
    "VerificationCodeController",
    "VerificationSubmission",
]
