"""Auth application layer."""

from .services import CooldownTimer, PasswordRecoveryService, VerificationCodeController, VerificationSubmission

__all__ = [
    "CooldownTimer",
    "PasswordRecoveryService",
    "VerificationCodeController",
    "VerificationSubmission",
]
