"""Auth domain layer."""

from .entities import VerificationSession
from .value_objects import PasswordStrength, StrengthLevel

__all__ = ["PasswordStrength", "StrengthLevel", "VerificationSession"]
