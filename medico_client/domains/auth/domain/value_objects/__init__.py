from .password_strength import PasswordStrength, StrengthLevel

__all__ = ["PasswordStrength", "StrengthLevel"]
