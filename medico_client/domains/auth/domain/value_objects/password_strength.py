"""Password Strength Value Object."""

import re
from dataclasses import dataclass
from enum import Enum


class StrengthLevel(str, Enum):
    NONE = ""
    WEAK = "Weak"
    MEDIUM = "Medium"
    STRONG = "Strong"


@dataclass(frozen=True)
class PasswordStrength:
    """Individual checks plus the 0-5 score they add up to."""

    length: bool
    uppercase: bool
    lowercase: bool
    number: bool
    special: bool
    min_length: int = 8

    @classmethod
    def evaluate(cls, password: str, min_length: int = 8) -> "PasswordStrength":
        return cls(
            length=len(password) >= min_length,
            uppercase=bool(re.search(r"[A-Z]", password)),
            lowercase=bool(re.search(r"[a-z]", password)),
            number=bool(re.search(r"[0-9]", password)),
            special=bool(re.search(r"[^A-Za-z0-9]", password)),
            min_length=min_length,
        )

    @property
    def score(self) -> int:
        return sum([self.length, self.uppercase, self.lowercase, self.number, self.special])

    @property
    def level(self) -> StrengthLevel:
        """Weak up to 2 checks, Medium at 3, Strong at 4 or 5."""
        score = self.score
        if score == 0:
            return StrengthLevel.NONE
        if score <= 2:
            return StrengthLevel.WEAK
        if score == 3:
            return StrengthLevel.MEDIUM
        return StrengthLevel.STRONG

    @property
    def is_acceptable(self) -> bool:
        """Minimum bar for a new password: length, both cases and a digit."""
        return self.length and self.uppercase and self.lowercase and self.number

    def missing_requirements(self) -> list[str]:
        missing = []
        if not self.length:
            missing.append(f"at least {self.min_length} characters")
        if not self.uppercase:
            missing.append("an uppercase letter")
        if not self.lowercase:
            missing.append("a lowercase letter")
        if not self.number:
            missing.append("a number")
        return missing
