"""Verification Session.

State of the one-time-code screen: the per-slot digits, the focused slot
and the resend cooldown. Pure state; the ticking and the remote calls live
in ``VerificationCodeController``.
"""

from dataclasses import dataclass, field


@dataclass
class VerificationSession:
    """One-time code entry for a password reset."""

    email: str
    code_length: int = 6
    cooldown_remaining_seconds: int = 60
    focus_index: int = 0
    code_digits: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.code_digits:
            self.code_digits = [""] * self.code_length

    @property
    def can_resend(self) -> bool:
        return self.cooldown_remaining_seconds == 0

    @property
    def code(self) -> str:
        return "".join(self.code_digits)

    @property
    def is_complete(self) -> bool:
        return all(self.code_digits)

    @property
    def last_index(self) -> int:
        return self.code_length - 1

    def tick(self) -> int:
        """Count one second down; stays at 0 once expired."""
        if self.cooldown_remaining_seconds > 0:
            self.cooldown_remaining_seconds -= 1
        return self.cooldown_remaining_seconds

    def set_digit(self, index: int, text: str) -> int:
        """Store the last character of ``text`` in slot ``index``.

        Empty text clears the slot. Anything that is not a digit is ignored.
        Focus moves to the next slot only when a digit was stored.

        Returns:
            The new focus index.
        """
        self._check_index(index)
        if text == "":
            self.code_digits[index] = ""
            self.focus_index = index
            return self.focus_index

        char = text[-1]
        if char not in "0123456789":
            return self.focus_index

        self.code_digits[index] = char
        self.focus_index = index + 1 if index < self.last_index else index
        return self.focus_index

    def backspace(self, index: int) -> int:
        """Clear a filled slot, or move focus back from an empty one."""
        self._check_index(index)
        if self.code_digits[index]:
            self.code_digits[index] = ""
            self.focus_index = index
        elif index > 0:
            self.focus_index = index - 1
        else:
            self.focus_index = 0
        return self.focus_index

    def reset(self, cooldown_seconds: int) -> None:
        """Fresh code: empty slots, focus on the first, cooldown restarted."""
        self.code_digits = [""] * self.code_length
        self.focus_index = 0
        self.cooldown_remaining_seconds = cooldown_seconds

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.code_length:
            raise IndexError(f"Code slot {index} out of range (0-{self.last_index})")
