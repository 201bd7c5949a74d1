# ============================================================================
# SCOPE: APPLICATION LAYER (Appointments)
# Description: Modal input state with a pending continuation.
# ============================================================================
"""Action dialog.

Collects free text (approval notes, decline reason) for a workflow step
without coupling the step to a platform prompt. The screen opens the dialog
with a continuation, binds ``text`` to its input, and calls ``confirm()`` or
``cancel()``. Confirm runs the pending action with the captured text;
cancel discards it without any remote call.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DialogState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    SUBMITTING = "submitting"


@dataclass
class ActionDialog(Generic[T]):
    """Explicit modal state plus a continuation callback."""

    title: str = ""
    prompt: str = ""
    confirm_label: str = "Confirm"
    text: str = ""
    state: DialogState = DialogState.CLOSED
    _pending: Callable[[str], Awaitable[T]] | None = field(default=None, repr=False)

    @property
    def is_open(self) -> bool:
        return self.state != DialogState.CLOSED

    def open(
        self,
        title: str,
        prompt: str,
        on_confirm: Callable[[str], Awaitable[T]],
        confirm_label: str = "Confirm",
    ) -> None:
        """Open the dialog; any previously pending action is discarded."""
        if self._pending is not None:
            logger.debug(f"Dialog '{self.title}' replaced before confirmation")
        self.title = title
        self.prompt = prompt
        self.confirm_label = confirm_label
        self.text = ""
        self.state = DialogState.OPEN
        self._pending = on_confirm

    def update_text(self, text: str) -> None:
        if self.state == DialogState.OPEN:
            self.text = text

    async def confirm(self) -> T | None:
        """Run the pending action with the captured text and close.

        Returns:
            The continuation's result, or None if nothing was pending.
        """
        if self.state != DialogState.OPEN or self._pending is None:
            return None
        action = self._pending
        captured = self.text
        self.state = DialogState.SUBMITTING
        try:
            return await action(captured)
        finally:
            # A dialog reopened while this action ran keeps its own action.
            if self._pending is action:
                self._reset()

    def cancel(self) -> None:
        """Discard the pending action."""
        if self.is_open:
            logger.debug(f"Dialog '{self.title}' cancelled")
        self._reset()

    def _reset(self) -> None:
        self._pending = None
        self.text = ""
        self.state = DialogState.CLOSED
