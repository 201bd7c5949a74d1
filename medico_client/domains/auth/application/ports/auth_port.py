# ============================================================================
# SCOPE: APPLICATION LAYER (Auth)
# Description: Password recovery service port.
# ============================================================================
"""Auth Service Port."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from medico_client.domains.shared.application.response import ExternalResponse


@runtime_checkable
class IAuthService(Protocol):
    """Interface for the password recovery endpoints."""

    async def forgot_password(self, email: str) -> "ExternalResponse":
        """Email a one-time verification code."""
        ...

    async def reset_password(self, token: str, new_password: str) -> "ExternalResponse":
        """Set a new password using the verification code as token."""
        ...
