# ============================================================================
# SCOPE: APPLICATION LAYER (Shared)
# Description: Remote call response type.
# ============================================================================
"""External Response Type.

Contains the ExternalResponse dataclass returned by every remote client.
Kept in its own module so ports and clients can import it without cycles.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ResponseSource(str, Enum):
    """Failure domain a response came from."""

    SERVICE = "service"  # main scheduling/records API
    STORAGE = "storage"  # pre-authorized object-storage endpoint


@dataclass
class ExternalResponse:
    """Structured response from a remote call.

    Clients never raise for HTTP or transport failures; they return one of
    these instead so controllers can classify the failure.

    ``status_code`` is None when no response was received at all
    (DNS failure, refused connection, timeout).
    """

    success: bool
    data: dict[str, Any] | list[Any] | None = None
    status_code: int | None = None
    detail: Any = None
    error_message: str | None = None
    source: ResponseSource = ResponseSource.SERVICE

    @classmethod
    def ok(
        cls,
        data: dict[str, Any] | list[Any] | None = None,
        status_code: int = 200,
        source: ResponseSource = ResponseSource.SERVICE,
    ) -> "ExternalResponse":
        """Factory for successful response."""
        return cls(success=True, data=data, status_code=status_code, source=source)

    @classmethod
    def http_error(
        cls,
        status_code: int,
        detail: Any = None,
        source: ResponseSource = ResponseSource.SERVICE,
    ) -> "ExternalResponse":
        """Factory for a response that arrived with a non-2xx status."""
        return cls(
            success=False,
            status_code=status_code,
            detail=detail,
            error_message=f"HTTP {status_code}",
            source=source,
        )

    @classmethod
    def transport_error(
        cls,
        message: str,
        source: ResponseSource = ResponseSource.SERVICE,
    ) -> "ExternalResponse":
        """Factory for a call that never received a response."""
        return cls(success=False, error_message=message, source=source)

    @property
    def no_response(self) -> bool:
        """True when the call failed before any HTTP response arrived."""
        return not self.success and self.status_code is None

    def get_dict(self) -> dict[str, Any]:
        """Get data as dict, handling list responses (returns first item).

        Returns:
            Data as dictionary, or empty dict if data is None/empty list.
        """
        if isinstance(self.data, dict):
            return self.data
        if isinstance(self.data, list) and len(self.data) > 0:
            first = self.data[0]
            if isinstance(first, dict):
                return first
        return {}
