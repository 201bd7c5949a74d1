# ============================================================================
# SCOPE: APPLICATION LAYER (Appointments)
# Description: Appointment service port.
# ============================================================================
"""Appointment Service Port.

The subset of the remote service the appointment controller needs.
Implemented by ``MedicoAPIClient``; tests substitute a recording fake.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from medico_client.domains.shared.application.response import ExternalResponse


@runtime_checkable
class IAppointmentService(Protocol):
    """Interface for appointment operations."""

    async def create_appointment(
        self,
        doctor_id: str,
        requested_date: datetime,
        reason: str,
        grant_history_access: bool,
    ) -> "ExternalResponse":
        """Create a pending appointment request."""
        ...

    async def list_appointments(self, status: str | None = None) -> "ExternalResponse":
        """List appointments, optionally filtered by status."""
        ...

    async def get_next_appointment(self) -> "ExternalResponse":
        """Fetch the next upcoming appointment (404 when there is none)."""
        ...

    async def get_appointment(self, appointment_id: str) -> "ExternalResponse":
        """Fetch a single appointment."""
        ...

    async def approve_appointment(
        self,
        appointment_id: str,
        scheduled_at: datetime,
        notes: str | None = None,
    ) -> "ExternalResponse":
        """Approve a pending appointment; the service provisions a meeting."""
        ...

    async def update_appointment_status(
        self,
        appointment_id: str,
        status: str,
        reason: str | None = None,
    ) -> "ExternalResponse":
        """Set the status of an appointment (used for decline)."""
        ...
