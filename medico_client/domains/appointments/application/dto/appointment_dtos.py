# ============================================================================
# SCOPE: APPLICATION LAYER (Appointments)
# Description: Response models and result DTOs for appointment workflows.
# ============================================================================
"""Appointment DTOs.

``AppointmentPayload`` is the explicit shape of an appointment as returned
by the service. Every field is optional except the id; alias choices cover
the naming variants the backend has used (``join_url`` vs ``meeting_link``,
``appointment_time`` vs ``scheduled_at``).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ...domain.entities.appointment import Appointment, ensure_aware
from ...domain.value_objects.appointment_status import AppointmentStatus

# =============================================================================
# Response models
# =============================================================================


class AppointmentPayload(BaseModel):
    """Appointment as sent by the service."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("id", "appointment_id", "appointmentId"))
    patient_id: str | None = Field(None, validation_alias=AliasChoices("patient_id", "patientId"))
    doctor_id: str | None = Field(None, validation_alias=AliasChoices("doctor_id", "doctorId"))
    requested_date: datetime | None = Field(None, validation_alias=AliasChoices("requested_date", "requestedDate"))
    scheduled_at: datetime | None = Field(
        None,
        validation_alias=AliasChoices("scheduled_at", "scheduledAt", "appointment_time", "start_time"),
    )
    status: str | None = None
    reason: str | None = None
    grant_history_access: bool = Field(
        False,
        validation_alias=AliasChoices("grant_access_to_history", "grant_history_access", "grantHistoryAccess"),
    )
    meeting_link: str | None = Field(
        None, validation_alias=AliasChoices("meeting_link", "meetingLink", "join_url", "zoom_join_url")
    )
    meeting_password: str | None = Field(
        None, validation_alias=AliasChoices("meeting_password", "meetingPassword", "passcode")
    )
    doctor_notes: str | None = Field(None, validation_alias=AliasChoices("doctor_notes", "doctorNotes", "notes"))

    @field_validator("id", "patient_id", "doctor_id", mode="before")
    @classmethod
    def coerce_identifier(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("requested_date", "scheduled_at")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_aware(value) if value is not None else None

    def to_entity(self, status: AppointmentStatus | None = None) -> Appointment:
        """Build an ``Appointment``; ``status`` overrides the payload status."""
        return Appointment(
            id=self.id,
            patient_id=self.patient_id,
            doctor_id=self.doctor_id,
            requested_date=self.requested_date,
            scheduled_at=self.scheduled_at,
            status=status or AppointmentStatus.parse(self.status),
            reason=self.reason or "",
            grant_history_access=self.grant_history_access,
            meeting_link=self.meeting_link,
            meeting_password=self.meeting_password,
            doctor_notes=self.doctor_notes,
        )


# =============================================================================
# Check-in
# =============================================================================


class GateReason(str, Enum):
    """Why a check-in was blocked before reaching the service."""

    TOO_EARLY = "too_early"
    NOT_ACCEPTED = "not_accepted"
    NO_MEETING = "no_meeting"


@dataclass(frozen=True)
class GateError:
    """Returned by ``check_in`` when a local precondition blocks the call."""

    reason: GateReason
    message: str
    scheduled_at: datetime | None = None
    opens_at: datetime | None = None


@dataclass(frozen=True)
class CheckInTarget:
    """Metadata handed to the external video-call provider."""

    appointment_id: str
    meeting_link: str
    meeting_password: str | None
    scheduled_at: datetime
    doctor_id: str | None = None
    patient_id: str | None = None
