"""Appointment Entity - Aggregate Root.

Represents a consultation request between a patient and a doctor, with the
client-side state machine (pending -> accepted | declined) and the time
helpers used by listing and check-in.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from medico_client.core.domain.entities import AggregateRoot
from medico_client.core.domain.exceptions import InvalidTransitionException

from ..value_objects.appointment_status import AppointmentStatus


def ensure_aware(value: datetime) -> datetime:
    """Treat naive timestamps from the service as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@dataclass
class Appointment(AggregateRoot[str]):
    """Appointment - Aggregate Root.

    Created on patient request; mutated only by doctor-side approve/decline;
    never deleted by the client, only re-fetched.
    """

    patient_id: str | None = None
    doctor_id: str | None = None

    requested_date: datetime | None = None
    scheduled_at: datetime | None = None
    status: AppointmentStatus = AppointmentStatus.PENDING

    reason: str = ""
    grant_history_access: bool = False

    # Provisioned by the service on approval
    meeting_link: str | None = None
    meeting_password: str | None = None
    doctor_notes: str | None = None

    def _transition(self, target: AppointmentStatus) -> None:
        if not self.status.can_transition_to(target):
            raise InvalidTransitionException(
                "Appointment",
                self.status.value,
                target.value,
                message=f"Cannot change a {self.status.display_name.lower()} appointment to {target.value}",
            )
        self.status = target
        self.touch()

    def accept(
        self,
        scheduled_at: datetime,
        meeting_link: str | None = None,
        meeting_password: str | None = None,
        notes: str | None = None,
    ) -> None:
        """Mark the appointment accepted with the provisioned meeting.

        Raises:
            InvalidTransitionException: If the appointment is not pending.
        """
        self._transition(AppointmentStatus.ACCEPTED)
        self.scheduled_at = ensure_aware(scheduled_at)
        self.meeting_link = meeting_link
        self.meeting_password = meeting_password
        self.doctor_notes = notes

    def decline(self, reason: str | None = None) -> None:
        """Mark the appointment declined.

        Raises:
            InvalidTransitionException: If the appointment is not pending.
        """
        self._transition(AppointmentStatus.DECLINED)
        self.doctor_notes = reason

    # Query methods
    def has_meeting(self) -> bool:
        return bool(self.meeting_link)

    def is_past(self, now: datetime) -> bool:
        """True when the scheduled time is before ``now``."""
        if self.scheduled_at is None:
            return False
        return ensure_aware(self.scheduled_at) < ensure_aware(now)

    def time_until(self, now: datetime) -> timedelta | None:
        if self.scheduled_at is None:
            return None
        return ensure_aware(self.scheduled_at) - ensure_aware(now)

    def minutes_until(self, now: datetime) -> float | None:
        """Minutes until the scheduled time; negative once it has passed."""
        delta = self.time_until(now)
        return delta.total_seconds() / 60 if delta is not None else None

    def is_hidden_from_listing(self, now: datetime) -> bool:
        """Accepted appointments whose time has passed are not surfaced."""
        return self.status == AppointmentStatus.ACCEPTED and self.is_past(now)
