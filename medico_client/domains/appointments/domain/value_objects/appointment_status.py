"""Appointment Status Value Object.

Defines the possible states of an appointment and the transitions the
client itself is allowed to initiate.
"""

from enum import Enum


class AppointmentStatus(str, Enum):
    """Appointment states with the client-side state machine."""

    PENDING = "pending"  # Requested by the patient, awaiting the doctor
    ACCEPTED = "accepted"  # Approved, meeting provisioned
    DECLINED = "declined"  # Rejected by the doctor
    COMPLETED = "completed"  # Consultation held
    CANCELLED = "cancelled"  # Cancelled outside this workflow

    @property
    def display_name(self) -> str:
        names = {
            "pending": "Pending",
            "accepted": "Accepted",
            "declined": "Declined",
            "completed": "Completed",
            "cancelled": "Cancelled",
        }
        return names.get(self.value, self.value)

    def can_transition_to(self, new_status: "AppointmentStatus") -> bool:
        """Validate a client-initiated transition.

        State machine:
        - pending -> accepted, declined
        - every other state is terminal from the client's perspective
        """
        transitions: dict[str, list[str]] = {
            "pending": ["accepted", "declined"],
            "accepted": [],
            "declined": [],
            "completed": [],
            "cancelled": [],
        }
        return new_status.value in transitions.get(self.value, [])

    def is_final(self) -> bool:
        """No client-initiated transition leaves this state."""
        return self.value != "pending"

    @classmethod
    def parse(cls, value: str | None, default: "AppointmentStatus | None" = None) -> "AppointmentStatus":
        """Parse a server status string, accepting the backend's synonyms."""
        default = default or cls.PENDING
        if not value:
            return default
        normalized = value.strip().lower()
        aliases = {
            "approved": "accepted",
            "confirmed": "accepted",
            "scheduled": "accepted",
            "rejected": "declined",
            "canceled": "cancelled",
        }
        normalized = aliases.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            return default
