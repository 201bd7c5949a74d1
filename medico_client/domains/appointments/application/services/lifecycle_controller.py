# ============================================================================
# SCOPE: APPLICATION LAYER (Appointments)
# Description: Appointment state machine driver and check-in gate.
# ============================================================================
"""Appointment Lifecycle Controller.

Drives request, approve, decline, listing and check-in against the remote
service. Each operation is at most one remote call; nothing is retried
automatically and nothing is partially applied.

The controller keeps its own copies of the appointments it has seen so it
can refuse illegal transitions (approving an accepted appointment, declining
a declined one) without a round trip.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from pydantic import ValidationError

from medico_client.config.settings import get_settings
from medico_client.core.domain.exceptions import InvalidTransitionException
from medico_client.domains.shared.application import (
    ErrorCategory,
    ErrorClassifier,
    ExternalResponse,
    ResponseExtractor,
    WorkflowError,
    WorkflowResult,
)

from ...domain.entities.appointment import Appointment, ensure_aware
from ...domain.value_objects.appointment_status import AppointmentStatus
from ..dto.appointment_dtos import AppointmentPayload, CheckInTarget, GateError, GateReason
from .action_dialog import ActionDialog

if TYPE_CHECKING:
    from ..ports import IAppointmentService

logger = logging.getLogger(__name__)


class AppointmentLifecycleController:
    """Owns the appointment state machine for one screen.

    Example:
        >>> controller = AppointmentLifecycleController(client)
        >>> result = await controller.request_appointment("doc-1", when, "follow-up", True)
        >>> result.value.status
        <AppointmentStatus.PENDING: 'pending'>
    """

    def __init__(
        self,
        service: "IAppointmentService",
        classifier: ErrorClassifier | None = None,
        check_in_window: timedelta | None = None,
    ) -> None:
        """Initialize controller.

        Args:
            service: Appointment service port (DIP).
            classifier: Error classifier (defaults to a new instance).
            check_in_window: How long before ``scheduled_at`` check-in opens.
        """
        settings = get_settings()
        self._service = service
        self._classifier = classifier or ErrorClassifier()
        self._check_in_window = (
            check_in_window if check_in_window is not None else timedelta(minutes=settings.CHECK_IN_WINDOW_MINUTES)
        )
        self._default_notes = settings.DEFAULT_APPROVAL_NOTES
        self._default_decline_reason = settings.DEFAULT_DECLINE_REASON
        self._appointments: dict[str, Appointment] = {}

    @property
    def check_in_window(self) -> timedelta:
        return self._check_in_window

    def get_local(self, appointment_id: str) -> Appointment | None:
        """The controller's copy of an appointment, if it has seen it."""
        return self._appointments.get(appointment_id)

    def _remember(self, appointment: Appointment) -> Appointment:
        if appointment.id is not None:
            self._appointments[appointment.id] = appointment
        return appointment

    def _failure(self, response: ExternalResponse, operation: str) -> WorkflowResult:
        classified = self._classifier.classify(response)
        logger.warning(
            f"Appointment {operation} failed: {classified.category.value} "
            f"(status={classified.status_code}) - {classified.message}"
        )
        return WorkflowResult.fail(WorkflowError.from_classified(classified))

    @staticmethod
    def _parse(data: object) -> AppointmentPayload:
        return AppointmentPayload.model_validate(ResponseExtractor.as_dict(data))

    # =========================================================================
    # Patient side
    # =========================================================================

    async def request_appointment(
        self,
        doctor_id: str,
        requested_date: datetime,
        reason: str,
        grant_history_access: bool = False,
    ) -> WorkflowResult[Appointment]:
        """Create a pending appointment request.

        Args:
            doctor_id: Doctor to consult.
            requested_date: Preferred date and time.
            reason: Reason for the visit (required).
            grant_history_access: Let the doctor read the patient's documents.

        Returns:
            WorkflowResult with the pending Appointment.
        """
        reason = (reason or "").strip()
        if not reason:
            return WorkflowResult.failure(
                ErrorCategory.VALIDATION_FAILED,
                "Please provide a reason for your visit.",
                field_errors={"reason": "Reason is required"},
            )

        logger.info(f"Requesting appointment with doctor {doctor_id}")
        response = await self._service.create_appointment(
            doctor_id=doctor_id,
            requested_date=ensure_aware(requested_date),
            reason=reason,
            grant_history_access=grant_history_access,
        )
        if not response.success:
            return self._failure(response, "request")

        try:
            payload = self._parse(response.data)
        except ValidationError as e:
            logger.warning(f"Appointment request returned an unreadable payload: {e}")
            return WorkflowResult.failure(
                ErrorCategory.UNCLASSIFIED_HTTP_ERROR,
                "The appointment was requested but the server response could not be read.",
            )

        appointment = payload.to_entity()
        # Requests always start pending, whatever the echo says
        appointment.status = AppointmentStatus.PENDING
        if appointment.doctor_id is None:
            appointment.doctor_id = doctor_id
        if appointment.requested_date is None:
            appointment.requested_date = ensure_aware(requested_date)
        if not appointment.reason:
            appointment.reason = reason
        appointment.grant_history_access = payload.grant_history_access or grant_history_access

        logger.info(f"Appointment {appointment.id} requested (pending)")
        return WorkflowResult.ok(self._remember(appointment))

    # =========================================================================
    # Doctor side
    # =========================================================================

    def _guard_transition(self, appointment_id: str, target: AppointmentStatus) -> WorkflowResult | None:
        local = self._appointments.get(appointment_id)
        if local is not None and not local.status.can_transition_to(target):
            logger.warning(
                f"Refusing {target.value} for appointment {appointment_id}: status is {local.status.value}"
            )
            return WorkflowResult.failure(
                ErrorCategory.INVALID_TRANSITION,
                f"This appointment is already {local.status.display_name.lower()}.",
            )
        return None

    def _base_for_transition(self, appointment_id: str, payload: AppointmentPayload | None) -> Appointment:
        local = self._appointments.get(appointment_id)
        if local is not None:
            return local
        if payload is not None:
            return payload.to_entity(status=AppointmentStatus.PENDING)
        return Appointment(id=appointment_id, status=AppointmentStatus.PENDING)

    async def approve(
        self,
        appointment_id: str,
        scheduled_at: datetime,
        notes: str | None = None,
    ) -> WorkflowResult[Appointment]:
        """Approve a pending appointment.

        The service provisions the meeting as part of the same call, so the
        returned appointment carries ``meeting_link``/``meeting_password``.

        Args:
            appointment_id: Appointment to approve.
            scheduled_at: Confirmed consultation time.
            notes: Notes for the patient (defaults to a standard reminder).

        Returns:
            WorkflowResult with the accepted Appointment.
        """
        blocked = self._guard_transition(appointment_id, AppointmentStatus.ACCEPTED)
        if blocked is not None:
            return blocked

        notes = (notes or "").strip() or self._default_notes
        scheduled_at = ensure_aware(scheduled_at)

        logger.info(f"Approving appointment {appointment_id} for {scheduled_at.isoformat()}")
        response = await self._service.approve_appointment(appointment_id, scheduled_at, notes)
        if not response.success:
            return self._failure(response, "approve")

        try:
            payload = self._parse(response.data) if response.get_dict() else None
        except ValidationError:
            payload = None

        appointment = self._base_for_transition(appointment_id, payload)
        try:
            appointment.accept(
                scheduled_at=(payload.scheduled_at if payload and payload.scheduled_at else scheduled_at),
                meeting_link=payload.meeting_link if payload else None,
                meeting_password=payload.meeting_password if payload else None,
                notes=(payload.doctor_notes if payload and payload.doctor_notes else notes),
            )
        except InvalidTransitionException as e:
            return WorkflowResult.failure(ErrorCategory.INVALID_TRANSITION, e.message)

        if not appointment.has_meeting():
            logger.warning(f"Appointment {appointment_id} approved without a meeting link")
        logger.info(f"Appointment {appointment_id} accepted")
        return WorkflowResult.ok(self._remember(appointment))

    async def decline(self, appointment_id: str, reason: str | None = None) -> WorkflowResult[Appointment]:
        """Decline a pending appointment.

        Args:
            appointment_id: Appointment to decline.
            reason: Reason shown to the patient (defaults to a standard one).

        Returns:
            WorkflowResult with the declined Appointment.
        """
        blocked = self._guard_transition(appointment_id, AppointmentStatus.DECLINED)
        if blocked is not None:
            return blocked

        reason = (reason or "").strip() or self._default_decline_reason

        logger.info(f"Declining appointment {appointment_id}")
        response = await self._service.update_appointment_status(
            appointment_id, AppointmentStatus.DECLINED.value, reason
        )
        if not response.success:
            return self._failure(response, "decline")

        try:
            payload = self._parse(response.data) if response.get_dict() else None
        except ValidationError:
            payload = None

        appointment = self._base_for_transition(appointment_id, payload)
        try:
            appointment.decline(reason)
        except InvalidTransitionException as e:
            return WorkflowResult.failure(ErrorCategory.INVALID_TRANSITION, e.message)

        logger.info(f"Appointment {appointment_id} declined")
        return WorkflowResult.ok(self._remember(appointment))

    def open_approval_dialog(
        self,
        dialog: ActionDialog[WorkflowResult[Appointment]],
        appointment_id: str,
        scheduled_at: datetime,
    ) -> None:
        """Open ``dialog`` so that confirming it approves with the typed notes."""

        async def _approve(notes: str) -> WorkflowResult[Appointment]:
            return await self.approve(appointment_id, scheduled_at, notes)

        dialog.open(
            "Approve Appointment",
            "Add notes for the patient (optional):",
            _approve,
            confirm_label="Approve",
        )

    def open_decline_dialog(
        self,
        dialog: ActionDialog[WorkflowResult[Appointment]],
        appointment_id: str,
    ) -> None:
        """Open ``dialog`` so that confirming it declines with the typed reason."""

        async def _decline(reason: str) -> WorkflowResult[Appointment]:
            return await self.decline(appointment_id, reason)

        dialog.open(
            "Reject Appointment",
            "Reason for rejection (optional):",
            _decline,
            confirm_label="Reject",
        )

    # =========================================================================
    # Reads
    # =========================================================================

    async def list_by_status(
        self,
        status: AppointmentStatus | None = None,
        now: datetime | None = None,
    ) -> WorkflowResult[list[Appointment]]:
        """List appointments, then hide accepted appointments already in the past.

        Post-filter (explicit, applied after the fetch):
        - accepted with ``scheduled_at`` before ``now``: excluded (still in the
          remote store, just not surfaced)
        - pending / declined: always kept, regardless of date

        A 404 means "nothing to list" and yields an empty list.
        """
        now = ensure_aware(now or datetime.now(UTC))
        response = await self._service.list_appointments(status.value if status else None)
        if not response.success:
            if response.status_code == 404:
                logger.info("No appointments found")
                return WorkflowResult.ok([])
            return self._failure(response, "list")

        appointments: list[Appointment] = []
        for item in ResponseExtractor.extract_items(response.data, "appointments", "items", "results", "data"):
            try:
                appointments.append(AppointmentPayload.model_validate(item).to_entity())
            except ValidationError as e:
                logger.warning(f"Skipping malformed appointment in listing: {e.error_count()} error(s)")

        visible = self.filter_visible(appointments, now)
        for appointment in visible:
            self._remember(appointment)

        logger.info(f"Listed {len(visible)} appointment(s) ({len(appointments) - len(visible)} hidden as past)")
        return WorkflowResult.ok(visible)

    @staticmethod
    def filter_visible(appointments: list[Appointment], now: datetime) -> list[Appointment]:
        """Drop accepted appointments whose scheduled time has passed."""
        return [a for a in appointments if not a.is_hidden_from_listing(now)]

    async def next_appointment(self) -> WorkflowResult[Appointment | None]:
        """Fetch the next upcoming appointment.

        "No upcoming appointment" comes back as 404; it is an expected
        absence and is returned as ``ok(None)`` instead of an error.
        """
        response = await self._service.get_next_appointment()
        if not response.success:
            if response.status_code == 404:
                return WorkflowResult.ok(None)
            return self._failure(response, "next")

        if not response.get_dict():
            return WorkflowResult.ok(None)

        try:
            appointment = self._parse(response.data).to_entity()
        except ValidationError as e:
            logger.warning(f"Next appointment payload unreadable: {e.error_count()} error(s)")
            return WorkflowResult.ok(None)
        return WorkflowResult.ok(self._remember(appointment))

    # =========================================================================
    # Check-in
    # =========================================================================

    def check_gate(self, appointment: Appointment, now: datetime) -> GateError | None:
        """Local preconditions for check-in. None means the gate is open."""
        if appointment.status != AppointmentStatus.ACCEPTED:
            return GateError(
                reason=GateReason.NOT_ACCEPTED,
                message="Only accepted appointments can be joined.",
                scheduled_at=appointment.scheduled_at,
            )

        if not appointment.has_meeting() or appointment.scheduled_at is None:
            return GateError(
                reason=GateReason.NO_MEETING,
                message="Meeting link is not available yet.",
                scheduled_at=appointment.scheduled_at,
            )

        scheduled_at = ensure_aware(appointment.scheduled_at)
        opens_at = scheduled_at - self._check_in_window
        if ensure_aware(now) < opens_at:
            minutes = int(self._check_in_window.total_seconds() // 60)
            return GateError(
                reason=GateReason.TOO_EARLY,
                message=(
                    f"Check-in opens {minutes} minutes before your appointment "
                    f"at {scheduled_at.strftime('%Y-%m-%d %H:%M')}."
                ),
                scheduled_at=scheduled_at,
                opens_at=opens_at,
            )
        return None

    async def check_in(
        self,
        appointment: Appointment,
        now: datetime | None = None,
    ) -> WorkflowResult[CheckInTarget] | GateError:
        """Check in to an accepted appointment.

        Allowed iff ``scheduled_at - now <= check-in window`` (boundary
        inclusive). When the gate is closed a ``GateError`` is returned and
        no remote call is made. Otherwise the appointment is re-fetched once
        so the meeting credentials handed to the call provider are current.
        """
        now = ensure_aware(now or datetime.now(UTC))
        gate = self.check_gate(appointment, now)
        if gate is not None:
            logger.info(f"Check-in for appointment {appointment.id} blocked: {gate.reason.value}")
            return gate

        if appointment.id is None:
            return WorkflowResult.failure(
                ErrorCategory.VALIDATION_FAILED,
                "This appointment has not been saved yet.",
                step="check-in",
            )

        response = await self._service.get_appointment(appointment.id)
        if not response.success:
            return self._failure(response, "check-in")

        # Only an explicit server status overrides the accepted local copy.
        try:
            payload = self._parse(response.data)
            fresh = payload.to_entity(status=None if payload.status else appointment.status)
        except ValidationError:
            fresh = appointment

        if fresh.status != AppointmentStatus.ACCEPTED:
            logger.warning(f"Appointment {appointment.id} is {fresh.status.value} on the server, check-in refused")
            return GateError(
                reason=GateReason.NOT_ACCEPTED,
                message=f"This appointment is {fresh.status.display_name.lower()}.",
                scheduled_at=fresh.scheduled_at,
            )

        meeting_link = fresh.meeting_link or appointment.meeting_link
        scheduled_at = fresh.scheduled_at or appointment.scheduled_at
        if not meeting_link or scheduled_at is None:
            return GateError(
                reason=GateReason.NO_MEETING,
                message="Meeting link is not available yet.",
                scheduled_at=scheduled_at,
            )

        fresh.meeting_link = meeting_link
        fresh.scheduled_at = scheduled_at
        fresh.meeting_password = fresh.meeting_password or appointment.meeting_password
        self._remember(fresh)

        logger.info(f"Checked in to appointment {appointment.id}")
        return WorkflowResult.ok(
            CheckInTarget(
                appointment_id=appointment.id,
                meeting_link=meeting_link,
                meeting_password=fresh.meeting_password,
                scheduled_at=scheduled_at,
                doctor_id=fresh.doctor_id or appointment.doctor_id,
                patient_id=fresh.patient_id or appointment.patient_id,
            )
        )
