"""
Shared pytest fixtures for all tests.

Provides a recording fake of the remote service (appointments, documents,
auth) and of object storage, plus settings isolation.
"""

import os
from collections import defaultdict, deque
from datetime import UTC, datetime
from typing import Any

import pytest

from medico_client.config.settings import reset_settings
from medico_client.domains.shared.application import ErrorClassifier, ExternalResponse, ResponseSource

# Ensure test environment
os.environ["ENVIRONMENT"] = "test"


# ============================================================================
# SETTINGS
# ============================================================================


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop the cached Settings around every test."""
    reset_settings()
    yield
    reset_settings()


# ============================================================================
# FAKE REMOTE SERVICE
# ============================================================================


class RecordingService:
    """Fake of every service port; records calls and replays queued responses.

    Responses are queued per method name with ``respond``; a method without a
    queued response answers ``ExternalResponse.ok({})``.
    """

    def __init__(self, source: ResponseSource = ResponseSource.SERVICE):
        self.source = source
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._responses: dict[str, deque[ExternalResponse]] = defaultdict(deque)

    def respond(self, method: str, *responses: ExternalResponse) -> "RecordingService":
        self._responses[method].extend(responses)
        return self

    def calls_to(self, method: str) -> list[dict[str, Any]]:
        return [kwargs for name, kwargs in self.calls if name == method]

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def _record(self, method: str, **kwargs: Any) -> ExternalResponse:
        self.calls.append((method, kwargs))
        queue = self._responses[method]
        if queue:
            return queue.popleft()
        return ExternalResponse.ok({}, source=self.source)

    # Appointments
    async def create_appointment(self, doctor_id, requested_date, reason, grant_history_access):
        return await self._record(
            "create_appointment",
            doctor_id=doctor_id,
            requested_date=requested_date,
            reason=reason,
            grant_history_access=grant_history_access,
        )

    async def list_appointments(self, status=None):
        return await self._record("list_appointments", status=status)

    async def get_next_appointment(self):
        return await self._record("get_next_appointment")

    async def get_appointment(self, appointment_id):
        return await self._record("get_appointment", appointment_id=appointment_id)

    async def approve_appointment(self, appointment_id, scheduled_at, notes=None):
        return await self._record(
            "approve_appointment", appointment_id=appointment_id, scheduled_at=scheduled_at, notes=notes
        )

    async def update_appointment_status(self, appointment_id, status, reason=None):
        return await self._record(
            "update_appointment_status", appointment_id=appointment_id, status=status, reason=reason
        )

    # Documents
    async def request_upload_url(self, owner_id, file_name, mime_type, size_bytes):
        return await self._record(
            "request_upload_url",
            owner_id=owner_id,
            file_name=file_name,
            mime_type=mime_type,
            size_bytes=size_bytes,
        )

    async def confirm_upload(self, document_id, metadata=None):
        return await self._record("confirm_upload", document_id=document_id, metadata=metadata)

    async def analyze_document(self, document_id):
        return await self._record("analyze_document", document_id=document_id)

    # Object storage
    async def put_bytes(self, upload_url, content, content_type):
        return await self._record("put_bytes", upload_url=upload_url, content=content, content_type=content_type)

    # Auth
    async def forgot_password(self, email):
        return await self._record("forgot_password", email=email)

    async def reset_password(self, token, new_password):
        return await self._record("reset_password", token=token, new_password=new_password)


@pytest.fixture
def service() -> RecordingService:
    """Recording fake of the scheduling/records service."""
    return RecordingService()


@pytest.fixture
def storage() -> RecordingService:
    """Recording fake of the object store (responses tagged STORAGE)."""
    return RecordingService(source=ResponseSource.STORAGE)


@pytest.fixture
def classifier() -> ErrorClassifier:
    return ErrorClassifier()


# ============================================================================
# TEST DATA
# ============================================================================


@pytest.fixture
def now() -> datetime:
    """Fixed reference time."""
    return datetime(2026, 3, 10, 14, 0, tzinfo=UTC)


@pytest.fixture
def appointment_payload() -> dict[str, Any]:
    """Pending appointment as the service returns it."""
    return {
        "id": "appt-1",
        "patient_id": "patient-1",
        "doctor_id": "doctor-1",
        "requested_date": "2026-03-12T10:00:00Z",
        "reason": "Follow-up on blood test results",
        "grant_access_to_history": True,
        "status": "pending",
    }
