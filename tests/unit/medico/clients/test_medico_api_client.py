# ============================================================================
# Tests for MedicoAPIClient and ObjectStorageClient
# ============================================================================
"""Unit tests for the HTTP clients, driven by httpx.MockTransport."""

import json
from datetime import UTC, datetime

import httpx
import pytest

from medico_client.clients import InMemoryCredentialStore, MedicoAPIClient, ObjectStorageClient
from medico_client.domains.shared.application import ResponseSource

BASE_URL = "https://api.test/api/v1"


class Recorder:
    """MockTransport handler that records requests and replies from a table."""

    def __init__(self, status_code: int = 200, body=None, exc: Exception | None = None):
        self.status_code = status_code
        self.body = body if body is not None else {}
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict:
        return json.loads(self.last.content)


def api_client(recorder: Recorder, token: str | None = "token-123") -> MedicoAPIClient:
    return MedicoAPIClient(
        base_url=BASE_URL + "/",
        credential_store=InMemoryCredentialStore(access_token=token),
        transport=httpx.MockTransport(recorder),
    )


class TestMedicoAPIClient:
    """Tests for request shaping and response wrapping."""

    @pytest.mark.asyncio
    async def test_requires_context_manager(self) -> None:
        """Should refuse calls outside 'async with'."""
        client = MedicoAPIClient(base_url=BASE_URL)
        with pytest.raises(RuntimeError):
            await client.get_next_appointment()

    @pytest.mark.asyncio
    async def test_create_appointment_body(self) -> None:
        """Should post snake_case keys with the bearer token."""
        recorder = Recorder(201, {"id": "appt-1", "status": "pending"})
        async with api_client(recorder) as client:
            response = await client.create_appointment(
                "doctor-1", datetime(2026, 3, 12, 10, 0, tzinfo=UTC), "follow-up", True
            )

        assert response.success
        assert response.status_code == 201
        assert response.data == {"id": "appt-1", "status": "pending"}
        request = recorder.last
        assert request.method == "POST"
        assert str(request.url) == f"{BASE_URL}/appointments"
        assert request.headers["Authorization"] == "Bearer token-123"
        assert recorder.last_json() == {
            "doctor_id": "doctor-1",
            "requested_date": "2026-03-12T10:00:00+00:00",
            "reason": "follow-up",
            "grant_access_to_history": True,
        }

    @pytest.mark.asyncio
    async def test_list_with_status_query(self) -> None:
        """Should pass the status as query parameter."""
        recorder = Recorder(200, [])
        async with api_client(recorder) as client:
            await client.list_appointments("pending")

        assert recorder.last.url.params["status"] == "pending"

    @pytest.mark.asyncio
    async def test_approve_and_decline_paths(self) -> None:
        """Should PATCH approve and status endpoints."""
        recorder = Recorder()
        async with api_client(recorder) as client:
            await client.approve_appointment("a1", datetime(2026, 3, 12, 10, 0, tzinfo=UTC), "bring records")
            approve = recorder.last_json()
            await client.update_appointment_status("a1", "declined", "no slots")

        assert [r.url.path for r in recorder.requests] == [
            "/api/v1/appointments/a1/approve",
            "/api/v1/appointments/a1/status",
        ]
        assert approve == {"appointment_time": "2026-03-12T10:00:00+00:00", "doctor_notes": "bring records"}
        assert recorder.last_json() == {"status": "declined", "doctor_notes": "no slots"}

    @pytest.mark.asyncio
    async def test_upload_url_body_is_camel_case(self) -> None:
        """Should send the upload-url body in camelCase."""
        recorder = Recorder(200, {"documentId": "d1", "uploadUrl": "https://s/d1"})
        async with api_client(recorder) as client:
            await client.request_upload_url("patient-1", "scan.pdf", "application/pdf", 2048)

        assert recorder.last_json() == {
            "patientId": "patient-1",
            "fileName": "scan.pdf",
            "fileType": "application/pdf",
            "fileSize": 2048,
        }

    @pytest.mark.asyncio
    async def test_no_token_no_header(self) -> None:
        """Should omit Authorization when logged out."""
        recorder = Recorder()
        async with api_client(recorder, token=None) as client:
            await client.forgot_password("jane@example.com")

        assert "Authorization" not in recorder.last.headers
        assert recorder.last_json() == {"email": "jane@example.com"}

    @pytest.mark.asyncio
    async def test_error_detail_is_extracted(self) -> None:
        """Should expose the detail of an error body."""
        recorder = Recorder(422, {"detail": [{"loc": ["body", "reason"], "msg": "field required"}]})
        async with api_client(recorder) as client:
            response = await client.create_appointment("d", datetime.now(UTC), "", False)

        assert response.success is False
        assert response.status_code == 422
        assert response.detail == [{"loc": ["body", "reason"], "msg": "field required"}]

    @pytest.mark.asyncio
    async def test_401_purges_credentials(self) -> None:
        """Should purge local credentials on 401."""
        store = InMemoryCredentialStore(access_token="expired", refresh_token="r")
        client = MedicoAPIClient(
            base_url=BASE_URL,
            credential_store=store,
            transport=httpx.MockTransport(Recorder(401, {"detail": "Not authenticated"})),
        )
        async with client:
            response = await client.get_next_appointment()

        assert response.status_code == 401
        assert store.is_authenticated is False
        assert store.purge_count == 1

    @pytest.mark.asyncio
    async def test_connection_error_is_transport_error(self) -> None:
        """Should wrap connection errors without raising."""
        recorder = Recorder(exc=httpx.ConnectError("refused"))
        async with api_client(recorder) as client:
            response = await client.get_appointment("a1")

        assert response.success is False
        assert response.no_response is True

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self) -> None:
        """Should wrap timeouts without raising."""
        recorder = Recorder(exc=httpx.ReadTimeout("slow"))
        async with api_client(recorder) as client:
            response = await client.analyze_document("d1")

        assert response.no_response is True
        assert "timed out" in response.error_message


class TestObjectStorageClient:
    """Tests for raw byte transfers."""

    @pytest.mark.asyncio
    async def test_put_sends_bytes_without_auth(self) -> None:
        """Should PUT raw bytes with the declared content type only."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200)

        async with ObjectStorageClient(transport=httpx.MockTransport(handler)) as storage:
            response = await storage.put_bytes("https://storage.test/d1?sig=abc", b"%PDF", "application/pdf")

        assert response.success
        assert response.source == ResponseSource.STORAGE
        assert requests[0].method == "PUT"
        assert requests[0].content == b"%PDF"
        assert requests[0].headers["Content-Type"] == "application/pdf"
        assert "Authorization" not in requests[0].headers

    @pytest.mark.asyncio
    async def test_rejection_body_is_not_parsed(self) -> None:
        """Should report the status but never the storage error body."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, content=b"<Error><Code>AccessDenied</Code></Error>")

        async with ObjectStorageClient(transport=httpx.MockTransport(handler)) as storage:
            response = await storage.put_bytes("https://storage.test/d1", b"x", "image/png")

        assert response.success is False
        assert response.status_code == 403
        assert response.detail is None
        assert response.source == ResponseSource.STORAGE

    @pytest.mark.asyncio
    async def test_drop_is_transport_error(self) -> None:
        """Should report a dropped connection as no response."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.RemoteProtocolError("connection reset")

        async with ObjectStorageClient(transport=httpx.MockTransport(handler)) as storage:
            response = await storage.put_bytes("https://storage.test/d1", b"x", "image/png")

        assert response.no_response is True
        assert response.source == ResponseSource.STORAGE
