"""
Sara Medico API HTTP Client

Async client for the scheduling/records service.
Uses httpx for async HTTP with bearer authentication and timeout handling.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from medico_client.config.settings import get_settings
from medico_client.domains.shared.application.response import ExternalResponse

from .credentials import ICredentialStore, InMemoryCredentialStore

logger = logging.getLogger(__name__)


class MedicoAPIClient:
    """
    Async HTTP client for the Sara Medico service.

    Every endpoint method returns an ``ExternalResponse``; HTTP and
    transport failures are reported, never raised. A 401 purges the local
    credentials before the failure is returned (forced logout).

    There is no automatic retry: callers re-invoke the whole operation.

    Environment Variables:
        MEDICO_API_BASE_URL: Base URL for the API
        MEDICO_API_TIMEOUT: Request timeout in seconds (default: 30)

    Example:
        async with MedicoAPIClient(credential_store=store) as client:
            response = await client.list_appointments(status="pending")
    """

    def __init__(
        self,
        base_url: str | None = None,
        credential_store: ICredentialStore | None = None,
        timeout_seconds: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Base URL for the API (defaults to env MEDICO_API_BASE_URL)
            credential_store: Source of the bearer token
            timeout_seconds: Request timeout (defaults to env MEDICO_API_TIMEOUT)
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        settings = get_settings()
        self.base_url = (base_url or settings.MEDICO_API_BASE_URL).rstrip("/")
        self.timeout = timeout_seconds or settings.MEDICO_API_TIMEOUT
        self.user_agent = settings.MEDICO_USER_AGENT
        self.credentials: ICredentialStore = credential_store or InMemoryCredentialStore()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> MedicoAPIClient:
        """Initialize async client."""
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": self.user_agent,
            },
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Close async client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get the async client, raising error if not initialized."""
        if self._client is None:
            raise RuntimeError("Client not initialized. Use 'async with MedicoAPIClient() as client:'")
        return self._client

    async def _auth_headers(self) -> dict[str, str]:
        token = await self.credentials.get_access_token()
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> ExternalResponse:
        """Perform one authenticated call and wrap the outcome.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            json: Optional JSON body
            params: Optional query parameters

        Returns:
            ExternalResponse (success with parsed body, or failure)
        """
        client = self._get_client()
        headers = await self._auth_headers()

        try:
            response = await client.request(method, path, json=json, params=params, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {path} timed out: {e}")
            return ExternalResponse.transport_error(f"Request timed out: {e}")
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} connection error: {e}")
            return ExternalResponse.transport_error(f"Connection error: {e}")

        if response.is_success:
            logger.debug(f"{method} {path} -> {response.status_code}")
            return ExternalResponse.ok(self._parse_body(response), status_code=response.status_code)

        logger.warning(f"{method} {path} -> HTTP {response.status_code}")
        if response.status_code == 401:
            await self._force_logout()
        return ExternalResponse.http_error(response.status_code, detail=self._error_detail(response))

    async def _force_logout(self) -> None:
        logger.warning("Authentication rejected by the service, purging local credentials")
        await self.credentials.purge()

    @staticmethod
    def _parse_body(response: httpx.Response) -> dict[str, Any] | list[Any] | None:
        if not response.content:
            return None
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, (dict, list)):
            return body
        return {"value": body}

    @staticmethod
    def _error_detail(response: httpx.Response) -> Any:
        """Extract the ``detail`` member of an error body, if any."""
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            return body.get("detail") or body.get("message")
        return None

    # =========================================================================
    # Appointments
    # =========================================================================

    async def create_appointment(
        self,
        doctor_id: str,
        requested_date: datetime,
        reason: str,
        grant_history_access: bool,
    ) -> ExternalResponse:
        """POST /appointments"""
        return await self._request(
            "POST",
            "/appointments",
            json={
                "doctor_id": doctor_id,
                "requested_date": requested_date.isoformat(),
                "reason": reason,
                "grant_access_to_history": grant_history_access,
            },
        )

    async def list_appointments(self, status: str | None = None) -> ExternalResponse:
        """GET /appointments[?status=]"""
        params = {"status": status} if status else None
        return await self._request("GET", "/appointments", params=params)

    async def get_next_appointment(self) -> ExternalResponse:
        """GET /appointments/next"""
        return await self._request("GET", "/appointments/next")

    async def get_appointment(self, appointment_id: str) -> ExternalResponse:
        """GET /appointments/{id}"""
        return await self._request("GET", f"/appointments/{appointment_id}")

    async def approve_appointment(
        self,
        appointment_id: str,
        scheduled_at: datetime,
        notes: str | None = None,
    ) -> ExternalResponse:
        """PATCH /appointments/{id}/approve - the service also provisions the meeting."""
        return await self._request(
            "PATCH",
            f"/appointments/{appointment_id}/approve",
            json={"appointment_time": scheduled_at.isoformat(), "doctor_notes": notes},
        )

    async def update_appointment_status(
        self,
        appointment_id: str,
        status: str,
        reason: str | None = None,
    ) -> ExternalResponse:
        """PATCH /appointments/{id}/status"""
        return await self._request(
            "PATCH",
            f"/appointments/{appointment_id}/status",
            json={"status": status, "doctor_notes": reason},
        )

    # =========================================================================
    # Documents
    # =========================================================================

    async def request_upload_url(
        self,
        owner_id: str,
        file_name: str,
        mime_type: str,
        size_bytes: int,
    ) -> ExternalResponse:
        """POST /documents/upload-url - registers the document and issues a presigned target."""
        return await self._request(
            "POST",
            "/documents/upload-url",
            json={
                "patientId": owner_id,
                "fileName": file_name,
                "fileType": mime_type,
                "fileSize": size_bytes,
            },
        )

    async def confirm_upload(self, document_id: str, metadata: dict[str, Any] | None = None) -> ExternalResponse:
        """POST /documents/{id}/confirm"""
        return await self._request(
            "POST",
            f"/documents/{document_id}/confirm",
            json={"metadata": metadata or {}},
        )

    async def analyze_document(self, document_id: str) -> ExternalResponse:
        """POST /documents/{id}/analyze"""
        return await self._request("POST", f"/documents/{document_id}/analyze")

    # =========================================================================
    # Password recovery
    # =========================================================================

    async def forgot_password(self, email: str) -> ExternalResponse:
        """POST /auth/forgot-password - emails a one-time code."""
        return await self._request("POST", "/auth/forgot-password", json={"email": email})

    async def reset_password(self, token: str, new_password: str) -> ExternalResponse:
        """POST /auth/reset-password"""
        return await self._request(
            "POST",
            "/auth/reset-password",
            json={"token": token, "new_password": new_password},
        )
