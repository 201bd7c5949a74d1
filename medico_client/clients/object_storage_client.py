"""
Object Storage Upload Client

Async client for direct byte transfers to pre-authorized (presigned) upload
targets. Deliberately separate from MedicoAPIClient: no bearer header, no
base URL, and error bodies are never interpreted as service errors.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from medico_client.config.settings import get_settings
from medico_client.domains.shared.application.response import ExternalResponse, ResponseSource

logger = logging.getLogger(__name__)


class ObjectStorageClient:
    """
    Async HTTP client for ``PUT {uploadUrl}`` transfers.

    Example:
        async with ObjectStorageClient() as storage:
            response = await storage.put_bytes(url, content, "application/pdf")
    """

    def __init__(
        self,
        timeout_seconds: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.timeout = timeout_seconds or settings.STORAGE_UPLOAD_TIMEOUT
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> ObjectStorageClient:
        self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout), transport=self._transport)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Client not initialized. Use 'async with ObjectStorageClient() as storage:'")
        return self._client

    async def put_bytes(self, upload_url: str, content: bytes, content_type: str) -> ExternalResponse:
        """
        Transfer raw bytes to a presigned URL.

        Args:
            upload_url: Pre-authorized target issued by the service
            content: File bytes
            content_type: Declared MIME type, sent as Content-Type

        Returns:
            ExternalResponse with ``source=STORAGE``
        """
        client = self._get_client()

        try:
            response = await client.put(upload_url, content=content, headers={"Content-Type": content_type})
        except httpx.TimeoutException as e:
            logger.warning(f"Storage upload timed out: {e}")
            return ExternalResponse.transport_error(f"Upload timed out: {e}", source=ResponseSource.STORAGE)
        except httpx.RequestError as e:
            logger.warning(f"Storage upload connection error: {e}")
            return ExternalResponse.transport_error(f"Connection error: {e}", source=ResponseSource.STORAGE)

        if response.is_success:
            logger.debug(f"Storage upload accepted ({len(content)} bytes)")
            return ExternalResponse.ok(None, status_code=response.status_code, source=ResponseSource.STORAGE)

        logger.warning(f"Storage upload rejected with HTTP {response.status_code}")
        return ExternalResponse.http_error(response.status_code, source=ResponseSource.STORAGE)
