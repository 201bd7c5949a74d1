# ============================================================================
# SCOPE: APPLICATION LAYER (Documents)
# Description: Ports used by the ingestion pipeline.
# ============================================================================
"""Document Ports.

The pipeline talks to two separate failure domains: the records service
(``IDocumentService``) and the object store behind the presigned URL
(``IObjectStorage``).
"""

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from medico_client.domains.shared.application.response import ExternalResponse


@runtime_checkable
class IDocumentService(Protocol):
    """Interface for document registration and processing."""

    async def request_upload_url(
        self,
        owner_id: str,
        file_name: str,
        mime_type: str,
        size_bytes: int,
    ) -> "ExternalResponse":
        """Register the document and obtain a pre-authorized upload target."""
        ...

    async def confirm_upload(self, document_id: str, metadata: dict[str, Any] | None = None) -> "ExternalResponse":
        """Tell the service the bytes are in place."""
        ...

    async def analyze_document(self, document_id: str) -> "ExternalResponse":
        """Queue asynchronous analysis."""
        ...


@runtime_checkable
class IObjectStorage(Protocol):
    """Interface for raw byte transfers to a pre-authorized URL."""

    async def put_bytes(self, upload_url: str, content: bytes, content_type: str) -> "ExternalResponse":
        """PUT the bytes; never authenticated with the service token."""
        ...
