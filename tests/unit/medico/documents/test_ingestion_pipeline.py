# ============================================================================
# Tests for DocumentIngestionPipeline
# ============================================================================
"""Unit tests for the document ingestion pipeline.

Covers the local validation gate, strict step ordering, step-specific
failures and the always-restart retry behavior.
"""

from unittest.mock import MagicMock

import pytest

from medico_client.domains.documents.application import DocumentIngestionPipeline
from medico_client.domains.documents.domain import PipelineStage, PipelineStep
from medico_client.domains.shared.application import ErrorCategory, ExternalResponse, ResponseSource

MIB = 1024 * 1024


def upload_target(document_id: str) -> ExternalResponse:
    return ExternalResponse.ok(
        {
            "documentId": document_id,
            "uploadUrl": f"https://storage.example.com/{document_id}?sig=abc",
            "expiresAt": "2026-03-10T14:15:00Z",
        }
    )


@pytest.fixture
def pipeline(service, storage) -> DocumentIngestionPipeline:
    return DocumentIngestionPipeline(service, storage)


class TestValidationGate:
    """Tests for the local checks before any remote call."""

    @pytest.mark.asyncio
    async def test_150_mib_pdf_is_rejected_without_calls(self, pipeline, service, storage):
        """Should reject oversized files locally and name the limit."""
        result = await pipeline.ingest("patient-1", "scan.pdf", b"\0" * (150 * MIB))

        assert result.failed
        assert result.category == ErrorCategory.VALIDATION_FAILED
        assert result.error.step == "validate"
        assert "100MB" in result.message
        assert service.calls == []
        assert storage.calls == []

    @pytest.mark.asyncio
    async def test_exact_limit_is_accepted(self, pipeline, service, storage):
        """Should accept a file of exactly 100 MiB."""
        service.respond("request_upload_url", upload_target("doc-1"))

        result = await pipeline.ingest("patient-1", "scan.pdf", b"\0" * (100 * MIB))

        assert result.success

    @pytest.mark.asyncio
    async def test_unsupported_type(self, pipeline, service):
        """Should reject a type outside the accepted list."""
        result = await pipeline.ingest("patient-1", "notes.txt", b"hello", mime_type="text/plain")

        assert result.category == ErrorCategory.VALIDATION_FAILED
        assert result.error.field_errors == {"mime_type": result.message}
        assert service.calls == []

    @pytest.mark.asyncio
    async def test_unknown_extension_without_type(self, pipeline, service):
        """Should reject when the type cannot be inferred."""
        result = await pipeline.ingest("patient-1", "archive.zip", b"PK")

        assert result.category == ErrorCategory.VALIDATION_FAILED
        assert service.calls == []

    @pytest.mark.asyncio
    async def test_empty_file(self, pipeline, service):
        """Should reject empty content."""
        result = await pipeline.ingest("patient-1", "scan.pdf", b"")

        assert result.category == ErrorCategory.VALIDATION_FAILED
        assert service.calls == []


class TestHappyPath:
    """Tests for a complete ingestion."""

    @pytest.mark.asyncio
    async def test_steps_run_in_order(self, pipeline, service, storage):
        """Should acquire, transfer, confirm, analyze in that order."""
        service.respond("request_upload_url", upload_target("doc-1"))
        order: list[str] = []
        original_put = storage.put_bytes

        async def tracking_put(*args, **kwargs):
            order.append("put_bytes")
            return await original_put(*args, **kwargs)

        storage.put_bytes = tracking_put
        original_record = service._record

        async def tracking_record(method, **kwargs):
            order.append(method)
            return await original_record(method, **kwargs)

        service._record = tracking_record

        result = await pipeline.ingest("patient-1", "Lab Results.PDF", b"%PDF-1.7", metadata={"category": "lab"})

        assert result.success
        assert order == ["request_upload_url", "put_bytes", "confirm_upload", "analyze_document"]
        document = result.value
        assert document.id == "doc-1"
        assert document.pipeline_stage == PipelineStage.ANALYZING
        assert document.mime_type == "application/pdf"

    @pytest.mark.asyncio
    async def test_calls_carry_issued_id_and_declared_type(self, pipeline, service, storage):
        """Should transfer with the declared type and confirm the issued id."""
        service.respond("request_upload_url", upload_target("doc-7"))

        await pipeline.ingest("patient-1", "xray.png", b"\x89PNG", metadata={"category": "imaging"})

        acquire = service.calls_to("request_upload_url")[0]
        assert acquire == {"owner_id": "patient-1", "file_name": "xray.png", "mime_type": "image/png", "size_bytes": 4}
        put = storage.calls_to("put_bytes")[0]
        assert put["upload_url"] == "https://storage.example.com/doc-7?sig=abc"
        assert put["content_type"] == "image/png"
        assert put["content"] == b"\x89PNG"
        assert service.calls_to("confirm_upload") == [{"document_id": "doc-7", "metadata": {"category": "imaging"}}]
        assert service.calls_to("analyze_document") == [{"document_id": "doc-7"}]

    @pytest.mark.asyncio
    async def test_progress_labels(self, pipeline, service):
        """Should report every stage with its label."""
        service.respond("request_upload_url", upload_target("doc-1"))
        on_progress = MagicMock()

        await pipeline.ingest("patient-1", "scan.pdf", b"%PDF", on_progress=on_progress)

        reported = [call.args for call in on_progress.call_args_list]
        assert reported == [
            (PipelineStage.VALIDATED, "Requesting upload URL…"),
            (PipelineStage.URL_ACQUIRED, "Uploading file…"),
            (PipelineStage.UPLOADING, "Uploading file…"),
            (PipelineStage.UPLOADED, "Confirming upload…"),
            (PipelineStage.CONFIRMED, "Starting analysis…"),
            (PipelineStage.ANALYZING, "Analysis queued"),
        ]
        assert pipeline.progress_label == "Analysis queued"

    @pytest.mark.asyncio
    async def test_missing_expiry_falls_back(self, pipeline, service):
        """Should default the upload target expiry."""
        service.respond("request_upload_url", ExternalResponse.ok({"id": 3, "url": "https://storage/3"}))

        result = await pipeline.ingest("patient-1", "scan.pdf", b"%PDF")

        target = result.value.upload_target
        assert target.url == "https://storage/3"
        assert target.expires_at is not None
        assert result.value.id == "3"


class TestStepFailures:
    """Tests for aborting at each step."""

    @pytest.mark.asyncio
    async def test_acquire_failure(self, pipeline, service, storage):
        """Should stop before any transfer."""
        service.respond("request_upload_url", ExternalResponse.http_error(403))

        result = await pipeline.ingest("patient-1", "scan.pdf", b"%PDF")

        assert result.error.step == "acquire"
        assert result.category == ErrorCategory.FORBIDDEN
        assert storage.calls == []
        assert service.call_names == ["request_upload_url"]

    @pytest.mark.asyncio
    async def test_incomplete_upload_target(self, pipeline, service, storage):
        """Should fail acquire when the target has no URL."""
        service.respond("request_upload_url", ExternalResponse.ok({"documentId": "doc-1"}))

        result = await pipeline.ingest("patient-1", "scan.pdf", b"%PDF")

        assert result.error.step == "acquire"
        assert storage.calls == []
        assert pipeline.current is None

    @pytest.mark.asyncio
    async def test_confirm_failure_message(self, pipeline, service):
        """Should say the upload worked but confirmation did not."""
        service.respond("request_upload_url", upload_target("doc-1"))
        service.respond("confirm_upload", ExternalResponse.http_error(500))

        result = await pipeline.ingest("patient-1", "scan.pdf", b"%PDF")

        assert result.error.step == "confirm"
        assert result.message == "Upload succeeded but confirmation failed: Server error. Please try again later."
        assert service.calls_to("analyze_document") == []

    @pytest.mark.asyncio
    async def test_analyze_failure(self, pipeline, service):
        """Should report the analyze step."""
        service.respond("request_upload_url", upload_target("doc-1"))
        service.respond("analyze_document", ExternalResponse.http_error(503))

        result = await pipeline.ingest("patient-1", "scan.pdf", b"%PDF")

        assert result.error.step == "analyze"
        assert result.category == ErrorCategory.SERVER_ERROR

    @pytest.mark.asyncio
    async def test_transfer_drop_then_retry_gets_new_document(self, pipeline, service, storage):
        """Should abort at transfer and restart from step 1 on retry."""
        service.respond("request_upload_url", upload_target("doc-1"), upload_target("doc-2"))
        storage.respond(
            "put_bytes",
            ExternalResponse.transport_error("Connection reset", source=ResponseSource.STORAGE),
        )

        failed = await pipeline.ingest("patient-1", "scan.pdf", b"%PDF")

        assert failed.error.step == "transfer"
        assert failed.category == ErrorCategory.NETWORK_UNREACHABLE
        assert service.calls_to("confirm_upload") == []
        assert service.calls_to("analyze_document") == []
        assert pipeline.current is None

        retried = await pipeline.ingest("patient-1", "scan.pdf", b"%PDF")

        assert retried.success
        assert retried.value.id == "doc-2"
        assert len(service.calls_to("request_upload_url")) == 2
        assert storage.calls_to("put_bytes")[1]["upload_url"].startswith("https://storage.example.com/doc-2")

    @pytest.mark.asyncio
    async def test_storage_rejection_is_not_service_error(self, pipeline, service, storage):
        """Should classify a storage 403 with the storage message."""
        service.respond("request_upload_url", upload_target("doc-1"))
        storage.respond("put_bytes", ExternalResponse.http_error(403, source=ResponseSource.STORAGE))

        result = await pipeline.ingest("patient-1", "scan.pdf", b"%PDF")

        assert result.error.step == "transfer"
        assert result.category == ErrorCategory.UNCLASSIFIED_HTTP_ERROR
        assert result.message.startswith("File upload failed: The upload link")
