# ============================================================================
# SCOPE: APPLICATION LAYER (Documents)
# Description: Four-step document ingestion pipeline.
# ============================================================================
"""Document Ingestion Pipeline.

validate -> acquire upload target -> transfer bytes -> confirm -> analyze

Steps run strictly in order; a step starts only after the previous one
succeeded. The first failure aborts the run, marks the attempt failed and
reports which step failed. There is no resume: the failed attempt (and the
document id the service issued for it) is dropped, and the next ``ingest``
starts again at step 1.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from medico_client.config.settings import get_settings
from medico_client.core.domain.exceptions import ValidationException
from medico_client.core.shared.logger import ContextLogger, get_workflow_logger
from medico_client.domains.shared.application import (
    ErrorCategory,
    ErrorClassifier,
    ExternalResponse,
    ResponseExtractor,
    WorkflowError,
    WorkflowResult,
)

from ...domain.entities.document import Document
from ...domain.file_rules import FileValidator, format_file_size
from ...domain.value_objects.pipeline_stage import PipelineStage, PipelineStep
from ..dto.document_dtos import UploadTargetPayload

if TYPE_CHECKING:
    from ..ports import IDocumentService, IObjectStorage

ProgressCallback = Callable[[PipelineStage, str], None]


class DocumentIngestionPipeline:
    """Upload a medical document and queue it for analysis.

    Example:
        >>> async with MedicoAPIClient() as api, ObjectStorageClient() as storage:
        ...     pipeline = DocumentIngestionPipeline(api, storage)
        ...     result = await pipeline.ingest("patient-1", "scan.pdf", content)
    """

    # Prefix per failed step; the classified message follows
    STEP_FAILURE_PREFIXES: dict[PipelineStep, str] = {
        PipelineStep.ACQUIRE: "Could not prepare the upload",
        PipelineStep.TRANSFER: "File upload failed",
        PipelineStep.CONFIRM: "Upload succeeded but confirmation failed",
        PipelineStep.ANALYZE: "Upload confirmed but analysis could not be started",
    }

    def __init__(
        self,
        service: "IDocumentService",
        storage: "IObjectStorage",
        classifier: ErrorClassifier | None = None,
        validator: FileValidator | None = None,
    ) -> None:
        settings = get_settings()
        self._service = service
        self._storage = storage
        self._classifier = classifier or ErrorClassifier()
        self._validator = validator or FileValidator(
            max_size_bytes=settings.UPLOAD_MAX_FILE_SIZE,
            allowed_mime_types=list(settings.UPLOAD_ALLOWED_MIME_TYPES),
        )
        self._current: Document | None = None
        self._progress_label = ""
        self._on_progress: ProgressCallback | None = None
        self._logger: ContextLogger = get_workflow_logger("document_ingestion")

    @property
    def current(self) -> Document | None:
        """The attempt in flight or last completed; None after a failure."""
        return self._current

    @property
    def progress_label(self) -> str:
        return self._progress_label

    @property
    def validator(self) -> FileValidator:
        return self._validator

    def _report(self, document: Document) -> None:
        self._progress_label = document.progress_label
        if self._on_progress is not None:
            self._on_progress(document.pipeline_stage, self._progress_label)

    def _advance(self, document: Document, stage: PipelineStage) -> None:
        document.advance_to(stage)
        self._report(document)

    def _abort(
        self,
        document: Document | None,
        step: PipelineStep,
        response: ExternalResponse,
        log: ContextLogger,
    ) -> WorkflowResult[Document]:
        classified = self._classifier.classify(response)
        message = f"{self.STEP_FAILURE_PREFIXES[step]}: {classified.message}"
        log.warning(
            f"Ingestion aborted at {step.value}: {classified.category.value} (status={classified.status_code})",
            step=step.value,
            category=classified.category.value,
        )
        if document is not None:
            document.fail(step)
            self._progress_label = document.progress_label
        # The failed attempt and its remote id are not kept
        self._current = None
        return WorkflowResult.fail(WorkflowError.from_classified(classified, step=step.value, message=message))

    async def ingest(
        self,
        owner_id: str,
        file_name: str,
        content: bytes,
        mime_type: str | None = None,
        on_progress: ProgressCallback | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> WorkflowResult[Document]:
        """Run the full pipeline for one file.

        Args:
            owner_id: Patient the document belongs to.
            file_name: Original file name.
            content: File bytes.
            mime_type: Declared type; inferred from the extension when omitted.
            on_progress: Called with ``(stage, label)`` after every stage change.
            metadata: Extra fields sent with the confirmation (category, title...).

        Returns:
            WorkflowResult with the Document in ``analyzing``, or the failure
            with ``error.step`` set.
        """
        self._on_progress = on_progress
        self._current = None
        size_bytes = len(content)
        log = self._logger.with_context(owner_id=owner_id, file_name=file_name)

        # Step 0: local gate
        try:
            resolved_type = self._validator.resolve_mime_type(file_name, mime_type)
            self._validator.validate(file_name, size_bytes, resolved_type)
        except ValidationException as e:
            log.info(f"Upload rejected locally: {e.message}", field=e.field)
            self._progress_label = ""
            return WorkflowResult.failure(
                ErrorCategory.VALIDATION_FAILED,
                e.message,
                step=PipelineStep.VALIDATE.value,
                field_errors={e.field or "file": e.message},
            )

        document = Document(owner_id=owner_id, file_name=file_name, mime_type=resolved_type, size_bytes=size_bytes)
        self._current = document
        self._report(document)
        log.info(f"Starting ingestion ({format_file_size(size_bytes)}, {resolved_type})")

        # Step 1: acquire upload target
        response = await self._service.request_upload_url(owner_id, file_name, resolved_type, size_bytes)
        if not response.success:
            return self._abort(document, PipelineStep.ACQUIRE, response, log)
        try:
            payload = UploadTargetPayload.model_validate(ResponseExtractor.as_dict(response.data))
        except ValidationError as e:
            log.warning(f"Upload target response unreadable: {e.error_count()} error(s)")
            document.fail(PipelineStep.ACQUIRE)
            self._current = None
            return WorkflowResult.failure(
                ErrorCategory.UNCLASSIFIED_HTTP_ERROR,
                f"{self.STEP_FAILURE_PREFIXES[PipelineStep.ACQUIRE]}: the server response was incomplete.",
                step=PipelineStep.ACQUIRE.value,
                status_code=response.status_code,
            )
        target = payload.to_target()
        document_id = payload.document_id
        document.attach_target(document_id, target)
        self._report(document)
        log = log.with_context(document_id=document.id)

        # Step 2: transfer bytes to object storage
        self._advance(document, PipelineStage.UPLOADING)
        response = await self._storage.put_bytes(target.url, content, resolved_type)
        if not response.success:
            return self._abort(document, PipelineStep.TRANSFER, response, log)
        self._advance(document, PipelineStage.UPLOADED)

        # Step 3: confirm
        response = await self._service.confirm_upload(document_id, metadata)
        if not response.success:
            return self._abort(document, PipelineStep.CONFIRM, response, log)
        self._advance(document, PipelineStage.CONFIRMED)

        # Step 4: trigger analysis
        response = await self._service.analyze_document(document_id)
        if not response.success:
            return self._abort(document, PipelineStep.ANALYZE, response, log)
        self._advance(document, PipelineStage.ANALYZING)

        log.info("Document uploaded and queued for analysis")
        return WorkflowResult.ok(document)

    def reset(self) -> None:
        """Forget the last attempt and clear the progress label."""
        self._current = None
        self._progress_label = ""
        self._on_progress = None
