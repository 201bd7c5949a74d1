"""Document Entity - Aggregate Root.

One ingestion attempt of a medical document. The remote id is issued when
the upload target is acquired; a failed attempt is never resumed, a retry
is a new Document with a new id.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from medico_client.core.domain.entities import AggregateRoot
from medico_client.core.domain.exceptions import InvalidTransitionException

from ..value_objects.pipeline_stage import PipelineStage, PipelineStep


@dataclass(frozen=True)
class UploadTarget:
    """Pre-authorized, time-limited upload destination."""

    url: str
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(UTC)) >= self.expires_at


@dataclass
class Document(AggregateRoot[str]):
    """Document - Aggregate Root."""

    owner_id: str = ""
    file_name: str = ""
    mime_type: str = ""
    size_bytes: int = 0

    pipeline_stage: PipelineStage = PipelineStage.VALIDATED
    upload_target: UploadTarget | None = None
    failed_step: PipelineStep | None = None

    def advance_to(self, stage: PipelineStage) -> None:
        """Move one stage forward.

        Raises:
            InvalidTransitionException: On a skipped, repeated or backward stage.
        """
        if stage == PipelineStage.FAILED or not self.pipeline_stage.can_transition_to(stage):
            raise InvalidTransitionException("Document", self.pipeline_stage.value, stage.value)
        self.pipeline_stage = stage
        self.touch()

    def attach_target(self, document_id: str, target: UploadTarget) -> None:
        """Record the issued id and upload target (validated -> url_acquired)."""
        self.advance_to(PipelineStage.URL_ACQUIRED)
        self.id = document_id
        self.upload_target = target

    def fail(self, step: PipelineStep) -> None:
        """Mark the attempt failed at ``step``.

        Raises:
            InvalidTransitionException: If the attempt already ended.
        """
        if self.pipeline_stage.is_terminal():
            raise InvalidTransitionException("Document", self.pipeline_stage.value, PipelineStage.FAILED.value)
        self.pipeline_stage = PipelineStage.FAILED
        self.failed_step = step
        self.touch()

    @property
    def is_failed(self) -> bool:
        return self.pipeline_stage == PipelineStage.FAILED

    @property
    def progress_label(self) -> str:
        return self.pipeline_stage.progress_label
