"""Pipeline Stage Value Objects.

Stages of a single document ingestion attempt and the remote steps that
move it between them.
"""

from enum import Enum


class PipelineStep(str, Enum):
    """Step of the ingestion pipeline, reported on failure."""

    VALIDATE = "validate"  # local gate, no remote call
    ACQUIRE = "acquire"  # POST /documents/upload-url
    TRANSFER = "transfer"  # PUT {uploadUrl}
    CONFIRM = "confirm"  # POST /documents/{id}/confirm
    ANALYZE = "analyze"  # POST /documents/{id}/analyze


class PipelineStage(str, Enum):
    """Forward-only ingestion stages.

    State machine:
    - validated -> url_acquired -> uploading -> uploaded -> confirmed
      -> analyzing -> analyzed
    - any non-terminal stage -> failed
    """

    VALIDATED = "validated"
    URL_ACQUIRED = "url_acquired"
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    CONFIRMED = "confirmed"
    ANALYZING = "analyzing"
    ANALYZED = "analyzed"  # reached by the remote queue, never by the client
    FAILED = "failed"

    @classmethod
    def forward_order(cls) -> list["PipelineStage"]:
        return [
            cls.VALIDATED,
            cls.URL_ACQUIRED,
            cls.UPLOADING,
            cls.UPLOADED,
            cls.CONFIRMED,
            cls.ANALYZING,
            cls.ANALYZED,
        ]

    @property
    def position(self) -> int:
        """Index in the forward order; -1 for ``failed``."""
        order = self.forward_order()
        return order.index(self) if self in order else -1

    def next_stage(self) -> "PipelineStage | None":
        order = self.forward_order()
        if self.position < 0 or self.position + 1 >= len(order):
            return None
        return order[self.position + 1]

    def can_transition_to(self, new_stage: "PipelineStage") -> bool:
        """Only the immediate successor, or ``failed`` from a non-terminal stage."""
        if new_stage == PipelineStage.FAILED:
            return not self.is_terminal()
        return self.next_stage() == new_stage

    def is_terminal(self) -> bool:
        return self in (PipelineStage.ANALYZED, PipelineStage.FAILED)

    @property
    def progress_label(self) -> str:
        """Label shown while the pipeline sits in this stage."""
        labels = {
            "validated": "Requesting upload URL…",
            "url_acquired": "Uploading file…",
            "uploading": "Uploading file…",
            "uploaded": "Confirming upload…",
            "confirmed": "Starting analysis…",
            "analyzing": "Analysis queued",
            "analyzed": "Analysis complete",
            "failed": "Upload failed",
        }
        return labels[self.value]
