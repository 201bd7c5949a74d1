"""Document application layer."""

from .dto import UploadTargetPayload
from .services import DocumentIngestionPipeline

__all__ = ["DocumentIngestionPipeline", "UploadTargetPayload"]
