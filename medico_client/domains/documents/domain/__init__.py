"""Document domain layer."""

from .entities import Document, UploadTarget
from .file_rules import FileValidator, format_file_size, mime_type_from_name
from .value_objects import PipelineStage, PipelineStep

__all__ = [
    "Document",
    "FileValidator",
    "PipelineStage",
    "PipelineStep",
    "UploadTarget",
    "format_file_size",
    "mime_type_from_name",
]
