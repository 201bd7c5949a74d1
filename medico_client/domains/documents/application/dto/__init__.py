from .document_dtos import UploadTargetPayload

__all__ = ["UploadTargetPayload"]
