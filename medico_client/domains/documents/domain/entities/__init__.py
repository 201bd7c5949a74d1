from .document import Document, UploadTarget

__all__ = ["Document", "UploadTarget"]
