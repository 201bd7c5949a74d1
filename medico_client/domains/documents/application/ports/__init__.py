from .document_port import IDocumentService, IObjectStorage

__all__ = ["IDocumentService", "IObjectStorage"]
