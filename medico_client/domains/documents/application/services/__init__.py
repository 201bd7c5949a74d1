from .ingestion_pipeline import DocumentIngestionPipeline, ProgressCallback

__all__ = ["DocumentIngestionPipeline", "ProgressCallback"]
