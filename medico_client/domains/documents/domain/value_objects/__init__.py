from .pipeline_stage import PipelineStage, PipelineStep

__all__ = ["PipelineStage", "PipelineStep"]
