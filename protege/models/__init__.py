"""Protégé domain models - re-exports all public model classes.

The models are organized across three submodules by concern:
    - source.py   - chunks, source material records, similarity results
    - pipeline.py - ingestion lifecycle stages
    - result.py   - the Result/PipelineFailure pair both pipelines return
"""

from protege.models.pipeline import IngestionStage
from protege.models.result import IngestionOutput, PipelineFailure, Result
from protege.models.source import Chunk, SimilarityResult, SourceMaterial, SourceType

__all__ = [
    "Chunk",
    "IngestionOutput",
    "IngestionStage",
    "PipelineFailure",
    "Result",
    "SimilarityResult",
    "SourceMaterial",
    "SourceType",
]
