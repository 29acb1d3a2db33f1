"""Ingestion pipeline lifecycle stages.

An ingestion run walks through the stages in declaration order; ``ERROR`` is
terminal and reachable from any of them.  The stage a run was in when it
failed is reported back in :class:`~protege.models.result.PipelineFailure`.
"""

from __future__ import annotations

from enum import Enum


class IngestionStage(str, Enum):
    VALIDATING = "validating"
    FETCHING = "fetching"
    EXTRACTING_TEXT = "extracting_text"
    CHUNKING = "chunking"
    EMBEDDING = "embedding"
    PERSISTING = "persisting"
    DONE = "done"
    ERROR = "error"
