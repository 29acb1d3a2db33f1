"""Source-material data models for the retrieval core.

Defines Pydantic v2 models for embedded chunks, the per-session source
material record, and similarity-ranked retrieval results.  All models use
frozen config to enforce immutability.

Lifecycle overview:
    1. INGESTION: a scraped page or PDF is normalised and split into
       overlapping text chunks (services/ingestion/chunker.py).
    2. EMBEDDING: every chunk is turned into a fixed-length vector by the
       embedding provider, in chunk order.
    3. STORAGE: the chunks, their vectors and the jargon list are written
       once, as a single :class:`SourceMaterial` record keyed by session id.
    4. RETRIEVAL: a learner's explanation is embedded and compared against
       every stored chunk; the best matches come back as
       :class:`SimilarityResult` objects (never persisted).
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SourceType(str, Enum):
    """Where a session's source material came from."""

    URL = "url"
    PDF = "pdf"
    # Manual sessions: the learner teaches from memory, nothing is ingested.
    NONE = "none"


# ---------------------------------------------------------------------------
# Chunk - one embedded window of source text.
# ---------------------------------------------------------------------------
class Chunk(BaseModel):
    """A bounded substring of source text paired with its embedding.

    ``index`` is the chunk's 0-based position in its parent record and
    never changes once the record is written.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1, description="The chunk's trimmed text.")
    embedding: list[float] = Field(
        min_length=1,
        description="Embedding vector; every chunk in a record has the same length.",
    )
    index: int = Field(ge=0, description="Stable 0-based position within the source.")


# ---------------------------------------------------------------------------
# SourceMaterial - the one record written per ingestion run.
# ---------------------------------------------------------------------------
class SourceMaterial(BaseModel):
    """Everything the retrieval pipeline needs for one session.

    Written exactly once.  Either the full chunk set with embeddings is
    stored, or ingestion fails and nothing is stored.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(min_length=1, description="Unique key for the record.")
    topic: str = Field(description="What the learner is teaching.")
    source_type: SourceType = Field(default=SourceType.NONE)
    source_url: str | None = Field(default=None, description="Scraped URL, URL sources only.")
    user_id: str | None = Field(default=None, description="Owning user, when known.")
    chunks: list[Chunk] = Field(default_factory=list)
    # Ordered by descending frequency score; empty for manual sessions.
    jargon_words: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def _check_chunk_indices(self) -> SourceMaterial:
        for position, chunk in enumerate(self.chunks):
            if chunk.index != position:
                raise ValueError(
                    f"chunk at position {position} has index {chunk.index}; "
                    "indices must match array positions"
                )
        return self

    @property
    def embedding_dimension(self) -> int:
        """Length of the stored vectors, or 0 when there are no chunks."""
        return len(self.chunks[0].embedding) if self.chunks else 0


# ---------------------------------------------------------------------------
# SimilarityResult - an ephemeral retrieval hit.
# ---------------------------------------------------------------------------
class SimilarityResult(BaseModel):
    """A stored chunk scored against a query vector."""

    model_config = ConfigDict(frozen=True)

    text: str
    similarity: float = Field(ge=0.0, le=1.0, description="Cosine similarity clamped to [0, 1].")
    index: int = Field(ge=0, description="The chunk's index in its source record.")
