"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# pydantic-settings reads configuration from, in priority order:
#
#   1. **Environment variables** - e.g. OPENAI_API_KEY=sk-abc123
#   2. **.env file** - key=value lines in the project root .env file
#
# The mapping is automatic: field ``chunk_overlap`` maps to env var
# ``CHUNK_OVERLAP``.  Defaults below apply when neither source sets a value.
#
# config/config.yaml sits between the two (see ``protege.config.loader``).
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Protégé settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Embedding provider ===
    # Empty string = "not configured"; build_embedding_provider() refuses to
    # start without a key.
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible endpoint (TogetherAI, Azure proxy, ...)
    openai_embedding_model: str = ""  # Empty -> text-embedding-3-small

    # === Segmentation / extraction ===
    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=200, ge=0)
    max_source_chars: int = Field(default=50_000, gt=0)
    # 1 MB of binary is ~1.37 MB once base64-encoded.
    max_pdf_base64_chars: int = Field(default=int(1.37 * 1024 * 1024), gt=0)
    max_jargon_words: int = Field(default=30, ge=0)

    # === Embedding calls ===
    embedding_retry_delay: float = Field(default=1.0, ge=0.0)
    # 1 keeps chunk embedding strictly sequential.
    embedding_concurrency: int = Field(default=1, ge=1)

    # === Source fetching ===
    fetch_timeout: float = Field(default=30.0, gt=0.0)
    fetch_user_agent: str = "Mozilla/5.0 (compatible; AI-Protege/1.0)"
    fetch_max_redirects: int = Field(default=5, ge=0)

    # === Retrieval ===
    retrieval_top_k: int = Field(default=5, gt=0)
    # None = no threshold; every chunk is eligible regardless of score.
    retrieval_min_similarity: float | None = Field(default=None, ge=0.0, le=1.0)
    retrieval_cache_size: int = Field(default=512, gt=0)
    retrieval_cache_ttl: int = Field(default=3600, gt=0)

    # === Persistence ===
    source_store: str = "sqlite"  # "sqlite" or "memory"
    source_db_path: str = "data/source_material.db"

    # === App ===
    app_env: str = "development"
    log_level: str = "INFO"
