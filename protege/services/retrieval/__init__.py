"""Retrieval pipeline and similarity ranking."""

from protege.services.retrieval.retrieval_service import RetrievalService
from protege.services.retrieval.similarity import cosine_similarity, rank_chunks

__all__ = ["RetrievalService", "cosine_similarity", "rank_chunks"]
