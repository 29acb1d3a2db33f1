"""Business logic: the ingestion and retrieval pipelines."""
