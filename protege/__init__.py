"""Protégé retrieval core.

Turns a scraped web page or an uploaded PDF into a searchable set of
overlapping, embedded text chunks, and later finds the chunks most relevant
to a learner's free-text explanation.

Subpackages:
    - config      - pydantic-settings ``Settings`` and the YAML loader
    - interfaces  - abstract contracts for every external collaborator
    - models      - frozen pydantic models (chunks, source material, results)
    - providers   - concrete adapters (OpenAI, httpx scraper, PyMuPDF, stores)
    - services    - segmenter, jargon extractor, ranker and the two pipelines
    - utils       - errors, logging, text/URL helpers, retry primitives
"""

__version__ = "0.1.0"
