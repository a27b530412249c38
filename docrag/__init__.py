"""Docrag package.

Docrag loads a document (PDF or text), and provides:
  1) An in-memory retrieval index (overlapping chunks + embeddings)
  2) Q&A over that index with the retrieved chunks as cited sources

Entry points:
  - CLI: `docrag`
  - Library: `docrag.rag.service.RagService`
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
