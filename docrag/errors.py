"""Exception types raised by docrag.

All errors derive from :class:`DocragError` so front ends can catch one type.
Several also derive from the matching builtin, so callers that only know the
standard exceptions keep working.
"""

from __future__ import annotations


class DocragError(Exception):
    """Base class for docrag errors."""


class ConfigurationError(DocragError, ValueError):
    """Invalid configuration value (chunk size/overlap, top_k, settings)."""


class NotFoundError(DocragError, FileNotFoundError):
    """Input document does not exist or is not a readable file."""


class DimensionMismatchError(DocragError):
    """A vector does not match the dimensionality of the store.

    Attributes:
        expected: Dimensionality held by the store.
        actual: Length of the offending vector.
    """

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Vector has {actual} dimensions, store holds {expected}-dimensional embeddings.")
        self.expected = expected
        self.actual = actual


class ServiceUnavailableError(DocragError):
    """Embedding or generation backend is unreachable or failing."""


class InvalidStateError(DocragError, RuntimeError):
    """Operation not allowed in the current service state."""
