"""Document loading utilities.

A loader turns a path into an ordered list of page texts. This module includes:
  - PdfLoader: one string per PDF page (pypdf)
  - TextLoader: the whole file as a single page, with best-effort
    text/binary sniffing and encoding fallback
  - loader_for: picks a loader from the file extension
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple, Union

import structlog
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ..errors import DocragError, NotFoundError

logger = structlog.get_logger()

PathLike = Union[str, Path]


def is_probably_binary(data: bytes) -> bool:
    """Heuristic binary detection."""
    if not data:
        return False
    if b"\x00" in data:
        return True
    text_chars = bytearray({7, 8, 9, 10, 12, 13, 27} | set(range(0x20, 0x100)))
    nontext = data.translate(None, text_chars)
    return float(len(nontext)) / float(len(data)) > 0.30


def read_text_file(path: Path, max_bytes: int) -> Tuple[str, str]:
    """Read file content up to `max_bytes`.

    Args:
        path: File path.
        max_bytes: Maximum bytes to read.

    Returns:
        Tuple of (content, encoding_used).

    Raises:
        ValueError: If file appears to be binary.
    """
    raw = path.read_bytes()[:max_bytes]
    if is_probably_binary(raw):
        raise ValueError("Binary file detected")
    try:
        return raw.decode("utf-8"), "utf-8"
    except UnicodeDecodeError:
        return raw.decode("latin-1"), "latin-1"


def _resolve(path: PathLike) -> Path:
    """Normalize a user path and make sure it is an existing file.

    Surrounding quotes (as pasted from a file manager) are stripped.
    """
    p = Path(str(path).strip().strip('"')).expanduser()
    if not p.is_file():
        raise NotFoundError(f"Document not found: {p}")
    return p


class DocumentLoader:
    """Loader interface: path -> ordered page texts."""

    def load(self, path: PathLike) -> List[str]:
        """
        Load a document.

        Args:
            path: Document path.

        Returns:
            Page texts in document order.

        Raises:
            NotFoundError: If the path is not a readable file.
        """
        raise NotImplementedError


class PdfLoader(DocumentLoader):
    """Extract text from each page of a PDF with pypdf.

    Unreadable and password-protected files raise DocragError.
    """

    def _reader(self, path: PathLike) -> PdfReader:
        p = _resolve(path)
        try:
            return PdfReader(str(p))
        except (PdfReadError, OSError) as e:
            raise DocragError(f"Cannot read PDF {p}: {e}") from e

    def load(self, path: PathLike) -> List[str]:
        reader = self._reader(path)
        try:
            pages = [page.extract_text() or "" for page in reader.pages]
        except (PdfReadError, OSError) as e:
            # FileNotDecryptedError is a PdfReadError
            raise DocragError(f"Cannot read PDF {path}: {e}") from e
        logger.info("pdf_loaded", path=str(path), pages=len(pages))
        return pages

    def page_count(self, path: PathLike) -> int:
        """Number of pages, without extracting text."""
        reader = self._reader(path)
        try:
            return len(reader.pages)
        except PdfReadError as e:
            raise DocragError(f"Cannot read PDF {path}: {e}") from e


class TextLoader(DocumentLoader):
    """
    Load a plain text / Markdown file as a single page.

    Attributes:
        max_bytes: Read cap in bytes.
    """

    def __init__(self, max_bytes: int = 20 * 1024 * 1024) -> None:
        self.max_bytes = max_bytes

    def load(self, path: PathLike) -> List[str]:
        p = _resolve(path)
        try:
            content, encoding = read_text_file(p, self.max_bytes)
        except ValueError as e:
            raise DocragError(f"Cannot load {p}: {e}") from e
        logger.info("text_loaded", path=str(p), encoding=encoding, chars=len(content))
        return [content]


def loader_for(path: PathLike) -> DocumentLoader:
    """
    Pick a loader from the file extension.

    `.pdf` uses PdfLoader; everything else (.txt, .md, ...) uses TextLoader.

    Args:
        path: Document path.

    Returns:
        Loader instance.
    """
    suffix = Path(str(path).strip().strip('"')).suffix.lower()
    if suffix == ".pdf":
        return PdfLoader()
    return TextLoader()


class AutoLoader(DocumentLoader):
    """Delegate to :func:`loader_for` on every call."""

    def load(self, path: PathLike) -> List[str]:
        return loader_for(path).load(path)
