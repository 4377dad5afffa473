"""Process-wide cache of opened PDF documents and their extracted page text.

Entries are keyed by canonical path so symlinks and relative paths share one
entry, and are revalidated against the file's modification time on every
lookup so an edited file is reopened instead of served stale.
"""

import logging
import os
import threading
from typing import Dict, Optional

import pymupdf

from ..config import get_config

logger = logging.getLogger(__name__)


class CachedDocument:
    """An open PyMuPDF document plus a lazily filled per-page text cache."""

    def __init__(self, doc: pymupdf.Document, mtime: Optional[int] = None):
        self.doc = doc
        self.mtime = mtime
        self._text_cache: Dict[int, str] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_bytes(cls, data: bytes) -> "CachedDocument":
        """Open an in-memory PDF."""
        try:
            doc = pymupdf.open(stream=data, filetype="pdf")
        except Exception:
            raise ValueError("Invalid or corrupted PDF file")
        return cls(doc)

    @property
    def page_count(self) -> int:
        return self.doc.page_count

    def page_text(self, page_num: int) -> str:
        """
        Get the plain text of a page, extracting it on first access.

        Args:
            page_num: 1-indexed page number

        Returns:
            Extracted text of the page
        """
        with self._lock:
            text = self._text_cache.get(page_num)
            if text is not None:
                return text

            text = self.doc[page_num - 1].get_text("text")
            if get_config().selection.text_cache_enabled:
                self._text_cache[page_num] = text
            return text

    def close(self) -> None:
        with self._lock:
            self._text_cache.clear()
            self.doc.close()


class DocumentCache:
    """Cache of CachedDocument entries validated by file mtime."""

    def __init__(self):
        self._entries: Dict[str, CachedDocument] = {}
        self._lock = threading.Lock()

    def get(self, path: str) -> CachedDocument:
        """
        Get or load a PDF.

        Returns the cached entry when the file's mtime is unchanged,
        otherwise opens the file and replaces the stale entry, closing it.

        Raises:
            FileNotFoundError: If the path does not exist
            ValueError: If the file is not a readable PDF
        """
        canonical = os.path.realpath(path)
        current_mtime = os.stat(canonical).st_mtime_ns

        with self._lock:
            cached = self._entries.get(canonical)
            if cached is not None and cached.mtime == current_mtime:
                return cached

            if cached is not None:
                logger.info(f"Reloading modified PDF: {canonical}")

            try:
                doc = pymupdf.open(canonical)
            except Exception as e:
                raise ValueError(f"Cannot open PDF {canonical}: {e}")

            entry = CachedDocument(doc, mtime=current_mtime)
            self._entries[canonical] = entry
            if cached is not None:
                cached.close()
            logger.debug(f"Cached {canonical} ({entry.page_count} pages)")
            return entry

    def clear(self) -> None:
        """Close and drop every cached document."""
        with self._lock:
            for entry in self._entries.values():
                entry.close()
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


# Global cache instance
_cache: Optional[DocumentCache] = None
_cache_lock = threading.Lock()


def get_document_cache() -> DocumentCache:
    """Get or create the global document cache."""
    global _cache
    with _cache_lock:
        if _cache is None:
            _cache = DocumentCache()
        return _cache


def get_cached_document(path: str) -> CachedDocument:
    """Convenience wrapper around the global cache."""
    return get_document_cache().get(path)
