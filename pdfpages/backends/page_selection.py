"""Page selection backend: reorder/rotate pages or extract their text."""

import json
import logging
from typing import Dict, Any, Tuple

from .base import Backend
from ..converters.text_assembler import TextAssembler
from ..document.assembly import materialize
from ..document.cache import CachedDocument
from ..document.text import extract_selection_text
from ..ranges.expander import select_pages

logger = logging.getLogger(__name__)


class PageSelectionBackend(Backend):
    """Backend that applies a page range spec to an uploaded PDF."""

    SUPPORTED_OPERATIONS = ["select", "extract_text"]

    def __init__(self):
        self.assembler = TextAssembler()

    def process(
        self,
        data: bytes,
        operation: str,
        options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, Any]]:
        if not self.supports(operation):
            raise ValueError(f"Operation '{operation}' not supported")

        spec = options.get("pages", "").strip()
        cached = CachedDocument.from_bytes(data)
        try:
            if operation == "select":
                return self._select(cached, spec)
            return self._extract_text(cached, spec)
        finally:
            cached.close()

    def _select(self, cached: CachedDocument, spec: str) -> Tuple[bytes, str, Dict[str, Any]]:
        if not spec:
            raise ValueError("Option 'pages' is required for select")

        total_pages = cached.page_count
        selection = select_pages(spec, total_pages)

        out = materialize(cached.doc, selection)
        try:
            output_data = out.tobytes(garbage=3, deflate=True)
        finally:
            out.close()

        metadata = {
            "source_pages": str(total_pages),
            "output_pages": str(len(selection)),
            "rotated_pages": str(sum(1 for _, rotation in selection if rotation)),
            "pages": spec,
        }
        logger.info(f"Selected {len(selection)} of {total_pages} pages with {spec!r}")
        return output_data, "pdf", metadata

    def _extract_text(self, cached: CachedDocument, spec: str) -> Tuple[bytes, str, Dict[str, Any]]:
        pages = extract_selection_text(cached, spec)
        result = self.assembler.assemble_pages(pages, cached.page_count)

        output_data = json.dumps(result, indent=2).encode("utf-8")
        metadata = {
            "total_pages": str(cached.page_count),
            "pages_processed": str(len(pages)),
            "total_chars": str(sum(len(p.text) for p in pages)),
        }
        return output_data, "json", metadata
