"""Document information backend: page count, page labels and text search."""

import json
import logging
import re
from typing import Dict, Any, Tuple

from .base import Backend
from ..config import get_config
from ..converters.text_assembler import TextAssembler
from ..document.assembly import page_count
from ..document.cache import CachedDocument
from ..document.labels import page_label_map
from ..document.text import grep_document

logger = logging.getLogger(__name__)


class DocumentInfoBackend(Backend):
    """Backend for read-only queries about a PDF."""

    SUPPORTED_OPERATIONS = ["page_count", "page_labels", "grep"]

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

        cached = CachedDocument.from_bytes(data)
        try:
            if operation == "page_count":
                result = {"total_pages": page_count(cached.doc)}
                metadata = {"total_pages": str(result["total_pages"])}
            elif operation == "page_labels":
                labels = page_label_map(cached.doc)
                result = {"total_pages": cached.page_count, "labels": labels}
                metadata = {"labelled_pages": str(len(labels))}
            else:
                result, metadata = self._grep(cached, options)
        finally:
            cached.close()

        return json.dumps(result, indent=2).encode("utf-8"), "json", metadata

    def _grep(self, cached: CachedDocument, options: Dict[str, str]) -> Tuple[Dict, Dict[str, Any]]:
        pattern_text = options.get("pattern", "")
        if not pattern_text:
            raise ValueError("Option 'pattern' is required for grep")

        try:
            max_results = int(options.get(
                "max_results",
                str(get_config().selection.grep_max_results)
            ))
        except ValueError:
            raise ValueError(f"Invalid max_results: {options.get('max_results')!r}")

        flags = re.IGNORECASE if options.get("ignore_case", "false").lower() == "true" else 0
        try:
            pattern = re.compile(pattern_text, flags)
        except re.error as e:
            raise ValueError(f"Invalid pattern {pattern_text!r}: {e}")

        # One extra match tells whether the limit cut the results short
        max_results = max(max_results, 0)
        matches = grep_document(cached, pattern, max_results + 1)
        truncated = len(matches) > max_results
        matches = matches[:max_results]
        result = self.assembler.assemble_matches(matches, pattern_text, truncated)
        metadata = {
            "total_pages": str(cached.page_count),
            "total_matches": str(len(matches)),
        }
        return result, metadata
