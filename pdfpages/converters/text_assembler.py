"""Assembles extracted page text and search matches into JSON-ready results."""

from dataclasses import asdict
from typing import Dict, List

from ..document.text import GrepMatch, PageText


class TextAssembler:
    """Builds the result dicts returned by the text and grep operations."""

    def assemble_pages(self, pages: List[PageText], total_pages: int) -> Dict:
        """
        Assemble extracted page text.

        Pages keep the order of the selection, including repeats, so
        ``full_text`` reads the same as the materialized document would.
        """
        return {
            "total_pages": total_pages,
            "pages_selected": len(pages),
            "pages": [asdict(p) for p in pages],
            "full_text": "\n".join(p.text.rstrip("\n") for p in pages),
        }

    def assemble_matches(self, matches: List[GrepMatch], pattern: str, truncated: bool = False) -> Dict:
        """``truncated`` is True only when more matches existed than were kept."""
        return {
            "pattern": pattern,
            "total_matches": len(matches),
            "truncated": truncated,
            "pages_with_matches": sorted({m.page for m in matches}),
            "matches": [asdict(m) for m in matches],
        }
