"""Text extraction and search over cached documents."""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .cache import CachedDocument
from ..ranges.errors import ExpandError
from ..ranges.expander import select_pages

logger = logging.getLogger(__name__)


@dataclass
class PageText:
    page: int
    text: str
    rotation: int = 0


@dataclass
class GrepMatch:
    page: int
    line_number: int
    text: str
    match_start: int
    match_end: int


def extract_text_pages(cached: CachedDocument, pages: Sequence[int]) -> List[PageText]:
    """
    Extract text from specific pages.

    All page numbers are validated before any text is extracted, so a bad
    page never yields a partial result.

    Args:
        cached: Document to read from
        pages: 1-indexed page numbers; repeats are allowed

    Raises:
        ExpandError: If a page is out of range
    """
    total = cached.page_count
    for page in pages:
        if page < 1 or page > total:
            raise ExpandError.out_of_range(page, total)

    return [PageText(page=page, text=cached.page_text(page)) for page in pages]


def extract_selection_text(cached: CachedDocument, spec: Optional[str] = None) -> List[PageText]:
    """Extract text for the pages named by a range spec (all pages if empty)."""
    if not spec:
        return extract_text_pages(cached, range(1, cached.page_count + 1))

    selection = select_pages(spec, cached.page_count)
    results = extract_text_pages(cached, [page for page, _ in selection])
    for result, (_, rotation) in zip(results, selection):
        result.rotation = rotation
    return results


def grep_document(
    cached: CachedDocument,
    pattern: "re.Pattern[str]",
    max_results: int,
) -> List[GrepMatch]:
    """
    Search every page's text for a regex, line by line.

    Matches are attributed to the page they occur on. Pages whose text
    cannot be extracted are skipped.

    Args:
        cached: Document to search
        pattern: Compiled regular expression
        max_results: Stop after this many matches

    Returns:
        Matches in page, line and column order
    """
    matches: List[GrepMatch] = []
    if max_results <= 0:
        return matches

    for page_num in range(1, cached.page_count + 1):
        try:
            page_text = cached.page_text(page_num)
        except Exception as e:
            logger.warning(f"Text extraction failed on page {page_num}: {e}")
            continue

        for line_idx, line in enumerate(page_text.splitlines()):
            for mat in pattern.finditer(line):
                matches.append(GrepMatch(
                    page=page_num,
                    line_number=line_idx + 1,
                    text=line,
                    match_start=mat.start(),
                    match_end=mat.end(),
                ))
                if len(matches) >= max_results:
                    return matches

    return matches
