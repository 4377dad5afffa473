"""Expansion of parsed range tokens into a concrete page selection."""

import logging
from typing import List, Sequence

from .errors import ExpandError, ExpandErrorKind
from .parser import parse
from .tokens import END, Endpoint, PageSelection, RangeToken

logger = logging.getLogger(__name__)


def expand(tokens: Sequence[RangeToken], page_count: int) -> List[PageSelection]:
    """
    Resolve tokens against a document's page count.

    Tokens are expanded in the order written and concatenated without
    sorting or deduplication. A token whose start is past its end walks
    the pages in descending order.

    Args:
        tokens: Parsed range tokens
        page_count: Number of pages in the document (>= 0)

    Returns:
        Ordered (page, rotation) pairs, pages 1-indexed

    Raises:
        ExpandError: If an endpoint is outside 1..page_count or the
                     document is empty
        ValueError: If page_count is negative
    """
    if page_count < 0:
        raise ValueError(f"page_count must be >= 0, got {page_count}")
    if tokens and page_count == 0:
        raise ExpandError(ExpandErrorKind.EMPTY_DOCUMENT, max_page=0, token=tokens[0].text)

    selection: List[PageSelection] = []
    for token in tokens:
        selection.extend(_expand_token(token, page_count))

    logger.debug(
        f"Expanded {len(tokens)} tokens to {len(selection)} pages "
        f"(page_count={page_count})"
    )
    return selection


def select_pages(spec: str, page_count: int) -> List[PageSelection]:
    """Parse ``spec`` and expand it against ``page_count``."""
    return expand(parse(spec), page_count)


def _resolve(endpoint: Endpoint, token: RangeToken, page_count: int) -> int:
    page = page_count if endpoint is END else endpoint
    if page < 1 or page > page_count:
        raise ExpandError.out_of_range(page, page_count, token=token.text)
    return page


def _expand_token(token: RangeToken, page_count: int) -> List[PageSelection]:
    start = _resolve(token.start, token, page_count)
    if token.end is None:
        return [PageSelection(start, token.rotation)]

    end = _resolve(token.end, token, page_count)
    step = 1 if start <= end else -1
    return [PageSelection(page, token.rotation) for page in range(start, end + step, step)]
