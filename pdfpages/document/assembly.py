"""Build a new PDF from an ordered page selection."""

import logging
from typing import Sequence

import pymupdf

from ..ranges.errors import ExpandError
from ..ranges.tokens import PageSelection

logger = logging.getLogger(__name__)


def page_count(doc: pymupdf.Document) -> int:
    return doc.page_count


def materialize(doc: pymupdf.Document, selection: Sequence[PageSelection]) -> pymupdf.Document:
    """
    Copy selected pages, in order, into a new document.

    The same page may appear several times. Each selection's rotation is a
    delta added to the rotation the page already has in ``doc``.

    Args:
        doc: Source document
        selection: Ordered (page, rotation) pairs, pages 1-indexed

    Returns:
        A new in-memory document; the caller owns and closes it

    Raises:
        ExpandError: If a page is outside the source document
    """
    total = page_count(doc)
    for page, _ in selection:
        if page < 1 or page > total:
            raise ExpandError.out_of_range(page, total)

    out = pymupdf.open()
    try:
        for page, rotation in selection:
            out.insert_pdf(doc, from_page=page - 1, to_page=page - 1)
            if rotation:
                new_page = out[out.page_count - 1]
                new_page.set_rotation((new_page.rotation + rotation) % 360)
    except Exception:
        out.close()
        raise

    logger.info(f"Assembled {out.page_count} pages from a {total}-page document")
    return out
