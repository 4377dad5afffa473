"""Parser for page range specifications such as ``"1-3,7R,10-end"``."""

import logging
import string
from typing import Iterable, List, Tuple

from .errors import ParseError, ParseErrorKind
from .tokens import END, Endpoint, RangeToken, ROTATION_SUFFIXES, SUFFIX_FOR_ROTATION

logger = logging.getLogger(__name__)

TOKEN_SEPARATOR = ","
RANGE_SEPARATOR = "-"


def parse(spec: str) -> List[RangeToken]:
    """
    Parse a page range specification into tokens.

    The page count is not consulted, so ``"999-end"`` parses even for a
    short document; bounds are checked by the expander.

    Args:
        spec: Comma-separated tokens, each ``endpoint[-endpoint][R|L|F]``
              where an endpoint is a 1-based page number or ``end``.

    Returns:
        Tokens in the order written

    Raises:
        ParseError: If any token is malformed
    """
    tokens = []
    pos = 0
    for raw in spec.split(TOKEN_SEPARATOR):
        tokens.append(_parse_token(spec, pos, pos + len(raw)))
        pos += len(raw) + 1

    logger.debug(f"Parsed {len(tokens)} range tokens from {spec!r}")
    return tokens


def format_tokens(tokens: Iterable[RangeToken]) -> str:
    """Render tokens back to their canonical textual form."""
    return TOKEN_SEPARATOR.join(_format_token(token) for token in tokens)


def _format_token(token: RangeToken) -> str:
    text = str(token.start)
    if token.end is not None:
        text += RANGE_SEPARATOR + str(token.end)
    return text + SUFFIX_FOR_ROTATION.get(token.rotation, "")


def _skip_whitespace(spec: str, i: int, stop: int) -> int:
    while i < stop and spec[i].isspace():
        i += 1
    return i


def _parse_token(spec: str, begin: int, stop: int) -> RangeToken:
    i = _skip_whitespace(spec, begin, stop)
    while stop > i and spec[stop - 1].isspace():
        stop -= 1
    if i == stop:
        raise ParseError(ParseErrorKind.EMPTY_TOKEN, spec[begin:stop], begin)

    token_offset = i
    start, i = _parse_endpoint(spec, i, stop)

    end = None
    k = _skip_whitespace(spec, i, stop)
    if k < stop and spec[k] == RANGE_SEPARATOR:
        k = _skip_whitespace(spec, k + 1, stop)
        end, i = _parse_endpoint(spec, k, stop)

    rotation = 0
    if i < stop:
        rotation = _parse_rotation(spec, i, stop)

    return RangeToken(
        start=start,
        end=end,
        rotation=rotation,
        offset=token_offset,
        text=spec[token_offset:stop],
    )


def _parse_endpoint(spec: str, i: int, stop: int) -> Tuple[Endpoint, int]:
    """Scan one endpoint starting at ``i``; return it and the next index."""
    if i < stop and spec[i] == "-":
        k = _scan_digits(spec, i + 1, stop)
        if k > i + 1:
            raise ParseError(ParseErrorKind.ZERO_OR_NEGATIVE_PAGE, spec[i:k], i)
        raise ParseError(ParseErrorKind.MALFORMED_ENDPOINT, spec[i:i + 1], i)

    k = _scan_digits(spec, i, stop)
    if k > i:
        value = int(spec[i:k])
        if value == 0:
            raise ParseError(ParseErrorKind.ZERO_OR_NEGATIVE_PAGE, spec[i:k], i)
        return value, k

    keyword = str(END)
    if spec[i:min(i + len(keyword), stop)].lower() == keyword:
        return END, i + len(keyword)

    k = i
    while k < stop and spec[k] != RANGE_SEPARATOR and not spec[k].isspace():
        k += 1
    raise ParseError(ParseErrorKind.MALFORMED_ENDPOINT, spec[i:k], i)


def _scan_digits(spec: str, i: int, stop: int) -> int:
    # ASCII digits only; str.isdigit accepts superscripts and other scripts
    while i < stop and spec[i] in string.digits:
        i += 1
    return i


def _parse_rotation(spec: str, i: int, stop: int) -> int:
    """Parse the suffix ``spec[i:stop]``, which must be a single rotation letter."""
    if spec[i].isspace():
        k = _skip_whitespace(spec, i, stop)
        raise ParseError(ParseErrorKind.TRAILING_GARBAGE, spec[k:stop], k)

    suffix = spec[i:stop]
    letter = suffix[0].upper()
    if letter in ROTATION_SUFFIXES:
        if len(suffix) > 1:
            raise ParseError(ParseErrorKind.TRAILING_GARBAGE, spec[i + 1:stop], i + 1)
        return ROTATION_SUFFIXES[letter]

    if len(suffix) == 1 and suffix.isalpha():
        raise ParseError(ParseErrorKind.UNKNOWN_ROTATION_SUFFIX, suffix, i)
    raise ParseError(ParseErrorKind.TRAILING_GARBAGE, suffix, i)
