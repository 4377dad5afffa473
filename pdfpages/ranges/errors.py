"""Errors raised while parsing and expanding page range specifications."""

from enum import Enum
from typing import Any, Dict, Optional


class ParseErrorKind(str, Enum):
    EMPTY_TOKEN = "empty_token"
    MALFORMED_ENDPOINT = "malformed_endpoint"
    ZERO_OR_NEGATIVE_PAGE = "zero_or_negative_page"
    UNKNOWN_ROTATION_SUFFIX = "unknown_rotation_suffix"
    TRAILING_GARBAGE = "trailing_garbage"


class ExpandErrorKind(str, Enum):
    OUT_OF_RANGE = "out_of_range"
    EMPTY_DOCUMENT = "empty_document"


class PageRangeError(ValueError):
    """Base class for page range failures."""

    code = "PAGE_RANGE_ERROR"

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": str(self), "details": {}}


_PARSE_MESSAGES = {
    ParseErrorKind.EMPTY_TOKEN: "Empty page range entry",
    ParseErrorKind.MALFORMED_ENDPOINT: "Expected a page number or 'end'",
    ParseErrorKind.ZERO_OR_NEGATIVE_PAGE: "Page numbers start at 1",
    ParseErrorKind.UNKNOWN_ROTATION_SUFFIX: "Unknown rotation suffix (use R, L or F)",
    ParseErrorKind.TRAILING_GARBAGE: "Unexpected characters after page range",
}


class ParseError(PageRangeError):
    """Structural or lexical fault in a page range string.

    Attributes:
        kind: Which rule was violated
        fragment: The offending substring
        offset: 0-based character offset of ``fragment`` in the input
    """

    code = "PARSE_ERROR"

    def __init__(self, kind: ParseErrorKind, fragment: str, offset: int):
        self.kind = kind
        self.fragment = fragment
        self.offset = offset
        super().__init__(
            f"{_PARSE_MESSAGES[kind]}: {fragment!r} at position {offset}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": str(self),
            "details": {
                "kind": self.kind.value,
                "fragment": self.fragment,
                "offset": self.offset,
            },
        }


class ExpandError(PageRangeError):
    """Semantic fault that needs the page count to detect."""

    code = "EXPAND_ERROR"

    def __init__(
        self,
        kind: ExpandErrorKind,
        max_page: int,
        requested: Optional[int] = None,
        token: str = "",
    ):
        self.kind = kind
        self.max_page = max_page
        self.requested = requested
        self.token = token
        if kind is ExpandErrorKind.EMPTY_DOCUMENT:
            message = "Document has no pages"
        else:
            message = f"Page {requested} is out of range (1-{max_page})"
        if token:
            message = f"{message} in {token!r}"
        super().__init__(message)

    @classmethod
    def out_of_range(cls, requested: int, max_page: int, token: str = "") -> "ExpandError":
        return cls(ExpandErrorKind.OUT_OF_RANGE, max_page, requested=requested, token=token)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": str(self),
            "details": {
                "kind": self.kind.value,
                "requested": self.requested,
                "max_page": self.max_page,
            },
        }
