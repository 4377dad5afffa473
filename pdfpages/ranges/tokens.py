"""Token and selection types for page range specifications."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, NamedTuple, Optional, Union


class EndMarker(Enum):
    """Symbolic endpoint resolved to the last page at expansion time."""
    END = "end"

    def __str__(self) -> str:
        return self.value


END = EndMarker.END

Endpoint = Union[int, EndMarker]

# Rotation suffix letter -> clockwise degrees
ROTATION_SUFFIXES: Dict[str, int] = {
    "R": 90,
    "L": 270,
    "F": 180,
}

SUFFIX_FOR_ROTATION: Dict[int, str] = {v: k for k, v in ROTATION_SUFFIXES.items()}


@dataclass(frozen=True)
class RangeToken:
    """One comma-separated unit of a page range specification.

    ``end`` is None for single-page tokens. ``offset`` and ``text`` point back
    into the source string and are ignored when comparing tokens.
    """
    start: Endpoint
    end: Optional[Endpoint] = None
    rotation: int = 0
    offset: int = field(default=0, compare=False)
    text: str = field(default="", compare=False)

    @property
    def is_single(self) -> bool:
        return self.end is None


class PageSelection(NamedTuple):
    """A resolved (1-based page, rotation delta) pair."""
    page: int
    rotation: int = 0
