"""Logical page label lookup (e.g. "iv" -> physical page 4)."""

from typing import Dict

import pymupdf


def page_label_map(doc: pymupdf.Document) -> Dict[str, int]:
    """Map each page label to its 1-based physical page; first occurrence wins."""
    labels: Dict[str, int] = {}
    for index in range(doc.page_count):
        label = doc[index].get_label()
        if label and label not in labels:
            labels[label] = index + 1
    return labels


def resolve_label(labels: Dict[str, int], label: str) -> int:
    try:
        return labels[label]
    except KeyError:
        raise ValueError(f"Unknown page label: {label!r}") from None
