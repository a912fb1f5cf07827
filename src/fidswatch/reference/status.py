"""Canonical FIDS status vocabulary."""

import re
from typing import Optional, Tuple

UNKNOWN_STATUS = "-"

# (needle, canonical). Order matters: first match wins, so CANCEL is checked
# before DELAY and FINAL before BOARD. Needles match at the start of a word,
# so "EST 13:29" and "Departing" are found but "Budapest" is not.
STATUS_TABLE: Tuple[Tuple[str, str], ...] = (
    ("CANCEL", "CANCELLED"),
    ("DELAY", "DELAYED"),
    ("LANDED", "LANDED"),
    ("ARRIVED", "LANDED"),
    ("FINAL", "FINAL CALL"),
    ("BOARD", "BOARDING"),
    ("DEPART", "DEPARTED"),
    ("EST", "ESTIMATED"),
    ("ON TIME", "ON TIME"),
    ("SCHEDULED", "SCHEDULED"),
)

STATUS_VOCABULARY = frozenset(canonical for _, canonical in STATUS_TABLE)

_STATUS_PATTERNS = tuple(
    (re.compile(rf"\b{re.escape(needle)}"), canonical) for needle, canonical in STATUS_TABLE
)


def match_status(text: Optional[str]) -> Optional[str]:
    """Return the canonical status found anywhere in text, or None."""
    if not text:
        return None
    upper = " ".join(text.upper().split())
    for pattern, canonical in _STATUS_PATTERNS:
        if pattern.search(upper):
            return canonical
    return None


def canonical_status(text: Optional[str]) -> str:
    """Like match_status, but falls back to the unknown marker."""
    return match_status(text) or UNKNOWN_STATUS
