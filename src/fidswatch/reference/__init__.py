"""Vocabulary tables for FIDS parsing: statuses, terminals, banners, patterns."""

from fidswatch.reference.status import (
    STATUS_TABLE,
    STATUS_VOCABULARY,
    UNKNOWN_STATUS,
    canonical_status,
    match_status,
)
from fidswatch.reference.terminals import (
    BANNER_PHRASES,
    DOMESTIC_TERMINALS,
    TERMINAL_CODES,
    is_banner,
    match_terminal,
)

__all__ = [
    "BANNER_PHRASES",
    "DOMESTIC_TERMINALS",
    "STATUS_TABLE",
    "STATUS_VOCABULARY",
    "TERMINAL_CODES",
    "UNKNOWN_STATUS",
    "canonical_status",
    "is_banner",
    "match_status",
    "match_terminal",
]
