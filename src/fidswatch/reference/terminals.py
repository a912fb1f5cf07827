"""Terminal codes and page-chrome phrases seen on the FIS pages."""

from typing import Optional

DOMESTIC_TERMINALS = frozenset({"DOM"})
TERMINAL_CODES = frozenset({"DOM", "T1", "T2", "T3", "INT"})

# Rows whose place text contains any of these are page banners or legends.
BANNER_PHRASES = (
    "ALL AIRLINES",
    "ALL ORIGINS",
    "ALL DESTINATIONS",
    "PASSENGER ARRIVALS",
    "PASSENGER DEPARTURES",
)


def match_terminal(text: Optional[str]) -> Optional[str]:
    """Return the uppercase terminal code if text is exactly one, else None."""
    if not text:
        return None
    code = text.strip().upper()
    return code if code in TERMINAL_CODES else None


def is_banner(text: Optional[str]) -> bool:
    """True when text looks like a banner/legend row rather than a place."""
    if not text:
        return False
    upper = " ".join(text.upper().split())
    return any(phrase in upper for phrase in BANNER_PHRASES)
