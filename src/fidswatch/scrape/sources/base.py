"""Interface shared by the page adapters (one per known source markup variant)."""

from dataclasses import dataclass, field
from typing import List, Protocol, runtime_checkable

from fidswatch.scrape.models import RawRow


@dataclass
class Extraction:
    """Rows an adapter located in one document, plus how many candidates it saw."""

    rows: List[RawRow] = field(default_factory=list)
    rows_seen: int = 0


@runtime_checkable
class PageAdapter(Protocol):
    """Protocol for pluggable page adapters."""

    name: str

    def extract(self, document: str) -> Extraction:
        """Locate raw flight fields in a fetched document."""
        ...
