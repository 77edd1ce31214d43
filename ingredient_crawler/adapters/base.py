from __future__ import annotations

from typing import List, Optional, Protocol, Sequence
from urllib.parse import urlparse

from ..extraction.fields import FieldRules
from ..extraction.locator import LocatorStrategy
from ..models import SearchHit


class SiteAdapter(Protocol):
    """
    Everything site-specific: URL shapes, locator tables and label phrases.
    Keep this small and stable so adapters rarely break across upgrades.
    """

    name: str
    domains: List[str]  # e.g. ["example.com", "www.example.com"]

    field_rules: FieldRules
    # Toggle text that gates the ingredient table.
    reveal_labels: Sequence[str]
    # Selector whose appearance means the disclosure table has rendered.
    table_selector: str
    # Selector whose appearance means a search listing has rendered.
    search_selector: str
    disclosure_markers: Sequence[str]
    must_list_markers: Sequence[str]
    not_applicable_markers: Sequence[str]

    def matches(self, url: str) -> bool:
        """Return True if this adapter should handle the given URL."""
        ...

    def product_url(self, external_id: str) -> str:
        ...

    def search_url(self, query: str) -> str:
        ...

    def external_id(self, url: str) -> Optional[str]:
        """Site identifier embedded in a product URL, if any."""
        ...

    def strategies(
        self,
        *,
        labelled_min_length: int = ...,
        shape_min_length: int = ...,
        shape_min_commas: int = ...,
    ) -> List[LocatorStrategy]:
        """Ingredient locator tiers in priority order."""
        ...

    def parse_search(self, html: str, base_url: str) -> List[SearchHit]:
        ...


def domain_of(url: str) -> str:
    return urlparse(url).netloc
