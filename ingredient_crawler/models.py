from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class ExtractedProduct:
    """Structured record extracted from one product page."""

    external_id: str
    source_url: str
    brand: str = ""
    name: str = ""
    image_url: str = ""
    # Document order, duplicates allowed.
    ingredients: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "external_id": self.external_id,
            "source_url": self.source_url,
            "brand": self.brand,
            "name": self.name,
            "image_url": self.image_url,
            "ingredients": list(self.ingredients),
        }


@dataclass
class SearchHit:
    """One card from a search result listing."""

    external_id: str
    url: str
    brand: str = ""
    name: str = ""
    price: str = ""
    image_url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "external_id": self.external_id,
            "url": self.url,
            "brand": self.brand,
            "name": self.name,
            "price": self.price,
            "image_url": self.image_url,
        }


@dataclass
class BatchFailure:
    external_id: str
    error: str


@dataclass
class BatchReport:
    success: List[ExtractedProduct] = field(default_factory=list)
    failed: List[BatchFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.success) + len(self.failed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": [p.to_dict() for p in self.success],
            "failed": [{"external_id": f.external_id, "error": f.error} for f in self.failed],
        }
