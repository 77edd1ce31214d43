from __future__ import annotations

import logging
from typing import List, Optional
from importlib import metadata

from .base import SiteAdapter
from .oliveyoung import OliveYoungAdapter

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """
    Registry for available site adapters.
    Supports built-ins, config-defined dotted classes, and entry-point plugins.
    The first registered adapter is the default.
    """
    def __init__(self) -> None:
        self._adapters: List[SiteAdapter] = [OliveYoungAdapter()]

    # ---- Introspection / Management ----

    def register(self, adapter: SiteAdapter) -> None:
        self._adapters.append(adapter)

    @property
    def adapters(self) -> List[SiteAdapter]:
        return list(self._adapters)

    @property
    def default(self) -> SiteAdapter:
        return self._adapters[0]

    def get(self, name: str) -> SiteAdapter:
        for a in self._adapters:
            if a.name == name:
                return a
        raise KeyError(f"No adapter named {name!r}; known: {[a.name for a in self._adapters]}")

    def match(self, url: str) -> Optional[SiteAdapter]:
        # Later registrations win so plugins can override built-ins.
        for a in reversed(self._adapters):
            if a.matches(url):
                return a
        return None

    # ---- Discovery ----

    def discover_entry_points(self, group: str = "ingredient_crawler.adapters") -> int:
        """
        Discover third-party adapters installed as entry points.
        Returns count of newly registered adapters.
        """
        added = 0
        for ep in metadata.entry_points().select(group=group):
            try:
                adapter_cls = ep.load()
                self.register(adapter_cls())
            except Exception as exc:
                # Plugins are optional; a broken one must not take the crawler down.
                logger.warning("Failed to load adapter entry point %s: %r", ep.name, exc)
                continue
            added += 1
        return added
