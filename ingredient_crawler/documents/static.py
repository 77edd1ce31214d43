from __future__ import annotations

from typing import List, Optional

from bs4 import BeautifulSoup, Tag


class StaticElement:
    def __init__(self, tag: Tag, document: "StaticDocument") -> None:
        self._tag = tag
        self._document = document

    @property
    def tag(self) -> Tag:
        return self._tag

    async def text(self) -> str:
        return self._tag.get_text()

    async def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if isinstance(value, list):
            # bs4 returns multi-valued attributes (class, rel) as lists
            return " ".join(value)
        return value

    async def click(self) -> None:
        # Static pages cannot run scripts, so emulate what an accordion toggle does.
        if self._tag.has_attr("aria-expanded"):
            self._tag["aria-expanded"] = "true"
        target_id = self._tag.get("aria-controls")
        if target_id:
            target = self._document.soup.find(id=target_id)
            if target is not None and target.has_attr("hidden"):
                del target["hidden"]
        self._document.clicks.append(self)

    async def closest(self, selector: str) -> Optional["StaticElement"]:
        node: Optional[Tag] = self._tag
        while isinstance(node, Tag):
            if node.css.match(selector):
                return StaticElement(node, self._document)
            node = node.parent
        return None

    async def query(self, selector: str) -> Optional["StaticElement"]:
        found = self._tag.select_one(selector)
        return StaticElement(found, self._document) if found is not None else None


class StaticDocument:
    """
    RawDocument over an HTML string parsed with BeautifulSoup.
    Used for server-rendered pages and as the fixture document in tests.
    """

    def __init__(self, html: str, url: str = "") -> None:
        self.url = url
        self.soup = BeautifulSoup(html, "html.parser")
        self.clicks: List[StaticElement] = []

    async def query_all(self, selector: str) -> List[StaticElement]:
        return [StaticElement(tag, self) for tag in self.soup.select(selector)]

    async def query(self, selector: str) -> Optional[StaticElement]:
        found = self.soup.select_one(selector)
        return StaticElement(found, self) if found is not None else None

    async def title(self) -> str:
        if self.soup.title is None:
            return ""
        return self.soup.title.get_text()

    async def wait_for(self, selector: str, timeout: float) -> bool:
        # Nothing renders later in a static document.
        return self.soup.select_one(selector) is not None

    async def html(self) -> str:
        return str(self.soup)
