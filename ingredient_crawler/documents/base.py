from __future__ import annotations

from typing import List, Optional, Protocol


class Element(Protocol):
    """
    A node inside a rendered document.
    Implementations wrap either a parsed-HTML tag or a live browser element.
    """

    async def text(self) -> str:
        """Raw text content (not stripped), like the DOM's textContent."""
        ...

    async def attr(self, name: str) -> Optional[str]:
        ...

    async def click(self) -> None:
        """Trigger the element's primary action (e.g. expand an accordion)."""
        ...

    async def closest(self, selector: str) -> Optional["Element"]:
        """Nearest ancestor (or self) matching selector."""
        ...

    async def query(self, selector: str) -> Optional["Element"]:
        """First descendant matching selector."""
        ...


class RawDocument(Protocol):
    """
    Capability-based handle to a rendered page.
    The extraction core only reads, triggers and waits; the owner manages its lifecycle.
    """

    url: str

    async def query_all(self, selector: str) -> List[Element]:
        ...

    async def query(self, selector: str) -> Optional[Element]:
        ...

    async def title(self) -> str:
        ...

    async def wait_for(self, selector: str, timeout: float) -> bool:
        """Wait up to `timeout` seconds for selector to appear. Returns False on timeout."""
        ...

    async def html(self) -> str:
        ...
