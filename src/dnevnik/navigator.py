"""Selector-based lookups over a parsed portal page.

Navigator wraps a BeautifulSoup node and hides the None checks every
extractor would otherwise repeat. Selectors are CSS (soupsieve), so the
paths read the same as in the browser devtools.
"""

from bs4 import BeautifulSoup, Tag


class Navigator:
    """A parsed document or one element inside it."""

    def __init__(self, node: "Tag | BeautifulSoup | None") -> None:
        self.node = node

    @classmethod
    def from_html(cls, html: str) -> "Navigator":
        return cls(BeautifulSoup(html, "html.parser"))

    def __bool__(self) -> bool:
        return self.node is not None

    def __repr__(self) -> str:
        name = getattr(self.node, "name", None)
        return f"<Navigator {name!r}>"

    def one(self, selector: str) -> "Navigator":
        """First match of selector; an empty Navigator when there is none."""
        if self.node is None:
            return Navigator(None)
        return Navigator(self.node.select_one(selector))

    def all(self, selector: str) -> list["Navigator"]:
        if self.node is None:
            return []
        return [Navigator(tag) for tag in self.node.select(selector)]

    def text(self, selector: str | None = None, *, strip: bool = True) -> str:
        """Concatenated text of the node (or of the first selector match)."""
        target = self.one(selector) if selector else self
        if target.node is None:
            return ""
        value = target.node.get_text()
        return value.strip() if strip else value

    def attr(self, name: str, selector: str | None = None) -> str | None:
        target = self.one(selector) if selector else self
        if not isinstance(target.node, Tag):
            return None
        value = target.node.get(name)
        if isinstance(value, list):
            # multi-valued attributes (class, rel) come back as lists
            return " ".join(value)
        return value

    def has_class(self, name: str) -> bool:
        if not isinstance(self.node, Tag):
            return False
        return name in (self.node.get("class") or [])
