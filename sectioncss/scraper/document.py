"""Thin DOM layer over BeautifulSoup.

Parsing uses the stdlib ``html.parser`` backend, which accepts any input and
repairs malformed markup instead of failing.  Selection goes through
BeautifulSoup's ``select`` (soupsieve), so selectors follow standard CSS
semantics.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag


def parse_html(html: str) -> BeautifulSoup:
    """Parse *html* into a traversable tree.  Never raises on bad markup."""
    return BeautifulSoup(html, "html.parser")


def select_one(doc: BeautifulSoup | Tag, selector: str) -> Tag | None:
    """Return the first element under *doc* matching *selector*, or ``None``."""
    return doc.select_one(selector)


def select_all(doc: BeautifulSoup | Tag, selector: str) -> list[Tag]:
    """Return every element under *doc* matching *selector*, in document order."""
    return list(doc.select(selector))


def child_elements(node: Tag) -> list[Tag]:
    """Return the immediate child elements of *node* (text nodes excluded)."""
    return [child for child in node.children if isinstance(child, Tag)]


def outer_html(node: Tag) -> str:
    """Serialize *node* including its own start and end tags."""
    return str(node)
