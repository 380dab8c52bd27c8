"""Stylesheet discovery and retrieval."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from sectioncss.purge.errors import NoStylesheetsError
from sectioncss.purge.models import Issue, Stage, StylesheetContent, StylesheetRef
from sectioncss.scraper.document import select_all
from sectioncss.scraper.errors import FetchError

STYLESHEET_LINK_SELECTOR = 'link[rel~="stylesheet" i]'

logger = logging.getLogger(__name__)

Fetch = Callable[[str], Awaitable[str]]


def resolve_href(href: str, base_url: str) -> str:
    """Resolve *href* against *base_url*; absolute references pass through."""
    return urljoin(base_url, href.strip())


def find_stylesheet_refs(
    doc: BeautifulSoup, base_url: str
) -> tuple[list[StylesheetRef], list[Issue]]:
    """Return every stylesheet link of *doc*, in document order.

    Repeated URLs are kept; each occurrence is fetched and reduced on its own.
    Links without an ``href`` cannot be fetched and are reported as issues.

    Raises:
        NoStylesheetsError: If the document has no stylesheet link at all.
    """
    links = select_all(doc, STYLESHEET_LINK_SELECTOR)
    if not links:
        raise NoStylesheetsError()

    refs: list[StylesheetRef] = []
    issues: list[Issue] = []
    for link in links:
        href = link.get("href")
        if not isinstance(href, str) or not href.strip():
            logger.warning("Skipping stylesheet link without href: %s", link)
            issues.append(
                Issue(
                    stage=Stage.RESOLVING_STYLESHEETS,
                    resource=str(link),
                    message="Stylesheet link has no href.",
                )
            )
            continue
        refs.append(StylesheetRef(href=href, resolved_url=resolve_href(href, base_url)))
    return refs, issues


async def fetch_stylesheets(
    refs: list[StylesheetRef], fetch: Fetch
) -> tuple[list[StylesheetContent], list[Issue]]:
    """Fetch each ref once, sequentially, keeping discovery order.

    A failed fetch drops that stylesheet and is recorded as an issue; it never
    aborts the others.
    """
    contents: list[StylesheetContent] = []
    issues: list[Issue] = []
    for ref in refs:
        try:
            css = await fetch(ref.resolved_url)
        except FetchError as exc:
            logger.warning("Error fetching CSS from %s: %s", ref.resolved_url, exc)
            issues.append(
                Issue(
                    stage=Stage.RESOLVING_STYLESHEETS,
                    resource=ref.resolved_url,
                    message=str(exc),
                )
            )
            continue
        contents.append(StylesheetContent(url=ref.resolved_url, css=css))
    return contents, issues


async def resolve_stylesheets(
    doc: BeautifulSoup, base_url: str, fetch: Fetch
) -> tuple[list[StylesheetContent], list[Issue]]:
    """Discover, resolve and fetch every stylesheet linked from *doc*.

    An empty content list (every fetch failed) is a valid result.

    Raises:
        NoStylesheetsError: If the document links no stylesheet at all.
    """
    refs, issues = find_stylesheet_refs(doc, base_url)
    contents, fetch_issues = await fetch_stylesheets(refs, fetch)
    logger.debug("Fetched %d of %d stylesheet(s)", len(contents), len(refs))
    return contents, issues + fetch_issues
