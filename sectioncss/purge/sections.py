"""Section extraction: partitions the ``<main>`` container into sections."""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag

from sectioncss.purge.errors import NoMainContainerError
from sectioncss.purge.models import Section
from sectioncss.scraper.document import child_elements, outer_html, select_one

MAIN_CONTAINER_SELECTOR = "main"

logger = logging.getLogger(__name__)


def find_main_container(doc: BeautifulSoup) -> Tag:
    """Return the main content container of *doc*.

    Raises:
        NoMainContainerError: If the document has no ``<main>`` element.
    """
    main = select_one(doc, MAIN_CONTAINER_SELECTOR)
    if main is None:
        raise NoMainContainerError()
    return main


def sections_of(container: Tag) -> list[Section]:
    """Snapshot the identified immediate children of *container*.

    Children without a non-empty ``id`` are skipped silently.
    """
    sections: list[Section] = []
    for child in child_elements(container):
        section_id = child.get("id")
        if not isinstance(section_id, str) or not section_id:
            continue
        sections.append(Section(id=section_id, markup=outer_html(child)))
    return sections


def extract_sections(doc: BeautifulSoup) -> list[Section]:
    """Locate ``<main>`` in *doc* and return its sections in document order.

    An empty list is a valid result: the page simply has nothing to purge.

    Raises:
        NoMainContainerError: If the document has no ``<main>`` element.
    """
    sections = sections_of(find_main_container(doc))
    logger.debug("Extracted %d section(s): %s", len(sections), [s.id for s in sections])
    return sections
