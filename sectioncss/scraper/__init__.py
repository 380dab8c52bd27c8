"""Scraper package — resource fetching & document model."""

from sectioncss.scraper.document import parse_html, select_all, select_one
from sectioncss.scraper.errors import FetchError, SectionCSSError
from sectioncss.scraper.fetcher import fetch_document, fetch_text
from sectioncss.scraper.models import FetchedDocument

__all__ = [
    "fetch_document",
    "fetch_text",
    "parse_html",
    "select_one",
    "select_all",
    "FetchedDocument",
    "FetchError",
    "SectionCSSError",
]
