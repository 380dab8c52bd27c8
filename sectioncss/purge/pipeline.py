"""Purge pipeline — page URL to per-section stylesheets.

:class:`PurgePipeline` orchestrates one request from a page URL to a set of
per-section stylesheets:

    fetch page → find <main> → extract sections → resolve stylesheets
    → reduce per section → persist → report

The first three failures (page fetch, no ``<main>``, no stylesheet links) are
terminal and raised.  Everything after stylesheet discovery fails per item:
the failing stylesheet or reduction contributes nothing and is recorded as an
:class:`~sectioncss.purge.models.Issue` on the report.
"""

from __future__ import annotations

import asyncio
import logging

from sectioncss.config import settings
from sectioncss.purge.errors import NoMainContainerError, NoStylesheetsError, PageFetchError
from sectioncss.purge.models import PersistedArtifact, PurgeReport, ReducedCSS, Stage
from sectioncss.purge.reducer import reduce_section
from sectioncss.purge.sections import find_main_container, sections_of
from sectioncss.purge.storage import CSSStore, artifact_file_name
from sectioncss.purge.stylesheets import Fetch, resolve_stylesheets
from sectioncss.scraper.document import parse_html
from sectioncss.scraper.errors import FetchError
from sectioncss.scraper.fetcher import fetch_text

logger = logging.getLogger(__name__)


class PurgePipeline:
    """Runs one purge request.  Create a fresh instance per request."""

    def __init__(
        self,
        store: CSSStore,
        fetch: Fetch | None = None,
        *,
        max_concurrent_reductions: int | None = None,
    ) -> None:
        self.store = store
        self.fetch = fetch or fetch_text
        self.max_concurrent_reductions = (
            max_concurrent_reductions or settings.max_concurrent_reductions
        )
        self.stage: Stage | None = None

    def _enter(self, stage: Stage) -> None:
        logger.debug("Purge stage %s -> %s", self.stage, stage)
        self.stage = stage

    async def run(self, url: str) -> PurgeReport:
        """Purge the page at *url* and return the per-section artifacts.

        Raises:
            PageFetchError: The page itself could not be fetched.
            NoMainContainerError: The page has no ``<main>`` element.
            NoStylesheetsError: The page links no stylesheet.
        """
        report = PurgeReport(url=url)

        # ------------------------------------------------------------------
        # 1 — Fetch the page
        # ------------------------------------------------------------------
        self._enter(Stage.FETCHING_PAGE)
        try:
            html = await self.fetch(url)
        except FetchError as exc:
            self._enter(Stage.FAILED_FETCH_PAGE)
            logger.warning("Error fetching HTML from %s: %s", url, exc)
            raise PageFetchError(url) from exc

        # ------------------------------------------------------------------
        # 2 & 3 — Locate <main> and snapshot its identified children
        # ------------------------------------------------------------------
        self._enter(Stage.EXTRACTING_MAIN_CONTAINER)
        doc = parse_html(html)
        try:
            container = find_main_container(doc)
        except NoMainContainerError:
            self._enter(Stage.FAILED_NO_MAIN)
            logger.warning("No <main> element in %s", url)
            raise

        self._enter(Stage.EXTRACTING_SECTIONS)
        sections = sections_of(container)

        # ------------------------------------------------------------------
        # 4 — Discover and fetch stylesheets (each link once, in order)
        # ------------------------------------------------------------------
        self._enter(Stage.RESOLVING_STYLESHEETS)
        try:
            stylesheets, issues = await resolve_stylesheets(doc, url, self.fetch)
        except NoStylesheetsError:
            self._enter(Stage.FAILED_NO_STYLESHEETS)
            logger.warning("No stylesheet links in %s", url)
            raise
        report.issues.extend(issues)

        # ------------------------------------------------------------------
        # 5 — Reduce every stylesheet against every section
        # ------------------------------------------------------------------
        self._enter(Stage.REDUCING_PER_SECTION)
        limit = asyncio.Semaphore(self.max_concurrent_reductions)
        reduced: list[ReducedCSS] = []
        for section in sections:
            section_css, section_issues = await reduce_section(
                section, stylesheets, limit=limit
            )
            report.issues.extend(section_issues)
            reduced.append(section_css)

        # ------------------------------------------------------------------
        # 6 — Persist non-empty results
        # ------------------------------------------------------------------
        self._enter(Stage.PERSISTING)
        for section_css in reduced:
            if section_css.is_empty:
                logger.debug("Section %s uses no CSS; nothing written", section_css.section_id)
                continue
            file_name = artifact_file_name(section_css.section_id)
            public_path = self.store.write(file_name, section_css.css)
            report.artifacts.append(
                PersistedArtifact(
                    section_id=section_css.section_id,
                    file_name=file_name,
                    public_path=public_path,
                )
            )

        self._enter(Stage.DONE)
        logger.info(
            "Purged %s: %d section(s), %d stylesheet(s), %d file(s), %d issue(s)",
            url,
            len(sections),
            len(stylesheets),
            len(report.artifacts),
            len(report.issues),
        )
        return report


async def purge_url(
    url: str, store: CSSStore, fetch: Fetch | None = None
) -> PurgeReport:
    """Convenience wrapper: run a fresh :class:`PurgePipeline` for *url*."""
    return await PurgePipeline(store, fetch).run(url)
