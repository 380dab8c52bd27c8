from __future__ import annotations

from sectioncss.scraper.errors import SectionCSSError


class PurgeFailure(SectionCSSError):
    """A terminal failure: the whole request is aborted before any output."""

    message = "CSS purge failed."
    status_code = 400

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__(detail or self.message)


class PageFetchError(PurgeFailure):
    message = "Error fetching HTML."

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Could not fetch page: {url}")


class ExtractError(PurgeFailure):
    pass


class NoMainContainerError(ExtractError):
    message = "<main> element not found."


class NoStylesheetsError(ExtractError):
    message = "No CSS files found."


class ReduceError(SectionCSSError):
    """Reducing one stylesheet against one section failed.  Never terminal."""
