"""HTTP fetcher for pages and stylesheets."""

from __future__ import annotations

import logging

import httpx

from sectioncss.config import settings
from sectioncss.scraper.errors import FetchError
from sectioncss.scraper.models import FetchedDocument

logger = logging.getLogger(__name__)


def _default_headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent}


async def _get(url: str) -> httpx.Response:
    # One attempt, no timeout: a hanging server stalls only this request.
    async with httpx.AsyncClient(
        headers=_default_headers(),
        timeout=None,
        follow_redirects=True,
    ) as client:
        response = await client.get(url)
        response.raise_for_status()
        return response


async def fetch_document(url: str) -> FetchedDocument:
    """Fetch *url* and return it as a :class:`FetchedDocument`.

    Raises:
        FetchError: On a network failure or a 4xx/5xx status code.
    """
    logger.debug("Fetching url=%s", url)
    try:
        response = await _get(url)
    except httpx.HTTPError as exc:
        logger.debug("Fetch failed url=%s error=%r", url, exc)
        raise FetchError(url, exc) from exc

    logger.debug(
        "Fetched url=%s status_code=%s chars=%s",
        url,
        response.status_code,
        len(response.text),
    )
    return FetchedDocument(
        source_url=url,
        html=response.text,
        status_code=response.status_code,
    )


async def fetch_text(url: str) -> str:
    """Fetch *url* and return the response body as text.

    Raises:
        FetchError: On a network failure or a 4xx/5xx status code.
    """
    document = await fetch_document(url)
    return document.html
