"""Data models for the fetch layer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FetchedDocument:
    """The raw HTTP response body for a single page fetch."""

    source_url: str
    html: str
    status_code: int
