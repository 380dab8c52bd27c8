"""Dataclass models for the purge pipeline.

Every object here lives for one request only.  The one thing that outlives
a request is the file a :class:`PersistedArtifact` points at.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class Section:
    """An identified direct child of the main container, detached from the tree."""

    id: str
    markup: str


@dataclass(frozen=True)
class StylesheetRef:
    href: str
    resolved_url: str


@dataclass(frozen=True)
class StylesheetContent:
    url: str
    css: str


@dataclass
class ReducedCSS:
    section_id: str
    css: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.css.strip()


@dataclass(frozen=True)
class PersistedArtifact:
    section_id: str
    file_name: str
    public_path: str

    def to_dict(self) -> dict[str, str]:
        """Wire shape used by the HTTP API."""
        return {"id": self.section_id, "name": self.file_name, "url": self.public_path}


class Stage(str, Enum):
    FETCHING_PAGE = "fetching_page"
    EXTRACTING_MAIN_CONTAINER = "extracting_main_container"
    EXTRACTING_SECTIONS = "extracting_sections"
    RESOLVING_STYLESHEETS = "resolving_stylesheets"
    REDUCING_PER_SECTION = "reducing_per_section"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED_FETCH_PAGE = "failed_fetch_page"
    FAILED_NO_MAIN = "failed_no_main"
    FAILED_NO_STYLESHEETS = "failed_no_stylesheets"


@dataclass(frozen=True)
class Issue:
    """A non-fatal failure recorded while processing one resource."""

    stage: Stage
    resource: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"stage": self.stage.value, "resource": self.resource, "message": self.message}


@dataclass
class PurgeReport:
    url: str
    artifacts: list[PersistedArtifact] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)
