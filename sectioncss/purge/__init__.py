"""Purge package — per-section CSS reduction pipeline."""

from sectioncss.purge.errors import (
    NoMainContainerError,
    NoStylesheetsError,
    PageFetchError,
    PurgeFailure,
    ReduceError,
)
from sectioncss.purge.models import PersistedArtifact, PurgeReport, Section
from sectioncss.purge.pipeline import PurgePipeline, purge_url
from sectioncss.purge.reducer import reduce_css
from sectioncss.purge.storage import FileSystemStore, MemoryStore

__all__ = [
    "PurgePipeline",
    "purge_url",
    "reduce_css",
    "FileSystemStore",
    "MemoryStore",
    "PersistedArtifact",
    "PurgeReport",
    "Section",
    "PurgeFailure",
    "PageFetchError",
    "NoMainContainerError",
    "NoStylesheetsError",
    "ReduceError",
]
