"""Output storage for reduced CSS.

The pipeline only sees the :class:`CSSStore` protocol, so tests (or callers
embedding the pipeline) can swap the on-disk store for :class:`MemoryStore`.
"""

from __future__ import annotations

import hashlib
import logging
import re
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

_UNSAFE_FILE_CHARS = re.compile(r"[^A-Za-z0-9._-]")
_DIGEST_LENGTH = 10


def artifact_file_name(section_id: str) -> str:
    """Return the output file name for *section_id*, e.g. ``section-hero.css``.

    Characters that are not safe in a single path segment become ``_``.  When
    that changes the id, a short digest of the raw id is appended after a
    ``~`` (never produced by a safe id), so distinct ids get distinct files.
    """
    cleaned = _UNSAFE_FILE_CHARS.sub("_", section_id)
    if cleaned == section_id:
        return f"section-{section_id}.css"
    digest = hashlib.sha1(section_id.encode("utf-8", "surrogatepass")).hexdigest()[:_DIGEST_LENGTH]
    return f"section-{cleaned}~{digest}.css"


class CSSStore(Protocol):
    def write(self, file_name: str, css: str) -> str:
        """Persist *css* under *file_name* and return its public path."""
        ...


class FileSystemStore:
    """Writes files under a public root directory; the last writer wins."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def write(self, file_name: str, css: str) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.root / file_name
        path.write_text(css, encoding="utf-8")
        logger.debug("Wrote %s (%d chars)", path, len(css))
        return f"/{file_name}"


class MemoryStore:
    def __init__(self) -> None:
        self.files: dict[str, str] = {}

    def write(self, file_name: str, css: str) -> str:
        self.files[file_name] = css
        return f"/{file_name}"
