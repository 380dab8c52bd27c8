"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from sectioncss.api import app

    uvicorn sectioncss.api:app --reload
"""

from sectioncss.api.app import app

__all__ = ["app"]
