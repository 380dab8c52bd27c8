"""Purge endpoint.

Routes
------
POST /api/purge    Form: url=https://...    → per-section CSS files
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Form, Request
from pydantic import BaseModel

from sectioncss.purge.pipeline import purge_url

router = APIRouter()

SUCCESS_MESSAGE = "CSS files processed and merged successfully for each section."


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ArtifactResponse(BaseModel):
    id: str
    name: str
    url: str


class IssueResponse(BaseModel):
    stage: str
    resource: str
    message: str


class PurgeResponse(BaseModel):
    message: str
    files: list[ArtifactResponse]
    issues: list[IssueResponse]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=PurgeResponse)
async def purge_endpoint(request: Request, url: str = Form(...)) -> dict[str, Any]:
    """Fetch *url*, purge its stylesheets per ``<main>`` section, and persist them.

    Terminal failures (page unreachable, no ``<main>``, no stylesheet links)
    are rendered as 400 responses by the app's ``PurgeFailure`` handler.
    """
    report = await purge_url(url, request.app.state.store)
    return {
        "message": SUCCESS_MESSAGE,
        "files": [artifact.to_dict() for artifact in report.artifacts],
        "issues": [issue.to_dict() for issue in report.issues],
    }
