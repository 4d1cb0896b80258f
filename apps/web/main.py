"""FastAPI web application for autoupdate.

Run locally with ``python -m apps.web.main``.
"""

import logging
import os

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from core.engine import apply_update_set
from core.errors import AutoUpdateError, PatchError, RestoreError, UnknownEcosystemError
from core.models import UpdateSet
from core.plugins import default_registry
from core.report import changed_pairs, format_diff

logger = logging.getLogger(__name__)

app = FastAPI(
    title="autoupdate",
    description="Preview dependency update sets against a project checkout",
    version="0.1.0",
)

# Directory holding the manifests the plugins read
PROJECT_ROOT = os.environ.get("AUTOUPDATE_ROOT", ".")


class FileRef(BaseModel):
    path: str
    sha: str = ""


class PackageRef(BaseModel):
    name: str
    slug: str = ""
    type: str = ""


class RequirementUpdateIn(BaseModel):
    file: FileRef
    patch: str


class VersionUpdateIn(BaseModel):
    package: PackageRef
    old_version: str = ""
    target_version: str


class UpdateSetRequest(BaseModel):
    """Request body: an update set in the feed's wire format."""
    id: int
    requirement_updates: dict[str, list[RequirementUpdateIn]] = Field(default_factory=dict)
    version_updates: dict[str, list[VersionUpdateIn]] = Field(default_factory=dict)


class FileChange(BaseModel):
    path: str
    original_sha: str
    updated_sha: str
    diff: str


class ApplyResponse(BaseModel):
    """Response model for a dry-run application."""
    id: int
    files: list[FileChange]
    has_changes: bool


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/api/apply", response_model=ApplyResponse)
async def apply_updates(request: UpdateSetRequest):
    """Apply an update set without writing anything and return the diffs."""
    update_set = UpdateSet.from_dict(request.model_dump())

    try:
        orig_files, upt_files = apply_update_set(update_set, default_registry(PROJECT_ROOT))
    except UnknownEcosystemError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (PatchError, RestoreError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except AutoUpdateError as e:
        logger.exception("Update set %s failed", update_set.id)
        raise HTTPException(status_code=500, detail=f"Error applying update set: {e}")

    files = [
        FileChange(
            path=orig.path,
            original_sha=orig.sha,
            updated_sha=upt.sha,
            diff=format_diff(orig, upt),
        )
        for orig, upt in zip(orig_files, upt_files)
    ]

    return ApplyResponse(
        id=update_set.id,
        files=files,
        has_changes=bool(changed_pairs(orig_files, upt_files)),
    )


if __name__ == "__main__":
    uvicorn.run(
        "apps.web.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["apps", "core"],
    )
