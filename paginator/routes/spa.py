"""Static asset and single-page-app fallback serving.

Registered last so it only sees paths no API route claimed. Files are looked
up in the configured static directories in order; anything else gets the
first ``index.html`` found so client-side routing works.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse, PlainTextResponse, Response

from paginator.config import AppConfig
from paginator.logic.state import get_app_config

router = APIRouter()
logger = logging.getLogger(__name__)


def _static_roots(static_dirs: Iterable[str]) -> list[Path]:
    roots = []
    for entry in static_dirs:
        root = Path(entry).resolve()
        if root.is_dir():
            roots.append(root)
    return roots


def resolve_static_file(static_dirs: Iterable[str], rel_path: str) -> Optional[Path]:
    """Return the first existing file for ``rel_path`` inside a static root.

    Paths escaping their root (``..``, absolute paths) never match.
    """
    for root in _static_roots(static_dirs):
        candidate = (root / rel_path).resolve()
        try:
            candidate.relative_to(root)
        except ValueError:
            continue
        if candidate.is_file():
            return candidate
    return None


@router.get("/{full_path:path}", include_in_schema=False)
def serve_spa(full_path: str, config: AppConfig = Depends(get_app_config)) -> Response:
    if full_path == "api" or full_path.startswith("api/"):
        raise HTTPException(status_code=404, detail="Not found")
    static_dirs = config.server.static_dirs
    if full_path:
        asset = resolve_static_file(static_dirs, full_path)
        if asset is not None:
            return FileResponse(asset)
    index = resolve_static_file(static_dirs, "index.html")
    if index is not None:
        logger.info("spa_index_served path=/%s index=%s", full_path, index)
        return FileResponse(index)
    logger.info("spa_index_missing path=/%s", full_path)
    return PlainTextResponse("Not found", status_code=404)


__all__ = ["router", "resolve_static_file", "serve_spa"]
