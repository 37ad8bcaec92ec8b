"""Liveness probes.

Trivial endpoints used by deployments and the browser client to check that
the API is reachable. They do not touch the order engine.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import APIRouter, Request

router = APIRouter(prefix="/api")


@router.get("/test")
def api_test() -> Dict[str, str]:
    return {"message": "API is working!"}


@router.get("/hello")
def api_hello(request: Request) -> Dict[str, Optional[str]]:
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    return {
        "message": "API is working!",
        "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "env": os.environ.get("APP_ENV"),
        "url": url,
    }


__all__ = ["router", "api_test", "api_hello"]
