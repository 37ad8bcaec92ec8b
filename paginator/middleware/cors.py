"""CORS configuration helpers.

Applies CORS with credentials for the configured browser origins. Origins
outside the list are logged and still allowed, matching the permissive
policy the browser client was deployed against.
"""

from __future__ import annotations

import logging
from typing import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logger = logging.getLogger(__name__)


class OriginAuditor:
    """Origin predicate: every origin passes, unlisted ones are logged."""

    def __init__(self, origins: Iterable[str]) -> None:
        self.origins = {o.rstrip("/") for o in origins}

    def __call__(self, origin: str) -> bool:
        if origin and origin.rstrip("/") not in self.origins:
            logger.info("cors_origin_not_listed origin=%s (allowed)", origin)
        return True


class AuditingCORSMiddleware(CORSMiddleware):
    def __init__(self, app, *, auditor: OriginAuditor, **kwargs) -> None:  # type: ignore[no-untyped-def]
        super().__init__(app, **kwargs)
        self.auditor = auditor

    def is_allowed_origin(self, origin: str) -> bool:
        return self.auditor(origin)


def apply_cors(app: FastAPI, *, origins: Iterable[str] | None = None) -> None:
    app.add_middleware(
        AuditingCORSMiddleware,
        auditor=OriginAuditor(origins or []),
        allow_origins=list(origins or []),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )


__all__ = ["apply_cors", "AuditingCORSMiddleware", "OriginAuditor"]
