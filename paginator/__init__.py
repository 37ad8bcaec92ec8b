"""FastAPI application package for the reorderable list service.

This package exposes a small FastAPI application factory serving a
paginated, searchable, drag-and-drop reorderable list of catalog items.
Ordering and pagination logic lives in `paginator/logic/` and route
handlers in `paginator/routes/`.
"""

from __future__ import annotations

from paginator.main import create_app

__all__ = ["create_app"]
