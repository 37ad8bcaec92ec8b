"""Error taxonomy for order and selection operations.

Single source of truth for mapping domain failures to HTTP statuses.
Route handlers raise these exceptions and the global handlers in
`paginator.http.problem` render them as `{"error": ..., **fields}`.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class OrderError(Exception):
    """Base class for failures raised by the order engine.

    ``fields`` carries diagnostic values (offending ids, indices) that are
    merged into the JSON error body.
    """

    kind = "internal"

    def __init__(self, message: str, fields: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields: Dict[str, Any] = dict(fields or {})


class InvalidInputError(OrderError):
    kind = "invalid_input"


class NotFoundError(OrderError):
    kind = "not_found"


class InternalOrderError(OrderError):
    kind = "internal"


ERROR_STATUS_MAP = {
    "invalid_input": 400,
    "not_found": 400,
    "internal": 500,
}


def status_for(exc: OrderError) -> int:
    return ERROR_STATUS_MAP.get(exc.kind, 500)


__all__ = [
    "OrderError",
    "InvalidInputError",
    "NotFoundError",
    "InternalOrderError",
    "ERROR_STATUS_MAP",
    "status_for",
]
