"""Query-parameter normalisation for page requests.

Raw query values arrive as strings (or not at all). Anything that is not a
positive integer falls back to the configured default so that no invalid
number ever reaches slicing.
"""

from __future__ import annotations

from typing import Optional

from paginator.models.items import PageRequest

_TRUE_VALUES = {"1", "true", "yes", "on"}


def parse_positive_int(raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def parse_flag(raw: Optional[str]) -> bool:
    if raw is None:
        return False
    return str(raw).strip().lower() in _TRUE_VALUES


def build_page_request(
    page: Optional[str],
    limit: Optional[str],
    search: Optional[str],
    no_reorder: Optional[str],
    *,
    default_page: int = 1,
    default_limit: int = 20,
) -> PageRequest:
    return PageRequest(
        page=parse_positive_int(page, default_page),
        limit=parse_positive_int(limit, default_limit),
        search=search or "",
        suppress_reorder_window=parse_flag(no_reorder),
    )


__all__ = ["parse_positive_int", "parse_flag", "build_page_request"]
