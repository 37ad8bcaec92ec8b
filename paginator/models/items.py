"""Pydantic models for list items, page requests and API response bodies.

Wire names are camelCase (``totalItems``, ``selectedIds``) to match the
browser client; attributes stay snake_case and FastAPI serialises by alias.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Item(BaseModel):
    """A single catalog entry. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    id: int
    value: str


class ItemView(Item):
    selected: bool = False


class PageRequest(_CamelModel):
    """Normalised page query; see ``paginator.logic.paging`` for parsing."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)
    search: str = ""
    suppress_reorder_window: bool = Field(default=False, alias="noReorder")


class PageResult(_CamelModel):
    items: List[ItemView]
    total_items: int = Field(alias="totalItems")
    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    has_more: bool = Field(alias="hasMore")
    server_timestamp: int = Field(alias="serverTimestamp")


class SuccessResult(_CamelModel):
    success: bool = True


class SelectionResult(SuccessResult):
    selected_count: int = Field(alias="selectedCount")


class SettingsView(_CamelModel):
    selected_ids: List[int] = Field(alias="selectedIds")
    # Truncated snapshot; never the full internal order length
    custom_order: Optional[List[int]] = Field(default=None, alias="customOrder")


__all__ = [
    "Item",
    "ItemView",
    "PageRequest",
    "PageResult",
    "SuccessResult",
    "SelectionResult",
    "SettingsView",
]
