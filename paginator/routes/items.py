"""Core list API: paged retrieval, selection, ordering and settings.

Handlers are synchronous and delegate straight to the request's
``OrderEngine``; domain failures propagate as ``OrderError`` and are rendered
by the global handlers registered in ``paginator.main``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from paginator.config import AppConfig
from paginator.logic.order_engine import OrderEngine
from paginator.logic.paging import build_page_request
from paginator.logic.state import get_app_config, get_order_engine
from paginator.logic.validation import MoveCommand, parse_order_payload, parse_selection_payload
from paginator.models.items import PageResult, SelectionResult, SettingsView, SuccessResult

router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)


@router.get("/items", response_model=PageResult, summary="Get a page of ordered items")
def list_items(
    page: Optional[str] = Query(default=None, description="Page number (1-indexed)"),
    limit: Optional[str] = Query(default=None, description="Items per page"),
    search: Optional[str] = Query(default=None, description="Substring filter on value or id"),
    no_reorder: Optional[str] = Query(default=None, alias="noReorder", description="Disable reorder lookahead"),
    engine: OrderEngine = Depends(get_order_engine),
    config: AppConfig = Depends(get_app_config),
) -> PageResult:
    request = build_page_request(
        page,
        limit,
        search,
        no_reorder,
        default_page=config.order.default_page,
        default_limit=config.order.default_limit,
    )
    logger.info(
        "list_items page=%s limit=%s search=%r no_reorder=%s",
        request.page,
        request.limit,
        request.search,
        request.suppress_reorder_window,
    )
    return engine.retrieve(request)


@router.post("/selection", response_model=SelectionResult, summary="Replace the selected ids")
def save_selection(
    payload: Any = Body(default=None),
    engine: OrderEngine = Depends(get_order_engine),
) -> SelectionResult:
    ids = parse_selection_payload(payload)
    count = engine.set_selection(ids)
    return SelectionResult(success=True, selected_count=count)


@router.post("/order", response_model=SuccessResult, summary="Move one item or replace the order")
def save_order(
    payload: Any = Body(default=None),
    engine: OrderEngine = Depends(get_order_engine),
) -> SuccessResult:
    command = parse_order_payload(payload)
    if isinstance(command, MoveCommand):
        engine.move(command.from_id, command.to_id)
    else:
        logger.info("save_order replace length=%s", len(command.order))
        engine.replace(command.order)
    return SuccessResult(success=True)


@router.get("/settings", response_model=SettingsView, summary="Selection and order snapshot")
def get_settings(engine: OrderEngine = Depends(get_order_engine)) -> SettingsView:
    view = engine.settings()
    logger.info(
        "get_settings selected=%s custom_order=%s",
        len(view.selected_ids),
        "initialized" if view.custom_order is not None else "not initialized",
    )
    return view


__all__ = ["router", "list_items", "save_selection", "save_order", "get_settings"]
