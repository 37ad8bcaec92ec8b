from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from paginator.config import AppConfig, load_config
from paginator.http.problem import (
    handle_http_exception,
    handle_order_error,
    handle_request_validation_error,
    handle_unexpected_error,
)
from paginator.http.request_log import RequestLogMiddleware
from paginator.logging_setup import configure_logging
from paginator.logic.errors import OrderError
from paginator.logic.order_engine import OrderEngine
from paginator.logic.state import attach_engine, build_engine
from paginator.middleware.cors import apply_cors
from paginator.routes import api_router, spa_router

logger = logging.getLogger(__name__)


def create_app(config: Optional[AppConfig] = None, engine: Optional[OrderEngine] = None) -> FastAPI:
    """Build the FastAPI application.

    ``config`` defaults to ``load_config()``; ``engine`` defaults to a fresh
    engine built from it. Passing an engine lets callers (tests) share or
    inspect the exact store instance the routes mutate.
    """
    cfg = config or load_config()
    # Configure global logging before app instantiation so all modules emit
    configure_logging(cfg.server.log_level)
    app = FastAPI(
        title="Reorderable List Service",
        description=(
            "Paginated, searchable, drag-and-drop reorderable list over a "
            "large virtual catalog."
        ),
        version="1.0.0",
    )
    if engine is None:
        engine = build_engine(cfg)
    attach_engine(app, engine, cfg)

    app.add_exception_handler(OrderError, handle_order_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    apply_cors(app, origins=cfg.server.cors_origins)
    # Outermost so every request (CORS preflights included) is logged once
    app.add_middleware(RequestLogMiddleware)

    app.include_router(api_router)
    # Catch-all must come after every API route
    app.include_router(spa_router)
    logger.info(
        "app_created catalog_size=%s initial_order=%s static_dirs=%s",
        cfg.catalog.size,
        engine.initial_size,
        cfg.server.static_dirs,
    )
    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn on HOST/PORT."""
    import uvicorn

    cfg = load_config()
    app = create_app(cfg)
    logger.info("server_starting host=%s port=%s", cfg.server.host, cfg.server.port)
    logger.info("API is available at /api/items and /api/order")
    uvicorn.run(app, host=cfg.server.host, port=cfg.server.port, log_config=None)


__all__ = ["create_app", "run"]
