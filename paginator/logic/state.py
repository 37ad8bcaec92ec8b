"""Per-application state holder for the order engine.

The engine is attached to ``app.state`` by the application factory rather
than kept in module globals, so each app (and each test) owns an isolated
catalog, custom order and selection.
"""

from __future__ import annotations

from fastapi import Request

from paginator.config import AppConfig
from paginator.logic.order_engine import OrderEngine

STATE_KEY = "order_engine"
CONFIG_KEY = "app_config"


def build_engine(config: AppConfig) -> OrderEngine:
    return OrderEngine.from_config(config)


def attach_engine(app, engine: OrderEngine, config: AppConfig) -> None:  # type: ignore[no-untyped-def]
    setattr(app.state, STATE_KEY, engine)
    setattr(app.state, CONFIG_KEY, config)


def get_order_engine(request: Request) -> OrderEngine:
    """FastAPI dependency returning the engine bound to the current app."""
    return getattr(request.app.state, STATE_KEY)


def get_app_config(request: Request) -> AppConfig:
    return getattr(request.app.state, CONFIG_KEY)


__all__ = ["STATE_KEY", "CONFIG_KEY", "build_engine", "attach_engine", "get_order_engine", "get_app_config"]
