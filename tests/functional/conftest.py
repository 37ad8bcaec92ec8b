from __future__ import annotations

"""Functional test bootstrap for the list service.

Every test gets its own engine and application so custom order and
selection state never leaks between tests. The default catalog here is
small (200 items, 50-item initial order, odd batch size) so that windowing,
backfill and extension boundaries are all reachable with tiny pages; the
million-item scenarios build their own app with the production defaults.
"""

import pytest
from fastapi.testclient import TestClient

from paginator.config import AppConfig
from paginator.logic.order_engine import OrderEngine
from paginator.main import create_app
from tests.functional.engine_helpers import small_config


@pytest.fixture
def config(tmp_path) -> AppConfig:
    return small_config(static_dirs=[str(tmp_path / "public")])


@pytest.fixture
def engine(config: AppConfig) -> OrderEngine:
    return OrderEngine.from_config(config, clock=lambda: 1_700_000_000.5)


@pytest.fixture
def client(config: AppConfig, engine: OrderEngine) -> TestClient:
    return TestClient(create_app(config=config, engine=engine))
