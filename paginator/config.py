"""Configuration utilities for the list service.

This module loads application configuration with the following rules:
- Primary source: `paginator_config.json` at the project root.
- Overrides: optional text files under `config/`, then environment variables
  (a local `.env` is loaded first without overriding the real environment).
- Validation: Pydantic models enforce value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("paginator_config.json")
logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5000",
    "https://paginator-fe-solid-js.vercel.app",
    "https://draiex.github.io",
]
DEFAULT_STATIC_DIRS = ["public", os.path.join("client", "dist")]


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        # Recoverable: log and ignore unreadable override
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _split_list(text: Optional[str], sep: str) -> Optional[List[str]]:
    if text is None:
        return None
    return [part.strip() for part in str(text).split(sep) if part.strip()]


class CatalogConfig(BaseModel):
    size: int = Field(default=1_000_000, gt=0)
    value_prefix: str = "Item"

    @field_validator("value_prefix")
    @classmethod
    def prefix_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("catalog.value_prefix must be a non-empty string")
        return v.strip()


class OrderConfig(BaseModel):
    initial_size: int = Field(default=10_000, ge=0)
    extend_batch_size: int = Field(default=10_000, gt=0)
    window_lookahead: int = Field(default=1_000, ge=0)
    settings_cap: int = Field(default=5_000, gt=0)
    default_page: int = Field(default=1, gt=0)
    default_limit: int = Field(default=20, gt=0)


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=5000, ge=1, le=65535)
    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    static_dirs: List[str] = Field(default_factory=lambda: list(DEFAULT_STATIC_DIRS))
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def level_must_be_known(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = str(v).strip().upper()
        if level not in allowed:
            raise ValueError(f"server.log_level must be one of {sorted(allowed)}")
        return level


class AppConfig(BaseModel):
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    order: OrderConfig = Field(default_factory=OrderConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:  # pragma: no cover - defensive
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables (including a local .env)
    2) Text files in `config/` (optional)
    3) paginator_config.json at project root (primary base)
    4) Safe defaults
    """

    load_dotenv(find_dotenv(usecwd=True), override=False)
    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        if isinstance(cur, list):
            return ",".join(str(v) for v in cur)
        return str(cur) if cur is not None else default

    def _pick(env_key: str, file_key: str, base_key: str) -> Optional[str]:
        return _env(env_key) or _read_config_file(file_key) or _base(base_key)

    catalog: dict = {}
    order: dict = {}
    server: dict = {}

    size_text = _pick("CATALOG_SIZE", "catalog.size", "catalog.size")
    if size_text is not None:
        catalog["size"] = size_text
    prefix_text = _pick("CATALOG_VALUE_PREFIX", "catalog.value_prefix", "catalog.value_prefix")
    if prefix_text is not None:
        catalog["value_prefix"] = prefix_text

    for field, env_key in (
        ("initial_size", "ORDER_INITIAL_SIZE"),
        ("extend_batch_size", "ORDER_EXTEND_BATCH_SIZE"),
        ("window_lookahead", "ORDER_WINDOW_LOOKAHEAD"),
        ("settings_cap", "SETTINGS_ORDER_CAP"),
    ):
        text = _pick(env_key, f"order.{field}", f"order.{field}")
        if text is not None:
            order[field] = text

    host_text = _pick("HOST", "server.host", "server.host")
    if host_text is not None:
        server["host"] = host_text
    port_text = _pick("PORT", "server.port", "server.port")
    if port_text is not None:
        server["port"] = port_text
    level_text = _pick("LOG_LEVEL", "server.log_level", "server.log_level")
    if level_text is not None:
        server["log_level"] = level_text
    origins = _split_list(_pick("CORS_ORIGINS", "server.cors_origins", "server.cors_origins"), ",")
    if origins is not None:
        server["cors_origins"] = origins
    static_dirs = _split_list(_env("STATIC_DIRS"), os.pathsep)
    if static_dirs is None:
        static_dirs = _split_list(_read_config_file("server.static_dirs") or _base("server.static_dirs"), ",")
    if static_dirs is not None:
        server["static_dirs"] = static_dirs

    try:
        cfg = AppConfig(
            catalog=CatalogConfig(**catalog),
            order=OrderConfig(**order),
            server=ServerConfig(**server),
        )
        return cfg
    except PydanticValidationError as e:
        # Surface an actionable message before failing startup
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "CatalogConfig",
    "OrderConfig",
    "ServerConfig",
    "load_config",
]
