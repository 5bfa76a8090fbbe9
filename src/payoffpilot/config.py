"""Runtime configuration read from the environment (and an optional ``.env``)."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

ENV_PREFIX = "PAYOFFPILOT_"
_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _env(key: str, default: str | None = None) -> str | None:
    return os.getenv(f"{ENV_PREFIX}{key}", default)


def _env_bool(name: str, default: bool = False) -> bool:
    """Read a boolean flag; unset means ``default``."""

    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def _user_data_root() -> Path:
    """Per-user fallback when the configured data dir cannot be created."""

    local = os.getenv("LOCALAPPDATA")
    if local:
        return Path(local)
    return Path.home() / ".local" / "share"


class BaseConfig:
    """Settings shared by every environment.

    Environment variables (all optional):
        PAYOFFPILOT_DATA_DIR      directory for the SQLite file and logs (``instance``)
        PAYOFFPILOT_DATABASE_URL  full SQLAlchemy URL, overrides the SQLite file
        PAYOFFPILOT_DEV_MODE      verbose console logging (on by default)
        PAYOFFPILOT_LOG_LEVEL     package logger level (``INFO``)
    """

    APP_NAME = "PayoffPilot"
    DB_FILENAME = "payoffpilot.db"
    LOG_FILENAME = "payoffpilot.log"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir(Path(_env("DATA_DIR", "instance")))
        self.DEV_MODE = _env_bool(f"{ENV_PREFIX}DEV_MODE", default=True)
        self.LOG_LEVEL = (_env("LOG_LEVEL", "INFO") or "INFO").upper()
        self.DATABASE_URL = _env("DATABASE_URL") or f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def _resolve_data_dir(self, requested: Path) -> Path:
        try:
            target = requested.expanduser().resolve()
            target.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            target = (_user_data_root() / self.APP_NAME).expanduser().resolve()
            target.mkdir(parents=True, exist_ok=True)
        return target

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Keyword arguments for ``create_engine``."""

        connect_args: dict[str, Any] = {"check_same_thread": False} if self.is_sqlite else {}
        return {"connect_args": connect_args}


class DevConfig(BaseConfig):
    DEBUG = True
    TESTING = False


class TestingConfig(BaseConfig):
    """Private in-memory database shared by every session of one engine."""

    __test__ = False

    DEBUG = False
    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = "sqlite://"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        from sqlalchemy.pool import StaticPool

        options = super().sqlalchemy_engine_options()
        options["poolclass"] = StaticPool
        return options
