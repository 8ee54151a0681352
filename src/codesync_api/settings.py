"""Process configuration read from ``CODESYNC_*`` environment variables."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from sqlalchemy.engine import make_url

from codesync_api.features.tree.exceptions import InvalidArgumentError
from codesync_api.features.tree.paths import MAX_TREE_DEPTH, validate_name

DEFAULT_SQLITE_PATH = Path("./data/db/codesync.sqlite")
DEFAULT_CORS_ORIGINS = ["http://localhost:5173"]
ASYNC_SQLITE_DRIVER = "sqlite+aiosqlite"


def _split_origins(value: Any) -> list[str]:
    """Accept a JSON array or a comma-separated string; blanks fall back to the default."""
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("["):
            try:
                value = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ValueError("CODESYNC_SERVER_CORS_ORIGINS is not a valid JSON array") from exc
        else:
            value = text.split(",")
    if value is None:
        value = []
    if not isinstance(value, (list, tuple)):
        raise ValueError("CODESYNC_SERVER_CORS_ORIGINS must be a list of origins")

    origins = [str(item).strip() for item in value if str(item).strip()]
    # dict.fromkeys keeps the first occurrence of each origin.
    return list(dict.fromkeys(origins)) or list(DEFAULT_CORS_ORIGINS)


class Settings(BaseSettings):
    """Settings for the API process, the CLI and the tree engine."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CODESYNC_",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    app_name: str = "CodeSync API"
    app_version: str = "0.4.0"
    api_docs_enabled: bool = False
    logging_level: str = "INFO"
    debug: bool = False

    server_host: str = "0.0.0.0"
    server_port: int = Field(8080, ge=1, le=65535)
    server_cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS)
    )

    database_url: str | None = None
    database_echo: bool = False
    database_sqlite_busy_timeout_ms: int = Field(30_000, ge=0)

    session_starter_filename: str = "main.js"
    session_starter_content: str = "// Welcome to CodeSync!"

    search_min_query_length: int = Field(3, ge=1)
    search_max_results: int = Field(100, ge=1)
    upload_max_bytes: int = Field(5 * 1024 * 1024, gt=0)
    # Stored trees are parsed back from JSON; deeper trees would not load.
    tree_max_depth: int = Field(MAX_TREE_DEPTH, ge=1, le=90)

    @field_validator("logging_level", mode="before")
    @classmethod
    def _v_log_level(cls, value: Any) -> str:
        return str(value or "").strip().upper() or "INFO"

    @field_validator("server_cors_origins", mode="before")
    @classmethod
    def _v_cors(cls, value: Any) -> list[str]:
        return _split_origins(value)

    @field_validator("session_starter_filename", mode="before")
    @classmethod
    def _v_starter_filename(cls, value: Any) -> str:
        try:
            return validate_name(None if value is None else str(value).strip())
        except InvalidArgumentError as exc:
            raise ValueError(f"CODESYNC_SESSION_STARTER_FILENAME: {exc.message}") from exc

    @model_validator(mode="after")
    def _resolve_database_url(self) -> Settings:
        if not self.database_url:
            location = DEFAULT_SQLITE_PATH.expanduser().resolve().as_posix()
            self.database_url = f"{ASYNC_SQLITE_DRIVER}:///{location}"

        url = make_url(self.database_url)
        if url.get_backend_name() != "sqlite":
            raise ValueError("CODESYNC_DATABASE_URL must point at a SQLite database")
        self.database_url = url.set(drivername=ASYNC_SQLITE_DRIVER).render_as_string(
            hide_password=False
        )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def reload_settings() -> Settings:
    """Drop the cached instance so the next read sees the current environment."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["DEFAULT_CORS_ORIGINS", "Settings", "get_settings", "reload_settings"]
