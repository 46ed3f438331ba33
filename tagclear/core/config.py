"""
Configuration helpers for tagclear.

Settings are read from environment variables so that the database location can
be supplied from outside (connection string, or host/database name parts).
"""

from dataclasses import dataclass
from functools import lru_cache
import os

from sqlalchemy.engine import URL


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url_override: str
    db_driver: str
    db_host: str
    db_port: int | None
    db_name: str
    db_user: str
    db_password: str
    db_echo: bool
    log_level: str
    unloaded_collection_policy: str

    @property
    def database_url(self) -> str:
        """Full SQLAlchemy URL; DATABASE_URL wins over the individual parts."""
        if self.database_url_override:
            return self.database_url_override
        url = URL.create(
            drivername=self.db_driver,
            username=self.db_user or None,
            password=self.db_password or None,
            host=self.db_host or None,
            port=self.db_port,
            database=self.db_name or None,
        )
        return url.render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int | None = None) -> int | None:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url_override=(os.getenv("DATABASE_URL") or "").strip(),
        db_driver=(os.getenv("DB_DRIVER") or "sqlite").strip(),
        db_host=(os.getenv("DB_HOST") or "").strip(),
        db_port=_int(os.getenv("DB_PORT")),
        db_name=(os.getenv("DB_NAME") or "tagclear.db").strip(),
        db_user=os.getenv("DB_USER", ""),
        db_password=os.getenv("DB_PASSWORD", ""),
        db_echo=_bool(os.getenv("DB_ECHO"), False),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        unloaded_collection_policy=(os.getenv("UNLOADED_COLLECTION_POLICY") or "replace_all").strip().lower(),
    )
