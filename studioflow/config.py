"""Environment-driven configuration for studioflow.

Settings are read from ``STUDIOFLOW_*`` environment variables. Missing or
blank values fall back to defaults so an unconfigured process runs against an
in-memory store.

Examples
--------
Open a session using the configured store:

>>> settings = load_settings()
>>> configure_logging(settings.log_level)
>>> session = await open_session(build_state_store(settings), key=settings.state_key)
"""

from __future__ import annotations

import dataclasses as dc
import os
import pathlib
import typing as typ

from studioflow.logging import get_logger, log_info
from studioflow.storage import FileStateStore, InMemoryStateStore, SqlAlchemyStateStore
from studioflow.workflow.engine import DEFAULT_STATE_KEY

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from studioflow.workflow.ports import StateStore

logger = get_logger(__name__)

LOG_LEVEL_ENV = "STUDIOFLOW_LOG_LEVEL"
STATE_KEY_ENV = "STUDIOFLOW_STATE_KEY"
DATABASE_URL_ENV = "STUDIOFLOW_DATABASE_URL"
STATE_DIR_ENV = "STUDIOFLOW_STATE_DIR"


@dc.dataclass(frozen=True, slots=True)
class Settings:
    """Runtime settings for a studioflow process.

    Attributes
    ----------
    log_level : str | None
        Requested femtologging level; ``None`` uses the default.
    state_key : str
        Storage key of the workflow document.
    database_url : str | None
        Async SQLAlchemy URL selecting the database store.
    state_dir : pathlib.Path | None
        Directory selecting the file store when no database URL is set.
    """

    log_level: str | None = None
    state_key: str = DEFAULT_STATE_KEY
    database_url: str | None = None
    state_dir: pathlib.Path | None = None


def _optional_text(value: str | None) -> str | None:
    """Return the stripped value, or ``None`` when it is missing or blank."""
    if value is None:
        return None
    text = value.strip()
    return text or None


def load_settings(environ: cabc.Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``environ`` (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    state_dir = _optional_text(env.get(STATE_DIR_ENV))
    return Settings(
        log_level=_optional_text(env.get(LOG_LEVEL_ENV)),
        state_key=_optional_text(env.get(STATE_KEY_ENV)) or DEFAULT_STATE_KEY,
        database_url=_optional_text(env.get(DATABASE_URL_ENV)),
        state_dir=pathlib.Path(state_dir).expanduser() if state_dir else None,
    )


def build_state_store(settings: Settings) -> StateStore:
    """Select the state store adapter described by ``settings``.

    A database URL wins over a state directory; with neither, documents live
    only in memory. The database schema must already be migrated.
    """
    if settings.database_url:
        from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

        engine = create_async_engine(settings.database_url, pool_pre_ping=True)
        log_info(logger, "Using database state store.")
        return SqlAlchemyStateStore(async_sessionmaker(engine, expire_on_commit=False))
    if settings.state_dir is not None:
        log_info(logger, "Using file state store in %s.", settings.state_dir)
        return FileStateStore(settings.state_dir)
    log_info(logger, "Using in-memory state store.")
    return InMemoryStateStore()


__all__ = [
    "DATABASE_URL_ENV",
    "LOG_LEVEL_ENV",
    "STATE_DIR_ENV",
    "STATE_KEY_ENV",
    "Settings",
    "build_state_store",
    "load_settings",
]
