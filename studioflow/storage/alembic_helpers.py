"""Shared Alembic configuration and migration helpers.

The state store table is managed by Alembic. Application start-up code and
test fixtures both use :func:`apply_migrations` to bring a database to the
latest schema before a :class:`SqlAlchemyStateStore` touches it.

Examples
--------
Apply all migrations to an async engine:

>>> await apply_migrations(engine)
"""

import pathlib
import typing as typ

from alembic.config import Config

from alembic import command

if typ.TYPE_CHECKING:
    from sqlalchemy.engine import Connection
    from sqlalchemy.ext.asyncio import AsyncEngine

_PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[2]


def alembic_config(database_url: str) -> Config:
    """Create an Alembic configuration pointing at the project root.

    Parameters
    ----------
    database_url : str
        Database connection URL. Percent characters are escaped for
        ConfigParser compatibility.

    Returns
    -------
    Config
        A configured Alembic ``Config`` instance.
    """
    cfg = Config(str(_PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(_PROJECT_ROOT / "alembic"))
    safe_url = database_url.replace("%", "%%")
    cfg.set_main_option("sqlalchemy.url", safe_url)
    return cfg


def _run_migrations(connection: Connection, cfg: Config) -> None:
    """Apply all Alembic migrations inside a sync context."""
    cfg.attributes["connection"] = connection
    command.upgrade(cfg, "head")


async def apply_migrations(engine: AsyncEngine) -> None:
    """Apply all Alembic migrations against *engine*.

    Parameters
    ----------
    engine : AsyncEngine
        An async SQLAlchemy engine to migrate.
    """
    cfg = alembic_config(engine.url.render_as_string(hide_password=False))
    async with engine.begin() as connection:
        await connection.run_sync(_run_migrations, cfg)
