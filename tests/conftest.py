"""Pytest fixtures for studioflow tests.

Database-backed fixtures use an aiosqlite file database migrated with the
project's Alembic scripts.

Examples
--------
Run the storage tests only:

>>> pytest tests/test_state_stores.py -v
"""

from __future__ import annotations

import typing as typ

import pytest
import pytest_asyncio
from _workflow_helpers import build_channel_document, make_context

from studioflow.storage.alembic_helpers import apply_migrations

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

    from studioflow.workflow import ApplyContext, Document


@pytest.fixture
def context() -> ApplyContext:
    """Provide an apply context with a frozen clock and sequential ids."""
    return make_context()


@pytest.fixture
def channel_document(context: ApplyContext) -> Document:
    """Provide a document with one channel and three available titles."""
    return build_channel_document(context)


@pytest.fixture
def project_document(context: ApplyContext) -> Document:
    """Provide a document with one channel and three projects in planning."""
    return build_channel_document(context, projects=3)


@pytest_asyncio.fixture
async def migrated_engine(tmp_path: Path) -> cabc.AsyncIterator[AsyncEngine]:
    """Yield an aiosqlite engine with Alembic migrations applied."""
    from sqlalchemy.ext.asyncio import create_async_engine

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'studioflow.db'}")
    try:
        await apply_migrations(engine)
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(
    migrated_engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Yield an async session factory bound to the migrated engine."""
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(
        migrated_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
