"""SQLAlchemy state store adapter.

This adapter keeps the workflow document in the ``state_blobs`` table created
by the Alembic migrations. Each call opens its own session and commits before
returning, so a save either replaces the whole blob or leaves the previous
one in place.

Examples
--------
Store the document in a database:

>>> engine = create_async_engine("sqlite+aiosqlite:///studioflow.db")
>>> await apply_migrations(engine)
>>> store = SqlAlchemyStateStore(async_sessionmaker(engine, expire_on_commit=False))
>>> await store.save("youtubeManagerAppState", blob)
"""

from __future__ import annotations

import datetime as dt
import typing as typ

import sqlalchemy.exc as sa_exc

from studioflow.logging import get_logger, log_info
from studioflow.workflow.ports import StateStore, StateStoreError

from .compression import (
    MINIMUM_COMPRESS_BYTES,
    decode_blob_from_storage,
    encode_blob_for_storage,
)
from .models import StateBlobRecord

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


class SqlAlchemyStateStore(StateStore):
    """State store backed by async SQLAlchemy sessions.

    Parameters
    ----------
    session_factory : collections.abc.Callable[[], AsyncSession]
        Factory that produces a new async session for each operation.
    minimum_compress_bytes : int, optional
        Size threshold at or above which blobs are stored compressed.
    """

    def __init__(
        self,
        session_factory: cabc.Callable[[], AsyncSession],
        *,
        minimum_compress_bytes: int = MINIMUM_COMPRESS_BYTES,
    ) -> None:
        self._session_factory = session_factory
        self._minimum_compress_bytes = minimum_compress_bytes

    @typ.override
    async def load(self, key: str) -> str | None:
        """Fetch the blob stored under ``key``.

        Raises
        ------
        StateStoreError
            If the database cannot be queried.
        ValueError
            If the stored compression metadata is inconsistent.
        """
        try:
            async with self._session_factory() as session:
                record = await session.get(StateBlobRecord, key)
        except sa_exc.SQLAlchemyError as exc:
            msg = f"Could not read state blob {key!r}: {exc}"
            raise StateStoreError(msg) from exc
        if record is None:
            return None
        return decode_blob_from_storage(
            text_value=record.payload,
            compressed_value=record.payload_zstd,
            field_name=f"state_blobs.{key}",
        )

    @typ.override
    async def save(self, key: str, blob: str) -> None:
        """Insert or replace the blob stored under ``key``.

        Raises
        ------
        StateStoreError
            If the transaction fails; the previous blob is kept.
        """
        text_value, compressed_value = encode_blob_for_storage(
            blob, minimum_bytes=self._minimum_compress_bytes
        )
        now = dt.datetime.now(dt.UTC)
        try:
            async with self._session_factory() as session:
                record = await session.get(StateBlobRecord, key)
                if record is None:
                    session.add(
                        StateBlobRecord(
                            key=key,
                            payload=text_value,
                            payload_zstd=compressed_value,
                            updated_at=now,
                        )
                    )
                else:
                    record.payload = text_value
                    record.payload_zstd = compressed_value
                    record.updated_at = now
                await session.commit()
        except sa_exc.SQLAlchemyError as exc:
            msg = f"Could not write state blob {key!r}: {exc}"
            raise StateStoreError(msg) from exc
        log_info(logger, "Saved state blob %s to the database.", key)
