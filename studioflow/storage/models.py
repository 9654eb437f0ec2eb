"""SQLAlchemy ORM models for workflow state storage.

The workflow document is persisted as one row per storage key. Large
documents are kept compressed in ``payload_zstd`` with a sentinel in
``payload``.

Examples
--------
Use the base metadata to create the storage table:

>>> from sqlalchemy import create_engine
>>> engine = create_engine("sqlite:///studioflow.db")
>>> Base.metadata.create_all(engine)
"""

from __future__ import annotations

# SQLAlchemy evaluates annotations at runtime; keep stdlib types imported.
import datetime as dt  # noqa: TC003

import sqlalchemy as sa
from sqlalchemy import orm


class Base(orm.DeclarativeBase):
    """Base class for studioflow SQLAlchemy models.

    Notes
    -----
    Alembic and test scaffolding rely on ``Base.metadata`` when applying
    migrations or creating schema definitions.
    """


class StateBlobRecord(Base):
    """SQLAlchemy model for a stored workflow document blob.

    Attributes
    ----------
    key : str
        Storage key of the document.
    payload : str
        Serialized document, or the compression sentinel.
    payload_zstd : bytes | None
        Zstandard-compressed document when compression is used.
    updated_at : datetime.datetime
        Timestamp of the last save.
    """

    __tablename__ = "state_blobs"

    key: orm.Mapped[str] = orm.mapped_column(sa.String(160), primary_key=True)
    payload: orm.Mapped[str] = orm.mapped_column(sa.Text)
    payload_zstd: orm.Mapped[bytes | None] = orm.mapped_column(
        sa.LargeBinary, nullable=True
    )
    updated_at: orm.Mapped[dt.datetime] = orm.mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
    )
