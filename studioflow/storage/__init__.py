"""State store adapters for the workflow document.

This package provides the in-memory, file and SQLAlchemy implementations of
the :class:`~studioflow.workflow.ports.StateStore` port, plus the compression
helpers and ORM model they share.

Examples
--------
Persist a session to a directory:

>>> session = await open_session(FileStateStore(pathlib.Path("state")))
"""

from .compression import decode_blob_from_storage, encode_blob_for_storage
from .file_store import FileStateStore
from .memory import InMemoryStateStore
from .models import Base, StateBlobRecord
from .sqlalchemy_store import SqlAlchemyStateStore

__all__ = (
    "Base",
    "FileStateStore",
    "InMemoryStateStore",
    "SqlAlchemyStateStore",
    "StateBlobRecord",
    "decode_blob_from_storage",
    "encode_blob_for_storage",
)
