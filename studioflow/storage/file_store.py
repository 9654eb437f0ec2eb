"""Directory-backed state store adapter.

Each key maps to one file inside the store directory: ``<key>.json`` for
plain blobs or ``<key>.json.zst`` for blobs large enough to compress. Writes
go through a temporary file and an atomic rename, so a crash never leaves a
half-written document behind.

Examples
--------
Persist the workflow document under a data directory:

>>> store = FileStateStore(pathlib.Path("~/.studioflow").expanduser())
>>> await store.save("youtubeManagerAppState", blob)
"""

from __future__ import annotations

import asyncio
import os
import pathlib
import tempfile
import typing as typ

from studioflow.logging import get_logger, log_info
from studioflow.workflow.ports import StateStore, StateStoreError

from .compression import (
    MINIMUM_COMPRESS_BYTES,
    decompress_blob,
    encode_blob_for_storage,
)

logger = get_logger(__name__)

_PLAIN_SUFFIX = ".json"
_COMPRESSED_SUFFIX = ".json.zst"


def _validate_key(key: str) -> str:
    """Return ``key`` when it is safe to use as a file name.

    Raises
    ------
    StateStoreError
        If the key is empty, a relative path marker, or contains a separator.
    """
    if not key or key in {".", ".."} or any(sep in key for sep in ("/", "\\")):
        msg = f"State key {key!r} cannot be used as a file name."
        raise StateStoreError(msg)
    return key


def _write_atomically(target: pathlib.Path, data: bytes) -> None:
    """Write ``data`` to ``target`` via a temporary sibling file."""
    descriptor, temp_name = tempfile.mkstemp(
        dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(descriptor, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        pathlib.Path(temp_name).replace(target)
    except BaseException:
        pathlib.Path(temp_name).unlink(missing_ok=True)
        raise


class FileStateStore(StateStore):
    """State store writing one file per key under ``directory``.

    Parameters
    ----------
    directory : pathlib.Path
        Directory holding the blobs; created on first save.
    minimum_compress_bytes : int, optional
        Size threshold at or above which blobs are compressed.
    """

    def __init__(
        self,
        directory: pathlib.Path,
        *,
        minimum_compress_bytes: int = MINIMUM_COMPRESS_BYTES,
    ) -> None:
        self._directory = directory
        self._minimum_compress_bytes = minimum_compress_bytes

    @property
    def directory(self) -> pathlib.Path:
        """Return the directory holding the stored blobs."""
        return self._directory

    def _paths(self, key: str) -> tuple[pathlib.Path, pathlib.Path]:
        name = _validate_key(key)
        return (
            self._directory / f"{name}{_PLAIN_SUFFIX}",
            self._directory / f"{name}{_COMPRESSED_SUFFIX}",
        )

    def _load_sync(self, key: str) -> str | None:
        plain, compressed = self._paths(key)
        try:
            if compressed.exists():
                return decompress_blob(compressed.read_bytes(), field_name=str(compressed))
            if plain.exists():
                return plain.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Could not read state blob {key!r} from {self._directory}: {exc}"
            raise StateStoreError(msg) from exc
        return None

    def _save_sync(self, key: str, blob: str) -> None:
        plain, compressed = self._paths(key)
        text_value, compressed_value = encode_blob_for_storage(
            blob, minimum_bytes=self._minimum_compress_bytes
        )
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            if compressed_value is None:
                _write_atomically(plain, text_value.encode("utf-8"))
                compressed.unlink(missing_ok=True)
            else:
                _write_atomically(compressed, compressed_value)
                plain.unlink(missing_ok=True)
        except OSError as exc:
            msg = f"Could not write state blob {key!r} to {self._directory}: {exc}"
            raise StateStoreError(msg) from exc
        log_info(
            logger,
            "Saved state blob %s (%s).",
            key,
            "compressed" if compressed_value is not None else "plain",
        )

    @typ.override
    async def load(self, key: str) -> str | None:
        """Read the blob stored under ``key``.

        Raises
        ------
        StateStoreError
            If the key is not a valid file name or the file exists but
            cannot be read.
        ValueError
            If the compressed file is corrupt.
        """
        return await asyncio.to_thread(self._load_sync, key)

    @typ.override
    async def save(self, key: str, blob: str) -> None:
        """Atomically replace the blob stored under ``key``.

        Raises
        ------
        StateStoreError
            If the key is not a valid file name or the directory or file
            cannot be written.
        """
        await asyncio.to_thread(self._save_sync, key, blob)
