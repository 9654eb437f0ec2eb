"""Ports for workflow document persistence.

The workflow document is stored as one opaque text blob under a fixed key.
Adapters only need whole-blob get and set semantics, so any durable
key-value store can back the engine.

Examples
--------
Implement a store that satisfies the protocol:

>>> class DictStateStore(StateStore):
...     async def load(self, key: str) -> str | None:
...         return self._blobs.get(key)
...
...     async def save(self, key: str, blob: str) -> None:
...         self._blobs[key] = blob
"""

from __future__ import annotations

import typing as typ


class StateStore(typ.Protocol):
    """Persistence interface for the serialized workflow document.

    Methods
    -------
    load(key)
        Fetch the blob stored under a key.
    save(key, blob)
        Replace the blob stored under a key.
    """

    async def load(self, key: str) -> str | None:
        """Fetch the blob stored under ``key``.

        Parameters
        ----------
        key : str
            Fixed storage key of the workflow document.

        Returns
        -------
        str | None
            The stored blob, or ``None`` when nothing has been saved yet.
        """
        ...

    async def save(self, key: str, blob: str) -> None:
        """Replace the blob stored under ``key``.

        Parameters
        ----------
        key : str
            Fixed storage key of the workflow document.
        blob : str
            Serialized document replacing any previous value.

        Returns
        -------
        None
        """
        ...


class StateStoreError(Exception):
    """Raised by state store adapters when the backing store fails."""


__all__ = ["StateStore", "StateStoreError"]
