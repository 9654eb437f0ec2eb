"""In-memory state store adapter."""

from __future__ import annotations

import typing as typ

from studioflow.workflow.ports import StateStore


class InMemoryStateStore(StateStore):
    """State store keeping blobs in a dictionary for the process lifetime.

    Parameters
    ----------
    blobs : dict[str, str] | None, optional
        Initial blobs keyed by storage key.
    """

    def __init__(self, blobs: dict[str, str] | None = None) -> None:
        self.blobs: dict[str, str] = dict(blobs or {})

    @typ.override
    async def load(self, key: str) -> str | None:
        """Return the blob stored under ``key``."""
        return self.blobs.get(key)

    @typ.override
    async def save(self, key: str, blob: str) -> None:
        """Store ``blob`` under ``key``."""
        self.blobs[key] = blob
