"""Workflow engine and persistent session.

:class:`WorkflowEngine` owns the current document, applies commands through
the reducer and notifies subscribers when the document changes.
:class:`WorkflowSession` pairs an engine with a :class:`StateStore`: it loads
and migrates the stored document once, then persists the document after every
dispatched command. Storage failures never reach the document; they are
logged and the in-memory document stays authoritative.

Examples
--------
Open a session, create a channel and read it back:

>>> session = await open_session(InMemoryStateStore())
>>> await session.dispatch(AddChannel("Stories", "horror", "", Language.ENGLISH))
>>> session.engine.get_state().channels[0].name
'Stories'
"""

from __future__ import annotations

import json
import typing as typ

from studioflow.logging import get_logger, log_error, log_info

from .commands import LoadState
from .domain import Document
from .migrations import migrate_payload
from .ports import StateStoreError
from .reducer import DEFAULT_CONTEXT, apply
from .serialization import document_from_payload, document_to_payload

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .ports import StateStore
    from .reducer import ApplyContext

logger = get_logger(__name__)

DEFAULT_STATE_KEY = "youtubeManagerAppState"

type Observer = cabc.Callable[[Document], None]


class WorkflowEngine:
    """In-memory owner of the workflow document.

    Parameters
    ----------
    document : Document | None, optional
        Initial document; defaults to an empty document.
    context : ApplyContext | None, optional
        Clock and identifier factory passed to every command.
    """

    def __init__(
        self,
        document: Document | None = None,
        *,
        context: ApplyContext | None = None,
    ) -> None:
        self._document = document if document is not None else Document()
        self._context = context or DEFAULT_CONTEXT
        self._observers: list[Observer] = []

    @property
    def context(self) -> ApplyContext:
        """Return the apply context used for every command."""
        return self._context

    def get_state(self) -> Document:
        """Return the current document."""
        return self._document

    def subscribe(self, observer: Observer) -> cabc.Callable[[], None]:
        """Call ``observer`` with each new document until unsubscribed.

        Returns
        -------
        collections.abc.Callable[[], None]
            Function that removes the subscription; calling it twice is safe.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def dispatch(self, command: object) -> Document:
        """Apply ``command`` and return the resulting document.

        Subscribers are notified only when the command changed the document.
        """
        updated = apply(self._document, command, context=self._context)
        if updated is self._document:
            return updated
        self._document = updated
        for observer in tuple(self._observers):
            observer(updated)
        return updated


def _decode_document(blob: str, context: ApplyContext) -> Document:
    payload = json.loads(blob)
    if not isinstance(payload, dict):
        msg = "Stored workflow document must be a JSON object."
        raise ValueError(msg)
    migrated = migrate_payload(
        typ.cast("dict[str, object]", payload), new_id=context.new_id
    )
    return document_from_payload(migrated)


class WorkflowSession:
    """Engine bound to a state store under a fixed key.

    Parameters
    ----------
    engine : WorkflowEngine
        Engine that owns the in-memory document.
    store : StateStore
        Blob store used to load and persist the document.
    key : str, optional
        Storage key of the document.
    """

    def __init__(
        self,
        engine: WorkflowEngine,
        store: StateStore,
        *,
        key: str = DEFAULT_STATE_KEY,
    ) -> None:
        self._engine = engine
        self._store = store
        self._key = key

    @property
    def engine(self) -> WorkflowEngine:
        """Return the engine driven by this session."""
        return self._engine

    async def load(self) -> bool:
        """Load, migrate and install the stored document.

        Returns
        -------
        bool
            ``True`` when a stored document was installed. ``False`` when
            nothing was stored or loading failed; the engine then keeps its
            current document.
        """
        try:
            blob = await self._store.load(self._key)
            if blob is None:
                log_info(logger, "No stored workflow document under %s.", self._key)
                return False
            document = _decode_document(blob, self._engine.context)
        except (StateStoreError, ValueError) as exc:
            log_error(
                logger,
                "Failed to load workflow document %s: %s",
                self._key,
                exc,
                exc_info=exc,
            )
            return False

        self._engine.dispatch(LoadState(document))
        log_info(
            logger,
            "Loaded workflow document %s with %s channel(s).",
            self._key,
            len(document.channels),
        )
        return True

    async def save(self) -> bool:
        """Persist the current document, returning whether the save succeeded."""
        blob = json.dumps(document_to_payload(self._engine.get_state()))
        try:
            await self._store.save(self._key, blob)
        except StateStoreError as exc:
            log_error(
                logger,
                "Failed to save workflow document %s: %s",
                self._key,
                exc,
                exc_info=exc,
            )
            return False
        return True

    async def dispatch(self, command: object) -> Document:
        """Apply ``command`` through the engine and persist the result."""
        document = self._engine.dispatch(command)
        await self.save()
        return document


async def open_session(
    store: StateStore,
    *,
    key: str = DEFAULT_STATE_KEY,
    context: ApplyContext | None = None,
) -> WorkflowSession:
    """Create a session over ``store`` and load its stored document."""
    session = WorkflowSession(WorkflowEngine(context=context), store, key=key)
    await session.load()
    return session


__all__ = [
    "DEFAULT_STATE_KEY",
    "Observer",
    "WorkflowEngine",
    "WorkflowSession",
    "open_session",
]
