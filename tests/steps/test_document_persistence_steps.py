"""Behavioural tests for workflow document persistence.

Examples
--------
Run the persistence BDD scenarios:

>>> pytest tests/steps/test_document_persistence_steps.py -k persistence
"""

from __future__ import annotations

import json
import typing as typ

import pytest
from _workflow_helpers import make_context, only_channel
from pytest_bdd import given, parsers, scenario, then, when

from studioflow.storage import FileStateStore
from studioflow.workflow import (
    DEFAULT_STATE_KEY,
    AddChannel,
    AddTitles,
    EditorStatus,
    Language,
    open_session,
)

if typ.TYPE_CHECKING:
    import asyncio
    import collections.abc as cabc
    from pathlib import Path

    from studioflow.workflow import WorkflowSession


class PersistenceContext(typ.TypedDict, total=False):
    """Shared state for persistence BDD steps."""

    store: FileStateStore
    session: WorkflowSession


def _run_async_step(
    runner: asyncio.Runner,
    step_fn: cabc.Callable[[], typ.Awaitable[None]],
) -> None:
    """Execute an async BDD step via the provided runner."""
    coro = typ.cast("typ.Coroutine[object, object, None]", step_fn())
    runner.run(coro)


@scenario(
    "../features/document_persistence.feature",
    "A saved document is restored by a new session",
)
def test_saved_document_is_restored() -> None:
    """Run the save-and-restore scenario."""


@scenario(
    "../features/document_persistence.feature",
    "A legacy document is migrated on load",
)
def test_legacy_document_is_migrated() -> None:
    """Run the legacy migration scenario."""


@scenario(
    "../features/document_persistence.feature",
    "A corrupt document leaves the session empty",
)
def test_corrupt_document_is_ignored() -> None:
    """Run the corrupt document scenario."""


@pytest.fixture
def persistence_context() -> PersistenceContext:
    """Share state between persistence BDD steps."""
    return typ.cast("PersistenceContext", {})


def _write_blob(directory: Path, blob: str) -> FileStateStore:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / f"{DEFAULT_STATE_KEY}.json").write_text(blob, encoding="utf-8")
    return FileStateStore(directory)


@given("an empty file state store")
def empty_store(tmp_path: Path, persistence_context: PersistenceContext) -> None:
    """Create a file store over an empty directory."""
    persistence_context["store"] = FileStateStore(tmp_path / "state")


@given("a file state store holding a legacy document without editors")
def legacy_store(tmp_path: Path, persistence_context: PersistenceContext) -> None:
    """Write a document saved before editors and versioning existed."""
    legacy = {
        "channels": [
            {
                "id": "c1",
                "name": "Old Stories",
                "niche": "horror",
                "language": "Inglês",
                "titles": [{"id": "t1", "text": "The Attic", "status": "Disponível"}],
            }
        ]
    }
    persistence_context["store"] = _write_blob(tmp_path / "state", json.dumps(legacy))


@given(parsers.parse('a file state store holding "{blob}"'))
def raw_store(
    tmp_path: Path, persistence_context: PersistenceContext, blob: str
) -> None:
    """Write an arbitrary blob under the default key."""
    persistence_context["store"] = _write_blob(tmp_path / "state", blob)


@when(parsers.parse('a session creates the channel "{name}" with {count:d} titles'))
def create_channel(
    _function_scoped_runner: asyncio.Runner,
    persistence_context: PersistenceContext,
    name: str,
    count: int,
) -> None:
    """Open a session and add a channel with numbered titles."""

    async def _create() -> None:
        session = await open_session(
            persistence_context["store"], context=make_context()
        )
        await session.dispatch(AddChannel(name, "horror", "", Language.ENGLISH))
        channel = only_channel(session.engine.get_state())
        titles = tuple(f"Title {index}" for index in range(1, count + 1))
        await session.dispatch(AddTitles(channel.id, titles))

    _run_async_step(_function_scoped_runner, _create)


@when("a new session is opened on the same store")
def reopen_session(
    _function_scoped_runner: asyncio.Runner,
    persistence_context: PersistenceContext,
) -> None:
    """Open a fresh session that loads the stored document."""

    async def _open() -> None:
        persistence_context["session"] = await open_session(
            persistence_context["store"], context=make_context(prefix="restored")
        )

    _run_async_step(_function_scoped_runner, _open)


@then(
    parsers.parse(
        'the restored document has the channel "{name}" with {count:d} titles'
    )
)
def restored_channel(
    persistence_context: PersistenceContext, name: str, count: int
) -> None:
    """Assert the restored channel and its titles."""
    channel = only_channel(persistence_context["session"].engine.get_state())
    assert channel.name == name
    assert len(channel.titles) == count, "Expected every title to be restored."


@then(parsers.parse("every restored channel has {count:d} free editors"))
def restored_editors(persistence_context: PersistenceContext, count: int) -> None:
    """Assert each restored channel received the default editor roster."""
    document = persistence_context["session"].engine.get_state()
    for channel in document.channels:
        assert len(channel.editors) == count
        assert all(editor.status is EditorStatus.FREE for editor in channel.editors)


@then(parsers.parse('the restored channel language is "{language}"'))
def restored_language(persistence_context: PersistenceContext, language: str) -> None:
    """Assert the migrated language value."""
    channel = only_channel(persistence_context["session"].engine.get_state())
    assert channel.language is Language(language)


@then("the restored document has no channels")
def restored_nothing(persistence_context: PersistenceContext) -> None:
    """Assert nothing was installed from a corrupt blob."""
    assert persistence_context["session"].engine.get_state().channels == ()
