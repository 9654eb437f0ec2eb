"""Unit tests for render editor assignment and editor selection."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from _workflow_helpers import only_channel

from studioflow.workflow import (
    AssignVideoGeneration,
    EditorStatus,
    ProjectStatus,
    StopVideoGeneration,
    UpdateChannel,
    UpdateEditorStatus,
    apply,
    auto_assign,
    select_editor,
)

if typ.TYPE_CHECKING:
    from studioflow.workflow import Channel, Document


def _assign(document: Document, project_index: int, editor_index: int) -> Document:
    channel = only_channel(document)
    return apply(
        document,
        AssignVideoGeneration(
            channel.id,
            channel.projects[project_index].id,
            channel.editors[editor_index].id,
        ),
    )


def _statuses(channel: Channel) -> list[ProjectStatus]:
    return [project.status for project in channel.projects]


def test_assign_to_free_editor_starts_editing(project_document: Document) -> None:
    """A free editor starts rendering the project immediately."""
    document = _assign(project_document, 0, 0)

    channel = only_channel(document)
    editor = channel.editors[0]
    assert editor.status is EditorStatus.BUSY
    assert editor.current_project_id == channel.projects[0].id
    assert editor.queue == ()
    assert _statuses(channel)[0] is ProjectStatus.EDITING


def test_assign_to_busy_editor_queues_project(project_document: Document) -> None:
    """A busy editor queues additional projects in arrival order."""
    document = _assign(project_document, 0, 0)
    document = _assign(document, 1, 0)
    document = _assign(document, 2, 0)

    channel = only_channel(document)
    editor = channel.editors[0]
    assert editor.current_project_id == channel.projects[0].id
    assert editor.queue == (channel.projects[1].id, channel.projects[2].id)
    assert _statuses(channel) == [
        ProjectStatus.EDITING,
        ProjectStatus.IN_QUEUE,
        ProjectStatus.IN_QUEUE,
    ]


def test_assign_already_held_project_is_noop(project_document: Document) -> None:
    """Reassigning a project the editor already holds changes nothing."""
    current = _assign(project_document, 0, 0)
    queued = _assign(current, 1, 0)

    assert _assign(current, 0, 0) is current
    assert _assign(queued, 1, 0) is queued


def test_assign_with_unknown_ids_is_noop(project_document: Document) -> None:
    """Unknown channel, project or editor identifiers are ignored."""
    channel = only_channel(project_document)
    project_id = channel.projects[0].id
    editor_id = channel.editors[0].id

    for command in (
        AssignVideoGeneration("missing", project_id, editor_id),
        AssignVideoGeneration(channel.id, "missing", editor_id),
        AssignVideoGeneration(channel.id, project_id, "missing"),
    ):
        assert apply(project_document, command) is project_document, (
            f"Expected {command!r} to leave the document unchanged."
        )


def test_stop_promotes_queue_head(project_document: Document) -> None:
    """Stopping returns the current project to planning and starts the next."""
    document = _assign(project_document, 0, 0)
    document = _assign(document, 1, 0)
    document = _assign(document, 2, 0)
    channel = only_channel(document)

    document = apply(document, StopVideoGeneration(channel.id, channel.editors[0].id))

    channel = only_channel(document)
    editor = channel.editors[0]
    assert editor.status is EditorStatus.BUSY
    assert editor.current_project_id == channel.projects[1].id
    assert editor.queue == (channel.projects[2].id,)
    assert _statuses(channel) == [
        ProjectStatus.PLANNING,
        ProjectStatus.EDITING,
        ProjectStatus.IN_QUEUE,
    ]


def test_stop_with_empty_queue_frees_editor(project_document: Document) -> None:
    """An editor with an empty queue becomes free when stopped."""
    document = _assign(project_document, 0, 1)
    channel = only_channel(document)

    document = apply(document, StopVideoGeneration(channel.id, channel.editors[1].id))

    channel = only_channel(document)
    editor = channel.editors[1]
    assert editor.status is EditorStatus.FREE
    assert editor.current_project_id is None
    assert _statuses(channel)[0] is ProjectStatus.PLANNING


def test_stop_idle_editor_is_noop(project_document: Document) -> None:
    """Stopping an editor with no current project changes nothing."""
    channel = only_channel(project_document)

    document = apply(
        project_document, StopVideoGeneration(channel.id, channel.editors[0].id)
    )

    assert document is project_document


def test_update_editor_status_overrides_without_checks(
    project_document: Document,
) -> None:
    """UpdateEditorStatus sets status and current project verbatim."""
    channel = only_channel(project_document)
    editor = channel.editors[0]

    document = apply(
        project_document,
        UpdateEditorStatus(channel.id, editor.id, EditorStatus.BUSY, "ghost"),
    )

    updated = only_channel(document)
    overridden = updated.editors[0]
    assert overridden.status is EditorStatus.BUSY
    assert overridden.current_project_id == "ghost"
    assert updated.projects == channel.projects, (
        "Expected the override to leave projects untouched."
    )


def test_update_editor_status_clears_current_project(
    project_document: Document,
) -> None:
    """An empty project id clears the editor's current project."""
    document = _assign(project_document, 0, 0)
    channel = only_channel(document)
    editor = channel.editors[0]

    document = apply(
        document, UpdateEditorStatus(channel.id, editor.id, EditorStatus.FREE, "")
    )

    cleared = only_channel(document).editors[0]
    assert cleared.status is EditorStatus.FREE
    assert cleared.current_project_id is None


def test_select_editor_prefers_first_free(project_document: Document) -> None:
    """The first free editor in roster order is selected."""
    document = _assign(project_document, 0, 0)
    channel = only_channel(document)

    assert select_editor(channel) is channel.editors[1]


def test_select_editor_picks_shortest_queue(project_document: Document) -> None:
    """With every editor busy, the shortest queue wins."""
    document = _assign(project_document, 0, 0)
    document = _assign(document, 1, 1)
    document = _assign(document, 2, 0)
    channel = only_channel(document)

    assert select_editor(channel) is channel.editors[1]


def test_select_editor_breaks_ties_by_roster_order(
    project_document: Document,
) -> None:
    """Equal queues resolve to the earlier editor."""
    document = _assign(project_document, 0, 0)
    document = _assign(document, 1, 1)
    channel = only_channel(document)

    assert select_editor(channel) is channel.editors[0]


def test_select_editor_without_editors_returns_none(
    project_document: Document,
) -> None:
    """Channels with an empty roster have no editor to select."""
    channel = dc.replace(only_channel(project_document), editors=())

    assert select_editor(channel) is None
    assert auto_assign(channel, channel.projects[0].id) is None


def test_auto_assign_builds_command_for_selected_editor(
    project_document: Document,
) -> None:
    """auto_assign targets the selected editor and can be applied directly."""
    document = _assign(project_document, 0, 0)
    channel = only_channel(document)
    project = channel.projects[1]

    command = auto_assign(channel, project.id)

    assert command == AssignVideoGeneration(
        channel.id, project.id, channel.editors[1].id
    )
    assert command is not None
    document = apply(document, command)
    assert only_channel(document).editors[1].current_project_id == project.id


def test_editor_roster_can_be_replaced_through_update_channel(
    project_document: Document,
) -> None:
    """A channel update may change the roster; assignment follows it."""
    channel = only_channel(project_document)
    solo = dc.replace(channel, editors=channel.editors[:1])
    document = apply(project_document, UpdateChannel(solo))

    document = _assign(document, 0, 0)
    document = _assign(document, 1, 0)

    editor = only_channel(document).editors[0]
    assert editor.queue == (channel.projects[1].id,)
