"""Behavioural tests for render editor assignment.

Examples
--------
Run the render assignment BDD scenarios:

>>> pytest tests/steps/test_render_assignment_steps.py -k render
"""

from __future__ import annotations

import typing as typ

import pytest
from _workflow_helpers import build_channel_document, make_context, only_channel
from pytest_bdd import given, parsers, scenario, then, when

from studioflow.workflow import (
    AddProject,
    AddTitles,
    AssignVideoGeneration,
    EditorStatus,
    ProjectStatus,
    StopVideoGeneration,
    WorkflowEngine,
    auto_assign,
)

if typ.TYPE_CHECKING:
    from studioflow.workflow import Channel


class AssignmentContext(typ.TypedDict, total=False):
    """Shared state for render assignment BDD steps."""

    engine: WorkflowEngine
    new_project_id: str


@scenario(
    "../features/render_assignment.feature",
    "Assigning to a free editor starts rendering",
)
def test_assign_to_free_editor() -> None:
    """Run the free-editor scenario."""


@scenario(
    "../features/render_assignment.feature",
    "Assigning to a busy editor queues the project",
)
def test_assign_to_busy_editor() -> None:
    """Run the busy-editor scenario."""


@scenario(
    "../features/render_assignment.feature",
    "Stopping an editor promotes the next queued project",
)
def test_stop_promotes_queue() -> None:
    """Run the queue promotion scenario."""


@scenario(
    "../features/render_assignment.feature",
    "Stopping an editor with an empty queue frees it",
)
def test_stop_frees_editor() -> None:
    """Run the editor release scenario."""


@scenario(
    "../features/render_assignment.feature",
    "Automatic assignment prefers the shortest queue",
)
def test_auto_assignment() -> None:
    """Run the automatic assignment scenario."""


@pytest.fixture
def assignment_context() -> AssignmentContext:
    """Share state between render assignment BDD steps."""
    return typ.cast("AssignmentContext", {})


def _channel(assignment_context: AssignmentContext) -> Channel:
    return only_channel(assignment_context["engine"].get_state())


@given(parsers.parse("a channel with {count:d} projects in planning"))
def channel_with_projects(assignment_context: AssignmentContext, count: int) -> None:
    """Create an engine holding one channel with planned projects."""
    context = make_context()
    document = build_channel_document(
        context,
        titles=tuple(f"Title {index}" for index in range(1, count + 1)),
        projects=count,
    )
    assignment_context["engine"] = WorkflowEngine(document, context=context)


@when(parsers.parse("project {project:d} is assigned to editor {editor:d}"))
def assign_project(
    assignment_context: AssignmentContext, project: int, editor: int
) -> None:
    """Assign a project to an editor by roster position."""
    channel = _channel(assignment_context)
    assignment_context["engine"].dispatch(
        AssignVideoGeneration(
            channel.id,
            channel.projects[project - 1].id,
            channel.editors[editor - 1].id,
        )
    )


@when(parsers.parse("editor {editor:d} is stopped"))
def stop_editor(assignment_context: AssignmentContext, editor: int) -> None:
    """Stop the editor at the given roster position."""
    channel = _channel(assignment_context)
    assignment_context["engine"].dispatch(
        StopVideoGeneration(channel.id, channel.editors[editor - 1].id)
    )


@when("a new project is assigned automatically")
def assign_new_project_automatically(assignment_context: AssignmentContext) -> None:
    """Create one more project and hand it to the selected editor."""
    engine = assignment_context["engine"]
    channel = _channel(assignment_context)
    engine.dispatch(AddTitles(channel.id, ("Title extra",)))
    title = _channel(assignment_context).titles[-1]
    engine.dispatch(AddProject(channel.id, "extra", title.id))
    project = _channel(assignment_context).projects[-1]
    command = auto_assign(_channel(assignment_context), project.id)
    assert command is not None, "Expected an editor to be selected."
    engine.dispatch(command)
    assignment_context["new_project_id"] = project.id


@then(parsers.parse("editor {editor:d} is busy rendering project {project:d}"))
def editor_is_rendering(
    assignment_context: AssignmentContext, editor: int, project: int
) -> None:
    """Assert the editor is busy with the given project."""
    channel = _channel(assignment_context)
    current = channel.editors[editor - 1]
    assert current.status is EditorStatus.BUSY, "Expected the editor to be busy."
    assert current.current_project_id == channel.projects[project - 1].id


@then(parsers.parse("editor {editor:d} has queued projects {projects}"))
def editor_has_queue(
    assignment_context: AssignmentContext, editor: int, projects: str
) -> None:
    """Assert the editor's queue order."""
    channel = _channel(assignment_context)
    expected = tuple(
        channel.projects[int(position) - 1].id for position in projects.split(",")
    )
    assert channel.editors[editor - 1].queue == expected


@then(parsers.parse("editor {editor:d} is free"))
def editor_is_free(assignment_context: AssignmentContext, editor: int) -> None:
    """Assert the editor has nothing to render."""
    current = _channel(assignment_context).editors[editor - 1]
    assert current.status is EditorStatus.FREE
    assert current.current_project_id is None


@then(parsers.parse('project {project:d} is "{status}"'))
def project_has_status(
    assignment_context: AssignmentContext, project: int, status: str
) -> None:
    """Assert the status of a project by position."""
    actual = _channel(assignment_context).projects[project - 1].status
    assert actual is ProjectStatus(status), f"Expected {status}, got {actual}."


@then("the new project is queued behind editor 2")
def new_project_queued_behind_second_editor(
    assignment_context: AssignmentContext,
) -> None:
    """Assert the automatically assigned project went to the second editor."""
    channel = _channel(assignment_context)
    new_project_id = assignment_context["new_project_id"]
    assert channel.editors[1].queue == (new_project_id,)
    assert channel.projects[-1].status is ProjectStatus.IN_QUEUE
