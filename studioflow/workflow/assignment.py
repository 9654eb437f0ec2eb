"""Automatic editor selection for render assignment.

The reducer only knows how to start or queue a project on a named editor.
This module chooses that editor: the first free editor in channel order, or,
when every editor is busy, the one with the shortest queue (earliest editor
wins ties).

Examples
--------
Build the assignment command for a project:

>>> command = auto_assign(channel, project.id)
>>> document = apply(document, command) if command else document
"""

from __future__ import annotations

import typing as typ

from .commands import AssignVideoGeneration

if typ.TYPE_CHECKING:
    from .domain import Channel, Editor, EntityId


def select_editor(channel: Channel) -> Editor | None:
    """Return the editor that should receive the next project.

    Parameters
    ----------
    channel : Channel
        Channel whose editor roster is searched.

    Returns
    -------
    Editor | None
        The first free editor, otherwise the busy editor with the shortest
        queue, or ``None`` when the channel has no editors.
    """
    free_editor = next((editor for editor in channel.editors if editor.is_free), None)
    if free_editor is not None:
        return free_editor
    # min() keeps the first of equally short queues.
    return min(channel.editors, key=lambda editor: len(editor.queue), default=None)


def auto_assign(channel: Channel, project_id: EntityId) -> AssignVideoGeneration | None:
    """Build an assignment command for ``project_id`` on the selected editor.

    Returns ``None`` when the channel has no editor to receive the project.
    """
    editor = select_editor(channel)
    if editor is None:
        return None
    return AssignVideoGeneration(
        channel_id=channel.id,
        project_id=project_id,
        editor_id=editor.id,
    )


__all__ = ["auto_assign", "select_editor"]
