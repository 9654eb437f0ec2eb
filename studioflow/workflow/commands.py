"""Command vocabulary accepted by the workflow reducer.

Each command is an immutable value describing one user intent. Identifiers
always address entities inside the named channel; commands naming entities
that do not exist are absorbed by the reducer as no-ops.

Examples
--------
Queue a project on the first editor of a channel:

>>> command = AssignVideoGeneration(
...     channel_id=channel.id,
...     project_id=project.id,
...     editor_id=channel.editors[0].id,
... )
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from .domain import (
        Channel,
        Document,
        EditorStatus,
        EntityId,
        Language,
        ProjectStatus,
    )


@dc.dataclass(frozen=True, slots=True)
class FileUpload:
    """File payload supplied by the caller before an identifier is assigned.

    Attributes
    ----------
    name : str
        Original file name.
    media_type : str
        Media type of the payload.
    size : int
        Payload size in bytes.
    last_modified : int
        Modification time of the source file in epoch milliseconds.
    content : str
        ``data:`` URI carrying the base64 payload.
    """

    name: str
    media_type: str
    size: int
    last_modified: int
    content: str


@dc.dataclass(frozen=True, slots=True)
class LoadState:
    """Replace the whole document with an already-migrated one."""

    document: Document


@dc.dataclass(frozen=True, slots=True)
class AddChannel:
    """Create a channel with default settings and a fresh editor roster."""

    name: str
    niche: str
    sub_niche: str
    language: Language


@dc.dataclass(frozen=True, slots=True)
class UpdateChannel:
    """Replace a channel wholesale with a complete, caller-edited record."""

    channel: Channel


@dc.dataclass(frozen=True, slots=True)
class DeleteChannel:
    """Remove a channel together with everything it owns."""

    channel_id: EntityId


@dc.dataclass(frozen=True, slots=True)
class AddProject:
    """Start a project for a title and reserve the title."""

    channel_id: EntityId
    project_name: str
    title_id: EntityId


@dc.dataclass(frozen=True, slots=True)
class UpdateProjectStatus:
    """Override a project's status without transition checks."""

    channel_id: EntityId
    project_id: EntityId
    status: ProjectStatus


@dc.dataclass(frozen=True, slots=True)
class DeleteProject:
    """Remove a project and release its title."""

    channel_id: EntityId
    project_id: EntityId


@dc.dataclass(frozen=True, slots=True)
class AddTitles:
    """Append one available title per non-blank line."""

    channel_id: EntityId
    titles: tuple[str, ...]


@dc.dataclass(frozen=True, slots=True)
class UseTitleForProject:
    """Mark a title as used."""

    channel_id: EntityId
    title_id: EntityId


@dc.dataclass(frozen=True, slots=True)
class DeleteTitle:
    """Remove an available title."""

    channel_id: EntityId
    title_id: EntityId


@dc.dataclass(frozen=True, slots=True)
class UploadFile:
    """Attach a file to a project."""

    channel_id: EntityId
    project_id: EntityId
    file: FileUpload


@dc.dataclass(frozen=True, slots=True)
class DeleteFile:
    """Detach a file from a project."""

    channel_id: EntityId
    project_id: EntityId
    file_id: EntityId


@dc.dataclass(frozen=True, slots=True)
class AssignVideoGeneration:
    """Start or queue a project render on an editor."""

    channel_id: EntityId
    project_id: EntityId
    editor_id: EntityId


@dc.dataclass(frozen=True, slots=True)
class StopVideoGeneration:
    """Discard an editor's current render and advance its queue."""

    channel_id: EntityId
    editor_id: EntityId


@dc.dataclass(frozen=True, slots=True)
class UpdateEditorStatus:
    """Administrative override of an editor's status and current project."""

    channel_id: EntityId
    editor_id: EntityId
    status: EditorStatus
    current_project_id: EntityId | None = None


type Command = (
    LoadState
    | AddChannel
    | UpdateChannel
    | DeleteChannel
    | AddProject
    | UpdateProjectStatus
    | DeleteProject
    | AddTitles
    | UseTitleForProject
    | DeleteTitle
    | UploadFile
    | DeleteFile
    | AssignVideoGeneration
    | StopVideoGeneration
    | UpdateEditorStatus
)


__all__ = [
    "AddChannel",
    "AddProject",
    "AddTitles",
    "AssignVideoGeneration",
    "Command",
    "DeleteChannel",
    "DeleteFile",
    "DeleteProject",
    "DeleteTitle",
    "FileUpload",
    "LoadState",
    "StopVideoGeneration",
    "UpdateChannel",
    "UpdateEditorStatus",
    "UpdateProjectStatus",
    "UploadFile",
    "UseTitleForProject",
]
