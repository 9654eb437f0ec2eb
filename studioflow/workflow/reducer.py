"""State-transition engine for the workflow document.

:func:`apply` is a pure, total reducer: it never mutates its input, never
performs I/O and never raises for commands that address missing entities.
Such commands, and command types the reducer does not know, return the input
document object unchanged so callers can detect a no-op by identity.

Examples
--------
Create a channel and reserve a title for a project:

>>> document = apply(Document(), AddChannel("Stories", "horror", "", Language.ENGLISH))
>>> channel = document.channels[0]
>>> document = apply(document, AddTitles(channel.id, ("The Attic",)))
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import typing as typ

from studioflow.logging import get_logger, log_debug, log_info, log_warning

from .commands import (
    AddChannel,
    AddProject,
    AddTitles,
    AssignVideoGeneration,
    DeleteChannel,
    DeleteFile,
    DeleteProject,
    DeleteTitle,
    LoadState,
    StopVideoGeneration,
    UpdateChannel,
    UpdateEditorStatus,
    UpdateProjectStatus,
    UploadFile,
    UseTitleForProject,
)
from .domain import (
    Channel,
    Document,
    Editor,
    EditorStatus,
    EntityId,
    FileData,
    Project,
    ProjectStatus,
    TitleStatus,
    VideoTitle,
    default_editors,
    new_entity_id,
)

logger = get_logger(__name__)

NEW_CHANNEL_POST_LAG = dt.timedelta(days=2)


class _HasId(typ.Protocol):
    @property
    def id(self) -> EntityId: ...


_ItemT = typ.TypeVar("_ItemT", bound=_HasId)
_StatusT = typ.TypeVar("_StatusT", Project, VideoTitle)


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


@dc.dataclass(frozen=True, slots=True)
class ApplyContext:
    """Sources of time and identity used while applying commands.

    Attributes
    ----------
    now : collections.abc.Callable[[], datetime.datetime]
        Clock returning the current timezone-aware time.
    new_id : collections.abc.Callable[[], EntityId]
        Factory for identifiers of newly created entities.
    """

    now: cabc.Callable[[], dt.datetime] = _utc_now
    new_id: cabc.Callable[[], EntityId] = new_entity_id


DEFAULT_CONTEXT = ApplyContext()

type _DocumentHandler = cabc.Callable[[Document, typ.Any, ApplyContext], Document]
type _ChannelHandler = cabc.Callable[[Channel, typ.Any, ApplyContext], Channel]

_HANDLERS: dict[type, _DocumentHandler] = {}


def _handles(
    command_type: type,
) -> cabc.Callable[[_DocumentHandler], _DocumentHandler]:
    """Register a document-level handler for ``command_type``."""

    def register(handler: _DocumentHandler) -> _DocumentHandler:
        _HANDLERS[command_type] = handler
        return handler

    return register


def _handles_in_channel(
    command_type: type,
) -> cabc.Callable[[_ChannelHandler], _ChannelHandler]:
    """Register a handler that rewrites the channel named by the command."""

    def register(handler: _ChannelHandler) -> _ChannelHandler:
        def handle(
            document: Document, command: typ.Any, context: ApplyContext
        ) -> Document:
            return _update_channel(
                document,
                command.channel_id,
                lambda channel: handler(channel, command, context),
            )

        _HANDLERS[command_type] = handle
        return handler

    return register


def _find(items: tuple[_ItemT, ...], item_id: EntityId | None) -> _ItemT | None:
    return next((item for item in items if item.id == item_id), None)


def _replace_by_id(
    items: tuple[_ItemT, ...],
    item_id: EntityId | None,
    update: cabc.Callable[[_ItemT], _ItemT],
) -> tuple[_ItemT, ...]:
    """Return ``items`` with the matching item rewritten by ``update``.

    The original tuple is returned when no item matches or ``update`` returns
    the item it was given.
    """
    for index, item in enumerate(items):
        if item.id != item_id:
            continue
        updated = update(item)
        if updated is item:
            return items
        return (*items[:index], updated, *items[index + 1 :])
    return items


def _remove_by_id(
    items: tuple[_ItemT, ...], item_id: EntityId | None
) -> tuple[_ItemT, ...]:
    remaining = tuple(item for item in items if item.id != item_id)
    return items if len(remaining) == len(items) else remaining


def _update_channel(
    document: Document,
    channel_id: EntityId,
    update: cabc.Callable[[Channel], Channel],
) -> Document:
    channels = _replace_by_id(document.channels, channel_id, update)
    if channels is document.channels:
        return document
    return dc.replace(document, channels=channels)


def _with_status(item: _StatusT, status: typ.Any) -> _StatusT:
    if item.status == status:
        return item
    return dc.replace(item, status=status)


def _set_project_status(
    projects: tuple[Project, ...],
    project_id: EntityId | None,
    status: ProjectStatus,
) -> tuple[Project, ...]:
    return _replace_by_id(
        projects, project_id, lambda project: _with_status(project, status)
    )


def _set_title_status(
    titles: tuple[VideoTitle, ...],
    title_id: EntityId,
    status: TitleStatus,
) -> tuple[VideoTitle, ...]:
    return _replace_by_id(titles, title_id, lambda title: _with_status(title, status))


def _release_editor(editor: Editor) -> tuple[Editor, EntityId | None]:
    """Free ``editor`` from its current project, promoting the queue head.

    Returns the updated editor and the promoted project identifier, if any.
    A promoted editor keeps its status; an editor with an empty queue is
    marked free.
    """
    if editor.queue:
        head, *waiting = editor.queue
        return (dc.replace(editor, current_project_id=head, queue=tuple(waiting)), head)
    return (
        dc.replace(editor, status=EditorStatus.FREE, current_project_id=None),
        None,
    )


@_handles(LoadState)
def _load_state(
    document: Document, command: LoadState, context: ApplyContext
) -> Document:
    return command.document


@_handles(AddChannel)
def _add_channel(
    document: Document, command: AddChannel, context: ApplyContext
) -> Document:
    channel = Channel(
        id=context.new_id(),
        name=command.name,
        niche=command.niche,
        sub_niche=command.sub_niche,
        language=command.language,
        editors=default_editors(context.new_id),
        last_post_date=context.now().date() - NEW_CHANNEL_POST_LAG,
    )
    log_info(logger, "Created channel %s (%s).", channel.id, channel.name)
    return dc.replace(document, channels=(*document.channels, channel))


@_handles(UpdateChannel)
def _replace_channel(
    document: Document, command: UpdateChannel, context: ApplyContext
) -> Document:
    return _update_channel(document, command.channel.id, lambda _: command.channel)


@_handles(DeleteChannel)
def _delete_channel(
    document: Document, command: DeleteChannel, context: ApplyContext
) -> Document:
    channels = _remove_by_id(document.channels, command.channel_id)
    if channels is document.channels:
        return document
    return dc.replace(document, channels=channels)


@_handles_in_channel(AddProject)
def _add_project(channel: Channel, command: AddProject, context: ApplyContext) -> Channel:
    project = Project(
        id=context.new_id(),
        name=command.project_name,
        title_id=command.title_id,
        status=ProjectStatus.PLANNING,
        created_at=context.now(),
    )
    return dc.replace(
        channel,
        projects=(*channel.projects, project),
        titles=_set_title_status(
            channel.titles, command.title_id, TitleStatus.IN_PRODUCTION
        ),
    )


@_handles_in_channel(UpdateProjectStatus)
def _update_project_status(
    channel: Channel, command: UpdateProjectStatus, context: ApplyContext
) -> Channel:
    projects = _set_project_status(channel.projects, command.project_id, command.status)
    if projects is channel.projects:
        return channel
    return dc.replace(channel, projects=projects)


@_handles_in_channel(DeleteProject)
def _delete_project(
    channel: Channel, command: DeleteProject, context: ApplyContext
) -> Channel:
    project = _find(channel.projects, command.project_id)
    if project is None:
        return channel

    projects = _remove_by_id(channel.projects, project.id)
    editors: list[Editor] = []
    for editor in channel.editors:
        if editor.current_project_id == project.id:
            editor, promoted = _release_editor(editor)
            projects = _set_project_status(projects, promoted, ProjectStatus.EDITING)
        elif project.id in editor.queue:
            editor = dc.replace(
                editor, queue=tuple(pid for pid in editor.queue if pid != project.id)
            )
        editors.append(editor)

    return dc.replace(
        channel,
        projects=projects,
        titles=_set_title_status(channel.titles, project.title_id, TitleStatus.AVAILABLE),
        editors=tuple(editors),
    )


@_handles_in_channel(AddTitles)
def _add_titles(channel: Channel, command: AddTitles, context: ApplyContext) -> Channel:
    new_titles = tuple(
        VideoTitle(id=context.new_id(), text=line.strip())
        for line in command.titles
        if line.strip()
    )
    if not new_titles:
        return channel
    return dc.replace(channel, titles=(*channel.titles, *new_titles))


@_handles_in_channel(UseTitleForProject)
def _use_title(
    channel: Channel, command: UseTitleForProject, context: ApplyContext
) -> Channel:
    titles = _set_title_status(channel.titles, command.title_id, TitleStatus.USED)
    if titles is channel.titles:
        return channel
    return dc.replace(channel, titles=titles)


@_handles_in_channel(DeleteTitle)
def _delete_title(
    channel: Channel, command: DeleteTitle, context: ApplyContext
) -> Channel:
    title = _find(channel.titles, command.title_id)
    if title is None:
        return channel
    if title.status is not TitleStatus.AVAILABLE:
        log_warning(
            logger,
            "Refusing to delete title %s in channel %s while it is %s.",
            title.id,
            channel.id,
            title.status,
        )
        return channel
    return dc.replace(channel, titles=_remove_by_id(channel.titles, title.id))


@_handles_in_channel(UploadFile)
def _upload_file(channel: Channel, command: UploadFile, context: ApplyContext) -> Channel:
    upload = command.file

    def attach(project: Project) -> Project:
        stored = FileData(
            id=context.new_id(),
            name=upload.name,
            media_type=upload.media_type,
            size=upload.size,
            last_modified=upload.last_modified,
            content=upload.content,
        )
        return dc.replace(project, files=(*project.files, stored))

    projects = _replace_by_id(channel.projects, command.project_id, attach)
    if projects is channel.projects:
        return channel
    return dc.replace(channel, projects=projects)


@_handles_in_channel(DeleteFile)
def _delete_file(channel: Channel, command: DeleteFile, context: ApplyContext) -> Channel:
    def detach(project: Project) -> Project:
        files = _remove_by_id(project.files, command.file_id)
        return project if files is project.files else dc.replace(project, files=files)

    projects = _replace_by_id(channel.projects, command.project_id, detach)
    if projects is channel.projects:
        return channel
    return dc.replace(channel, projects=projects)


@_handles_in_channel(AssignVideoGeneration)
def _assign_video_generation(
    channel: Channel, command: AssignVideoGeneration, context: ApplyContext
) -> Channel:
    project = _find(channel.projects, command.project_id)
    editor = _find(channel.editors, command.editor_id)
    if project is None or editor is None or editor.holds(project.id):
        return channel

    if editor.is_free:
        updated_editor = dc.replace(
            editor, status=EditorStatus.BUSY, current_project_id=project.id
        )
        status = ProjectStatus.EDITING
    else:
        updated_editor = dc.replace(editor, queue=(*editor.queue, project.id))
        status = ProjectStatus.IN_QUEUE

    return dc.replace(
        channel,
        projects=_set_project_status(channel.projects, project.id, status),
        editors=_replace_by_id(channel.editors, editor.id, lambda _: updated_editor),
    )


@_handles_in_channel(StopVideoGeneration)
def _stop_video_generation(
    channel: Channel, command: StopVideoGeneration, context: ApplyContext
) -> Channel:
    editor = _find(channel.editors, command.editor_id)
    if editor is None or editor.current_project_id is None:
        return channel

    projects = _set_project_status(
        channel.projects, editor.current_project_id, ProjectStatus.PLANNING
    )
    updated_editor, promoted = _release_editor(editor)
    projects = _set_project_status(projects, promoted, ProjectStatus.EDITING)

    return dc.replace(
        channel,
        projects=projects,
        editors=_replace_by_id(channel.editors, editor.id, lambda _: updated_editor),
    )


@_handles_in_channel(UpdateEditorStatus)
def _update_editor_status(
    channel: Channel, command: UpdateEditorStatus, context: ApplyContext
) -> Channel:
    def override(editor: Editor) -> Editor:
        return dc.replace(
            editor,
            status=command.status,
            current_project_id=command.current_project_id or None,
        )

    editors = _replace_by_id(channel.editors, command.editor_id, override)
    if editors is channel.editors:
        return channel
    return dc.replace(channel, editors=editors)


def apply(
    document: Document,
    command: object,
    *,
    context: ApplyContext | None = None,
) -> Document:
    """Apply ``command`` to ``document`` and return the resulting document.

    Parameters
    ----------
    document : Document
        Current workflow document. It is never mutated.
    command : object
        Command value from :mod:`studioflow.workflow.commands`. Unknown
        command types are accepted and ignored.
    context : ApplyContext | None, optional
        Clock and identifier factory; defaults to UTC wall time and UUIDv7.

    Returns
    -------
    Document
        The new document, or ``document`` itself when the command addressed
        a missing entity, changed nothing, or is of an unknown type.
    """
    handler = _HANDLERS.get(type(command))
    if handler is None:
        log_debug(logger, "Ignoring unknown command %s.", type(command).__name__)
        return document

    result = handler(document, command, context or DEFAULT_CONTEXT)
    if result is document:
        log_debug(logger, "%s left the document unchanged.", type(command).__name__)
    return result


__all__ = ["DEFAULT_CONTEXT", "ApplyContext", "apply", "new_entity_id"]
