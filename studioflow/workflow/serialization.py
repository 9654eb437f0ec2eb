"""JSON mapping for the workflow document.

The persisted blob keeps the camelCase field names of the original browser
application so existing exports load without conversion. Parsing validates
shape and enum values and reports the offending path on failure.

Examples
--------
Round-trip a document through its JSON payload:

>>> payload = document_to_payload(document)
>>> document_from_payload(payload) == document
True
"""

from __future__ import annotations

import datetime as dt
import enum
import typing as typ

from .domain import (
    Channel,
    ChannelSettings,
    Document,
    Editor,
    EditorStatus,
    FileData,
    ImageSettings,
    Language,
    NarrationStyle,
    Project,
    ProjectStatus,
    ScriptSettings,
    TitleStatus,
    UsefulLink,
    VideoEditor,
    VideoSettings,
    VideoTitle,
    VoiceGender,
    VoiceSettings,
)
from .migrations import LATEST_SCHEMA_VERSION, SCHEMA_VERSION_KEY

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .domain import JsonMapping

_EnumT = typ.TypeVar("_EnumT", bound=enum.StrEnum)
_ValueT = typ.TypeVar("_ValueT")


class DocumentFormatError(ValueError):
    """Raised when a payload cannot be parsed into a workflow document."""


def _settings_to_payload(settings: ChannelSettings) -> JsonMapping:
    script, image = settings.script, settings.image
    return {
        "script": {
            "wordsPerPart": script.words_per_part,
            "videoDuration": script.video_duration,
            "country": script.country,
            "narrationStyle": script.narration_style.value,
            "voiceGender": script.voice_gender.value,
            "notes": script.notes,
        },
        "image": {
            "protagonistInfo": image.protagonist_info,
            "environment": image.environment,
            "style": image.style,
            "framing": image.framing,
            "variations": image.variations,
            "useStoryScenes": image.use_story_scenes,
            "sceneCount": image.scene_count,
        },
        "voice": {"notes": settings.voice.notes},
        "video": {
            "useOverlay": settings.video.use_overlay,
            "editor": settings.video.editor.value,
        },
    }


def _file_to_payload(file: FileData) -> JsonMapping:
    return {
        "id": file.id,
        "name": file.name,
        "type": file.media_type,
        "size": file.size,
        "lastModified": file.last_modified,
        "content": file.content,
    }


def _project_to_payload(project: Project) -> JsonMapping:
    return {
        "id": project.id,
        "name": project.name,
        "titleId": project.title_id,
        "status": project.status.value,
        "createdAt": project.created_at.isoformat(),
        "files": [_file_to_payload(file) for file in project.files],
    }


def _editor_to_payload(editor: Editor) -> JsonMapping:
    return {
        "id": editor.id,
        "name": editor.name,
        "status": editor.status.value,
        "currentProjectId": editor.current_project_id,
        "queue": list(editor.queue),
    }


def channel_to_payload(channel: Channel) -> JsonMapping:
    """Serialize one channel to its JSON mapping."""
    return {
        "id": channel.id,
        "name": channel.name,
        "niche": channel.niche,
        "subNiche": channel.sub_niche,
        "language": channel.language.value,
        "generalInfo": channel.general_info,
        "usefulLinks": [{"id": link.id, "url": link.url} for link in channel.useful_links],
        "settings": _settings_to_payload(channel.settings),
        "titles": [
            {"id": title.id, "text": title.text, "status": title.status.value}
            for title in channel.titles
        ],
        "projects": [_project_to_payload(project) for project in channel.projects],
        "editors": [_editor_to_payload(editor) for editor in channel.editors],
        "lastPostDate": (
            channel.last_post_date.isoformat() if channel.last_post_date else None
        ),
    }


def document_to_payload(document: Document) -> JsonMapping:
    """Serialize a document to a JSON-compatible mapping.

    The mapping is stamped with the latest migration version so loading it
    again skips every migration step.
    """
    return {
        SCHEMA_VERSION_KEY: LATEST_SCHEMA_VERSION,
        "channels": [channel_to_payload(channel) for channel in document.channels],
    }


def _fail(path: str, expectation: str) -> typ.NoReturn:
    msg = f"Invalid workflow document at {path}: expected {expectation}."
    raise DocumentFormatError(msg)


def _mapping(value: object, path: str) -> JsonMapping:
    if not isinstance(value, dict):
        _fail(path, "an object")
    return typ.cast("JsonMapping", value)


def _list(value: object, path: str) -> list[object]:
    if not isinstance(value, list):
        _fail(path, "an array")
    return typ.cast("list[object]", value)


def _field(
    payload: JsonMapping,
    key: str,
    kind: type[_ValueT] | tuple[type, ...],
    path: str,
) -> _ValueT:
    value = payload.get(key)
    kinds = kind if isinstance(kind, tuple) else (kind,)
    # bool is an int subclass; never accept it where a number is required.
    if not isinstance(value, kinds) or (isinstance(value, bool) and bool not in kinds):
        _fail(f"{path}.{key}", f"a value of type {kind}")
    return typ.cast("_ValueT", value)


def _optional_str(payload: JsonMapping, key: str, path: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        _fail(f"{path}.{key}", "a string or null")
    return value


def _enum(enum_cls: type[_EnumT], value: object, path: str) -> _EnumT:
    try:
        return enum_cls(value)
    except ValueError:
        _fail(path, f"one of {[member.value for member in enum_cls]}")


def _items(
    payload: JsonMapping,
    key: str,
    path: str,
    parse: cabc.Callable[[JsonMapping, str], _ValueT],
) -> tuple[_ValueT, ...]:
    values = _list(payload.get(key), f"{path}.{key}")
    return tuple(
        parse(_mapping(item, f"{path}.{key}[{index}]"), f"{path}.{key}[{index}]")
        for index, item in enumerate(values)
    )


def _settings_from_payload(payload: JsonMapping, path: str) -> ChannelSettings:
    script = _mapping(payload.get("script"), f"{path}.script")
    image = _mapping(payload.get("image"), f"{path}.image")
    voice = _mapping(payload.get("voice"), f"{path}.voice")
    video = _mapping(payload.get("video"), f"{path}.video")
    return ChannelSettings(
        script=ScriptSettings(
            words_per_part=_field(script, "wordsPerPart", int, f"{path}.script"),
            video_duration=_field(script, "videoDuration", int, f"{path}.script"),
            country=_field(script, "country", str, f"{path}.script"),
            narration_style=_enum(
                NarrationStyle,
                script.get("narrationStyle"),
                f"{path}.script.narrationStyle",
            ),
            voice_gender=_enum(
                VoiceGender, script.get("voiceGender"), f"{path}.script.voiceGender"
            ),
            notes=_field(script, "notes", str, f"{path}.script"),
        ),
        image=ImageSettings(
            protagonist_info=_field(image, "protagonistInfo", str, f"{path}.image"),
            environment=_field(image, "environment", str, f"{path}.image"),
            style=_field(image, "style", str, f"{path}.image"),
            framing=_field(image, "framing", str, f"{path}.image"),
            variations=_field(image, "variations", int, f"{path}.image"),
            use_story_scenes=_field(image, "useStoryScenes", bool, f"{path}.image"),
            scene_count=_field(image, "sceneCount", int, f"{path}.image"),
        ),
        voice=VoiceSettings(notes=_field(voice, "notes", str, f"{path}.voice")),
        video=VideoSettings(
            use_overlay=_field(video, "useOverlay", bool, f"{path}.video"),
            editor=_enum(VideoEditor, video.get("editor"), f"{path}.video.editor"),
        ),
    )


def _link_from_payload(payload: JsonMapping, path: str) -> UsefulLink:
    return UsefulLink(
        id=_field(payload, "id", str, path),
        url=_field(payload, "url", str, path),
    )


def _title_from_payload(payload: JsonMapping, path: str) -> VideoTitle:
    return VideoTitle(
        id=_field(payload, "id", str, path),
        text=_field(payload, "text", str, path),
        status=_enum(TitleStatus, payload.get("status"), f"{path}.status"),
    )


def _file_from_payload(payload: JsonMapping, path: str) -> FileData:
    return FileData(
        id=_field(payload, "id", str, path),
        name=_field(payload, "name", str, path),
        media_type=_field(payload, "type", str, path),
        size=_field(payload, "size", int, path),
        last_modified=int(_field(payload, "lastModified", (int, float), path)),
        content=_field(payload, "content", str, path),
    )


def _timestamp(value: str, path: str) -> dt.datetime:
    try:
        parsed = dt.datetime.fromisoformat(value)
    except ValueError:
        _fail(path, "an ISO 8601 timestamp")
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=dt.UTC)


def _project_from_payload(payload: JsonMapping, path: str) -> Project:
    return Project(
        id=_field(payload, "id", str, path),
        name=_field(payload, "name", str, path),
        title_id=_field(payload, "titleId", str, path),
        status=_enum(ProjectStatus, payload.get("status"), f"{path}.status"),
        created_at=_timestamp(
            _field(payload, "createdAt", str, path), f"{path}.createdAt"
        ),
        files=_items(payload, "files", path, _file_from_payload),
    )


def _editor_from_payload(payload: JsonMapping, path: str) -> Editor:
    queue = _list(payload.get("queue"), f"{path}.queue")
    if not all(isinstance(project_id, str) for project_id in queue):
        _fail(f"{path}.queue", "an array of project identifiers")
    return Editor(
        id=_field(payload, "id", str, path),
        name=_field(payload, "name", str, path),
        status=_enum(EditorStatus, payload.get("status"), f"{path}.status"),
        current_project_id=_optional_str(payload, "currentProjectId", path),
        queue=tuple(typ.cast("list[str]", queue)),
    )


def _post_date(payload: JsonMapping, path: str) -> dt.date | None:
    raw = _optional_str(payload, "lastPostDate", path)
    if not raw:
        return None
    try:
        return dt.date.fromisoformat(raw)
    except ValueError:
        _fail(f"{path}.lastPostDate", "a YYYY-MM-DD date")


def channel_from_payload(payload: JsonMapping, path: str = "channel") -> Channel:
    """Parse one channel from its JSON mapping.

    Raises
    ------
    DocumentFormatError
        If a field is missing, has the wrong type, or holds an unknown enum
        value.
    """
    return Channel(
        id=_field(payload, "id", str, path),
        name=_field(payload, "name", str, path),
        niche=_field(payload, "niche", str, path),
        sub_niche=_field(payload, "subNiche", str, path),
        language=_enum(Language, payload.get("language"), f"{path}.language"),
        general_info=_field(payload, "generalInfo", str, path),
        useful_links=_items(payload, "usefulLinks", path, _link_from_payload),
        settings=_settings_from_payload(
            _mapping(payload.get("settings"), f"{path}.settings"), f"{path}.settings"
        ),
        titles=_items(payload, "titles", path, _title_from_payload),
        projects=_items(payload, "projects", path, _project_from_payload),
        editors=_items(payload, "editors", path, _editor_from_payload),
        last_post_date=_post_date(payload, path),
    )


def document_from_payload(payload: object) -> Document:
    """Parse a migrated JSON payload into a :class:`Document`.

    Parameters
    ----------
    payload : object
        Decoded JSON value, normally produced by
        :func:`studioflow.workflow.migrations.migrate_payload`.

    Returns
    -------
    Document
        The parsed document.

    Raises
    ------
    DocumentFormatError
        If the payload does not describe a valid document.
    """
    root = _mapping(payload, "$")
    return Document(channels=_items(root, "channels", "$", channel_from_payload))


__all__ = [
    "DocumentFormatError",
    "channel_from_payload",
    "channel_to_payload",
    "document_from_payload",
    "document_to_payload",
]
