"""Versioned migrations for persisted workflow documents.

Stored documents are upgraded by an ordered pipeline of pure JSON-to-JSON
steps before the engine accepts them. Each step is idempotent, carries a
version number, and runs only when the stored ``schemaVersion`` is older than
that number. Documents written before versioning existed have no stamp and
run every step.

Examples
--------
Upgrade a payload read from storage:

>>> migrated = migrate_payload(json.loads(blob))
>>> migrated["schemaVersion"] == LATEST_SCHEMA_VERSION
True
"""

from __future__ import annotations

import collections.abc as cabc
import copy
import dataclasses as dc
import typing as typ

from studioflow.logging import get_logger, log_info, log_warning

from .domain import (
    EDITOR_ROSTER_SIZE,
    EditorStatus,
    LabelledEnum,
    Language,
    NarrationStyle,
    ProjectStatus,
    TitleStatus,
    VideoEditor,
    VoiceGender,
    new_entity_id,
)

if typ.TYPE_CHECKING:
    from .domain import EntityId, JsonMapping

logger = get_logger(__name__)

SCHEMA_VERSION_KEY = "schemaVersion"
_LEGACY_EDITOR_TASK_KEY = "currentTask"


@dc.dataclass(frozen=True, slots=True)
class Migration:
    """One ordered step of the document migration pipeline.

    Attributes
    ----------
    version : int
        Schema version the document reaches after this step.
    name : str
        Short description used in logs.
    upgrade : collections.abc.Callable[[JsonMapping, collections.abc.Callable[[], EntityId]], JsonMapping]
        Pure transform receiving the payload and an identifier factory.
    """

    version: int
    name: str
    upgrade: cabc.Callable[[JsonMapping, cabc.Callable[[], EntityId]], JsonMapping]


def _list_of_dicts(container: JsonMapping, key: str) -> list[JsonMapping]:
    """Return the mappings held under ``key``, ignoring malformed entries.

    Shapes that are not lists are left for the parser to reject.
    """
    items = container.get(key)
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def _channels(payload: JsonMapping) -> list[JsonMapping]:
    return _list_of_dicts(payload, "channels")


def _editors(channel: JsonMapping) -> list[JsonMapping]:
    return _list_of_dicts(channel, "editors")


def _add_missing_editors(
    payload: JsonMapping, new_id: cabc.Callable[[], EntityId]
) -> JsonMapping:
    """Give every channel without an editor list the default free roster."""
    for channel in _channels(payload):
        if isinstance(channel.get("editors"), list):
            continue
        channel["editors"] = [
            {
                "id": new_id(),
                "name": f"Editor {position}",
                "status": EditorStatus.FREE.value,
                "currentProjectId": None,
                "queue": [],
            }
            for position in range(1, EDITOR_ROSTER_SIZE + 1)
        ]
        log_warning(logger, "Added default editors to channel %s.", channel.get("id"))
    return payload


def _drop_legacy_editor_task(
    payload: JsonMapping, new_id: cabc.Callable[[], EntityId]
) -> JsonMapping:
    """Replace the legacy ``currentTask`` field with an empty assignment."""
    for channel in _channels(payload):
        for editor in _editors(channel):
            if not isinstance(editor.get("queue"), list):
                editor["queue"] = []
            if _LEGACY_EDITOR_TASK_KEY in editor:
                del editor[_LEGACY_EDITOR_TASK_KEY]
                editor["currentProjectId"] = None
                log_warning(
                    logger,
                    "Cleared legacy task assignment on editor %s.",
                    editor.get("id"),
                )
            editor.setdefault("currentProjectId", None)
    return payload


def _default_settings() -> JsonMapping:
    return {
        "script": {
            "wordsPerPart": 300,
            "videoDuration": 10,
            "country": "Brasil",
            "narrationStyle": NarrationStyle.FIRST_PERSON.value,
            "voiceGender": VoiceGender.MALE.value,
            "notes": "",
        },
        "image": {
            "protagonistInfo": "",
            "environment": "",
            "style": "",
            "framing": "",
            "variations": 4,
            "useStoryScenes": True,
            "sceneCount": 10,
        },
        "voice": {"notes": ""},
        "video": {"useOverlay": False, "editor": VideoEditor.CAPCUT.value},
    }


def _fill_channel_defaults(
    payload: JsonMapping, new_id: cabc.Callable[[], EntityId]
) -> JsonMapping:
    """Fill channel fields that older documents may omit."""
    for channel in _channels(payload):
        channel.setdefault("subNiche", "")
        channel.setdefault("generalInfo", "")
        channel.setdefault("usefulLinks", [])
        channel.setdefault("titles", [])
        channel.setdefault("projects", [])
        channel.setdefault("lastPostDate", None)
        for project in _list_of_dicts(channel, "projects"):
            project.setdefault("files", [])
        defaults = _default_settings()
        settings = channel.get("settings")
        if not isinstance(settings, dict):
            channel["settings"] = defaults
            continue
        for group, values in defaults.items():
            existing = settings.get(group)
            if not isinstance(existing, dict):
                settings[group] = values
                continue
            for key, value in typ.cast("JsonMapping", values).items():
                existing.setdefault(key, value)
    return payload


def _normalise(container: JsonMapping, key: str, enum_cls: type[LabelledEnum]) -> None:
    value = container.get(key)
    if not isinstance(value, str):
        return
    member = enum_cls.from_label(value)
    if member is not None:
        container[key] = member.value


def _normalise_enum_labels(
    payload: JsonMapping, new_id: cabc.Callable[[], EntityId]
) -> JsonMapping:
    """Rewrite display labels stored by the browser application as enum values."""
    for channel in _channels(payload):
        _normalise(channel, "language", Language)
        settings = channel.get("settings")
        if isinstance(settings, dict):
            script = settings.get("script")
            if isinstance(script, dict):
                _normalise(script, "narrationStyle", NarrationStyle)
                _normalise(script, "voiceGender", VoiceGender)
            video = settings.get("video")
            if isinstance(video, dict):
                _normalise(video, "editor", VideoEditor)
        for title in _list_of_dicts(channel, "titles"):
            _normalise(title, "status", TitleStatus)
        for project in _list_of_dicts(channel, "projects"):
            _normalise(project, "status", ProjectStatus)
        for editor in _editors(channel):
            _normalise(editor, "status", EditorStatus)
    return payload


MIGRATIONS: tuple[Migration, ...] = (
    Migration(1, "add missing editors", _add_missing_editors),
    Migration(2, "drop legacy editor task", _drop_legacy_editor_task),
    Migration(3, "fill channel defaults", _fill_channel_defaults),
    Migration(4, "normalise enum labels", _normalise_enum_labels),
)
LATEST_SCHEMA_VERSION = MIGRATIONS[-1].version


def stored_version(payload: JsonMapping) -> int:
    """Return the schema version stamped on ``payload`` (0 when absent)."""
    version = payload.get(SCHEMA_VERSION_KEY)
    if isinstance(version, int) and not isinstance(version, bool):
        return version
    return 0


def migrate_payload(
    payload: JsonMapping,
    *,
    new_id: cabc.Callable[[], EntityId] | None = None,
    migrations: cabc.Sequence[Migration] = MIGRATIONS,
) -> JsonMapping:
    """Run pending migrations over a decoded document payload.

    Parameters
    ----------
    payload : JsonMapping
        Decoded JSON object read from storage. It is not modified.
    new_id : collections.abc.Callable[[], EntityId] | None, optional
        Identifier factory for entities synthesised by a migration; defaults
        to UUIDv7 strings.
    migrations : collections.abc.Sequence[Migration], optional
        Ordered pipeline to run; defaults to :data:`MIGRATIONS`.

    Returns
    -------
    JsonMapping
        A migrated copy stamped with the version of the last step. Migrating
        the result again returns an equal payload.
    """
    factory = new_id or new_entity_id
    current = stored_version(payload)
    migrated = copy.deepcopy(payload)
    for migration in migrations:
        if migration.version <= current:
            continue
        migrated = migration.upgrade(migrated, factory)
        log_info(
            logger,
            "Applied document migration %s (%s).",
            migration.version,
            migration.name,
        )
        current = migration.version
    migrated[SCHEMA_VERSION_KEY] = current
    return migrated


__all__ = [
    "LATEST_SCHEMA_VERSION",
    "MIGRATIONS",
    "SCHEMA_VERSION_KEY",
    "Migration",
    "migrate_payload",
    "stored_version",
]
