"""Domain models for the content-production workflow document.

The whole application state is one immutable :class:`Document`. Every
collection is a tuple so a command can only change the document by building a
new one with :func:`dataclasses.replace`.
"""

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import enum
import typing as typ
import uuid

type EntityId = str
type JsonMapping = dict[str, object]

EDITOR_ROSTER_SIZE = 2


class LabelledEnum(enum.StrEnum):
    """String enum whose members carry a human-facing display label."""

    @property
    def label(self) -> str:
        """Return the display label shown to channel operators."""
        return _LABELS.get(self, self.value)

    @classmethod
    def from_label(cls, label: str) -> typ.Self | None:
        """Return the member whose value or display label equals ``label``."""
        for member in cls:
            if label in {member.value, member.label}:
                return member
        return None


class Language(LabelledEnum):
    """Narration language of a channel."""

    PORTUGUESE = "portuguese"
    ENGLISH = "english"
    SPANISH = "spanish"
    CROATIAN = "croatian"


class NarrationStyle(LabelledEnum):
    """Grammatical person used by a channel's scripts."""

    FIRST_PERSON = "first_person"
    THIRD_PERSON = "third_person"


class VoiceGender(LabelledEnum):
    """Voice used for narration."""

    MALE = "male"
    FEMALE = "female"


class VideoEditor(LabelledEnum):
    """Tool used to assemble the final video."""

    CAPCUT = "capcut"
    GOOGLE_TTS = "google_tts"


class TitleStatus(LabelledEnum):
    """Lifecycle states for candidate video titles."""

    AVAILABLE = "available"
    IN_PRODUCTION = "in_production"
    USED = "used"


class ProjectStatus(LabelledEnum):
    """Lifecycle states for video projects."""

    PLANNING = "planning"
    SCRIPTING = "scripting"
    RECORDING = "recording"
    IN_QUEUE = "in_queue"
    EDITING = "editing"
    COMPLETED = "completed"
    PUBLISHED = "published"


class EditorStatus(LabelledEnum):
    """Occupancy of a render-capacity slot."""

    FREE = "free"
    BUSY = "busy"


_LABELS: dict[enum.StrEnum, str] = {
    Language.PORTUGUESE: "Português",
    Language.ENGLISH: "Inglês",
    Language.SPANISH: "Espanhol",
    Language.CROATIAN: "Croata",
    NarrationStyle.FIRST_PERSON: "1ª Pessoa",
    NarrationStyle.THIRD_PERSON: "3ª Pessoa",
    VoiceGender.MALE: "Masculino",
    VoiceGender.FEMALE: "Feminino",
    VideoEditor.CAPCUT: "CapCut",
    VideoEditor.GOOGLE_TTS: "Google TTS",
    TitleStatus.AVAILABLE: "Disponível",
    TitleStatus.IN_PRODUCTION: "Em Produção",
    TitleStatus.USED: "Usado",
    ProjectStatus.PLANNING: "Planejamento",
    ProjectStatus.SCRIPTING: "Roteirizando",
    ProjectStatus.RECORDING: "Gravando",
    ProjectStatus.IN_QUEUE: "Na Fila",
    ProjectStatus.EDITING: "Em Edição",
    ProjectStatus.COMPLETED: "Concluído",
    ProjectStatus.PUBLISHED: "Publicado",
    EditorStatus.FREE: "Livre",
    EditorStatus.BUSY: "Ocupado",
}


@dc.dataclass(frozen=True, slots=True)
class UsefulLink:
    """Reference link kept in a channel's notes."""

    id: EntityId
    url: str


@dc.dataclass(frozen=True, slots=True)
class ScriptSettings:
    """Script-writing parameters for a channel.

    Attributes
    ----------
    words_per_part : int
        Target word count for each script part.
    video_duration : int
        Target video length in minutes.
    country : str
        Audience country used for cultural references.
    narration_style : NarrationStyle
        Grammatical person of the narration.
    voice_gender : VoiceGender
        Narrator voice.
    notes : str
        Free-form script guidance.
    """

    words_per_part: int = 300
    video_duration: int = 10
    country: str = "Brasil"
    narration_style: NarrationStyle = NarrationStyle.FIRST_PERSON
    voice_gender: VoiceGender = VoiceGender.MALE
    notes: str = ""


@dc.dataclass(frozen=True, slots=True)
class ImageSettings:
    """Image-generation parameters for a channel."""

    protagonist_info: str = ""
    environment: str = ""
    style: str = ""
    framing: str = ""
    variations: int = 4
    use_story_scenes: bool = True
    scene_count: int = 10


@dc.dataclass(frozen=True, slots=True)
class VoiceSettings:
    """Voice-over guidance for a channel."""

    notes: str = ""


@dc.dataclass(frozen=True, slots=True)
class VideoSettings:
    """Video assembly parameters for a channel."""

    use_overlay: bool = False
    editor: VideoEditor = VideoEditor.CAPCUT


@dc.dataclass(frozen=True, slots=True)
class ChannelSettings:
    """Descriptive production configuration grouped by production stage."""

    script: ScriptSettings = dc.field(default_factory=ScriptSettings)
    image: ImageSettings = dc.field(default_factory=ImageSettings)
    voice: VoiceSettings = dc.field(default_factory=VoiceSettings)
    video: VideoSettings = dc.field(default_factory=VideoSettings)


@dc.dataclass(frozen=True, slots=True)
class VideoTitle:
    """Candidate title tracked from availability through use."""

    id: EntityId
    text: str
    status: TitleStatus = TitleStatus.AVAILABLE


@dc.dataclass(frozen=True, slots=True)
class FileData:
    """File attached to a project.

    Attributes
    ----------
    id : EntityId
        Identifier unique within the document.
    name : str
        Original file name.
    media_type : str
        Media type of the payload, serialized as ``type``.
    size : int
        Payload size in bytes.
    last_modified : int
        Modification time of the source file in epoch milliseconds.
    content : str
        Self-describing ``data:`` URI holding the base64 payload.
    """

    id: EntityId
    name: str
    media_type: str
    size: int
    last_modified: int
    content: str


@dc.dataclass(frozen=True, slots=True)
class Project:
    """Production record for one video, bound to exactly one title."""

    id: EntityId
    name: str
    title_id: EntityId
    status: ProjectStatus
    created_at: dt.datetime
    files: tuple[FileData, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class Editor:
    """Simulated render slot with one active project and a FIFO queue.

    Attributes
    ----------
    id : EntityId
        Identifier unique within the document.
    name : str
        Display name such as ``"Editor 1"``.
    status : EditorStatus
        ``BUSY`` exactly when ``current_project_id`` is set, unless an
        administrative override has been applied.
    current_project_id : EntityId | None
        Project currently being rendered.
    queue : tuple[EntityId, ...]
        Project identifiers waiting for this editor, head first.
    """

    id: EntityId
    name: str
    status: EditorStatus = EditorStatus.FREE
    current_project_id: EntityId | None = None
    queue: tuple[EntityId, ...] = ()

    @property
    def is_free(self) -> bool:
        """Return True when the editor can start a project immediately."""
        return self.status is EditorStatus.FREE

    def holds(self, project_id: EntityId) -> bool:
        """Return True when ``project_id`` is current or queued here."""
        return project_id == self.current_project_id or project_id in self.queue


@dc.dataclass(frozen=True, slots=True)
class Channel:
    """Content-production unit owning titles, projects, and editors."""

    id: EntityId
    name: str
    niche: str
    sub_niche: str
    language: Language
    general_info: str = ""
    useful_links: tuple[UsefulLink, ...] = ()
    settings: ChannelSettings = dc.field(default_factory=ChannelSettings)
    titles: tuple[VideoTitle, ...] = ()
    projects: tuple[Project, ...] = ()
    editors: tuple[Editor, ...] = ()
    last_post_date: dt.date | None = None


@dc.dataclass(frozen=True, slots=True)
class Document:
    """Root of the persisted application state."""

    channels: tuple[Channel, ...] = ()


def default_editors(new_id: cabc.Callable[[], EntityId]) -> tuple[Editor, ...]:
    """Build the fixed roster of free editors created with every channel."""
    return tuple(
        Editor(id=new_id(), name=f"Editor {position}")
        for position in range(1, EDITOR_ROSTER_SIZE + 1)
    )


def new_entity_id() -> EntityId:
    """Create a fresh, time-ordered document identifier."""
    return str(uuid.uuid7())
