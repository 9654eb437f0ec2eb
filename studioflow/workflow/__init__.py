"""Workflow document, commands, reducer and engine.

This package holds the state-transition engine for content production:
channels own titles, projects and a fixed roster of render editors, and every
change flows through :func:`apply` as an immutable command.

Examples
--------
Drive the engine directly:

>>> engine = WorkflowEngine()
>>> engine.dispatch(AddChannel("Stories", "horror", "", Language.ENGLISH))
>>> channel = engine.get_state().channels[0]
>>> engine.dispatch(AddTitles(channel.id, ("The Attic", "The Well")))
"""

from .assignment import auto_assign, select_editor
from .commands import (
    AddChannel,
    AddProject,
    AddTitles,
    AssignVideoGeneration,
    Command,
    DeleteChannel,
    DeleteFile,
    DeleteProject,
    DeleteTitle,
    FileUpload,
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
from .engine import DEFAULT_STATE_KEY, WorkflowEngine, WorkflowSession, open_session
from .files import build_file_upload, decode_data_uri, encode_data_uri
from .migrations import LATEST_SCHEMA_VERSION, migrate_payload
from .ports import StateStore, StateStoreError
from .queries import PostingStatus, posting_status
from .reducer import ApplyContext, apply
from .serialization import (
    DocumentFormatError,
    document_from_payload,
    document_to_payload,
)

__all__: list[str] = [
    "DEFAULT_STATE_KEY",
    "LATEST_SCHEMA_VERSION",
    "AddChannel",
    "AddProject",
    "AddTitles",
    "ApplyContext",
    "AssignVideoGeneration",
    "Channel",
    "ChannelSettings",
    "Command",
    "DeleteChannel",
    "DeleteFile",
    "DeleteProject",
    "DeleteTitle",
    "Document",
    "DocumentFormatError",
    "Editor",
    "EditorStatus",
    "FileData",
    "FileUpload",
    "ImageSettings",
    "Language",
    "LoadState",
    "NarrationStyle",
    "PostingStatus",
    "Project",
    "ProjectStatus",
    "ScriptSettings",
    "StateStore",
    "StateStoreError",
    "StopVideoGeneration",
    "TitleStatus",
    "UpdateChannel",
    "UpdateEditorStatus",
    "UpdateProjectStatus",
    "UploadFile",
    "UseTitleForProject",
    "UsefulLink",
    "VideoEditor",
    "VideoSettings",
    "VideoTitle",
    "VoiceGender",
    "VoiceSettings",
    "WorkflowEngine",
    "WorkflowSession",
    "apply",
    "auto_assign",
    "build_file_upload",
    "decode_data_uri",
    "document_from_payload",
    "document_to_payload",
    "encode_data_uri",
    "migrate_payload",
    "open_session",
    "posting_status",
    "select_editor",
]
