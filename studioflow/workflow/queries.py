"""Read-side helpers for presenting the workflow document.

These functions never change the document; they answer the questions a
presentation layer asks while rendering channels, titles, and projects.
"""

from __future__ import annotations

import enum
import typing as typ

from .domain import TitleStatus

if typ.TYPE_CHECKING:
    import datetime as dt

    from .domain import Channel, Document, Editor, EntityId, Project, VideoTitle


class PostingStatus(enum.StrEnum):
    """Publishing cadence bucket derived from a channel's last post date."""

    AHEAD = "ahead"
    ON_TIME = "on_time"
    LATE = "late"


def find_channel(document: Document, channel_id: EntityId) -> Channel | None:
    """Return the channel with ``channel_id``, if present."""
    return next((c for c in document.channels if c.id == channel_id), None)


def find_project(channel: Channel, project_id: EntityId) -> Project | None:
    """Return the project with ``project_id`` in ``channel``, if present."""
    return next((p for p in channel.projects if p.id == project_id), None)


def find_title(channel: Channel, title_id: EntityId) -> VideoTitle | None:
    """Return the title with ``title_id`` in ``channel``, if present."""
    return next((t for t in channel.titles if t.id == title_id), None)


def find_editor(channel: Channel, editor_id: EntityId) -> Editor | None:
    """Return the editor with ``editor_id`` in ``channel``, if present."""
    return next((e for e in channel.editors if e.id == editor_id), None)


def available_titles(channel: Channel) -> list[VideoTitle]:
    """Return the titles a new project may be created for."""
    return [title for title in channel.titles if title.status is TitleStatus.AVAILABLE]


def projects_newest_first(channel: Channel) -> list[Project]:
    """Return the channel's projects ordered by creation time, newest first."""
    return sorted(channel.projects, key=lambda project: project.created_at, reverse=True)


def editor_for_project(channel: Channel, project_id: EntityId) -> Editor | None:
    """Return the editor rendering or queueing ``project_id``, if any."""
    return next((e for e in channel.editors if e.holds(project_id)), None)


def posting_status(channel: Channel, today: dt.date) -> PostingStatus:
    """Classify a channel's publishing cadence relative to ``today``.

    Parameters
    ----------
    channel : Channel
        Channel whose ``last_post_date`` is inspected.
    today : datetime.date
        Reference calendar date.

    Returns
    -------
    PostingStatus
        ``AHEAD`` when the last post is today or scheduled later, ``ON_TIME``
        when it was yesterday, and ``LATE`` when it is older or missing.
    """
    if channel.last_post_date is None:
        return PostingStatus.LATE
    days_since_post = (today - channel.last_post_date).days
    if days_since_post <= 0:
        return PostingStatus.AHEAD
    if days_since_post == 1:
        return PostingStatus.ON_TIME
    return PostingStatus.LATE


__all__ = [
    "PostingStatus",
    "available_titles",
    "editor_for_project",
    "find_channel",
    "find_editor",
    "find_project",
    "find_title",
    "posting_status",
    "projects_newest_first",
]
