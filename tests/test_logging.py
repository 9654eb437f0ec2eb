"""Unit tests for the femtologging helpers."""

from __future__ import annotations

import pytest

from studioflow.logging import (
    LogLevel,
    log_debug,
    log_error,
    log_info,
    log_warning,
    normalise_level,
)


class _RecordingLogger:
    """Logger double capturing emitted records."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, object | None]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> None:
        self.records.append((level, message, exc_info))


@pytest.mark.parametrize(
    ("requested", "expected"),
    [
        ("debug", (LogLevel.DEBUG, False)),
        (" Error ", (LogLevel.ERROR, False)),
        (None, (LogLevel.INFO, True)),
        ("", (LogLevel.INFO, True)),
        ("chatty", (LogLevel.INFO, True)),
    ],
)
def test_normalise_level(
    requested: str | None, expected: tuple[LogLevel, bool]
) -> None:
    """Level names are case-insensitive and unknown names use the default."""
    assert normalise_level(requested) == expected


def test_normalise_level_maps_deprecated_warn() -> None:
    """WARN is accepted as a deprecated alias of WARNING."""
    with pytest.deprecated_call():
        assert normalise_level("WARN") == (LogLevel.WARNING, False)


def test_log_helpers_format_templates_lazily() -> None:
    """Each helper formats its template and tags the record with its level."""
    logger = _RecordingLogger()
    failure = RuntimeError("disk full")

    log_debug(logger, "Ignoring %s.", "Ping")
    log_info(logger, "Loaded %s channel(s).", 2)
    log_warning(logger, "Plain message with 100% literal")
    log_error(logger, "Failed to save %s: %s", "state", failure, exc_info=failure)

    assert logger.records == [
        (LogLevel.DEBUG, "Ignoring Ping.", None),
        (LogLevel.INFO, "Loaded 2 channel(s).", None),
        (LogLevel.WARNING, "Plain message with 100% literal", None),
        (LogLevel.ERROR, "Failed to save state: disk full", failure),
    ]


def test_log_helpers_reject_mismatched_arguments() -> None:
    """Templates that do not match their arguments raise TypeError."""
    with pytest.raises(TypeError):
        log_info(_RecordingLogger(), "%s and %s", "only one")
