"""femtologging helpers shared by the studioflow packages.

The reducer logs skipped commands at debug level, the migration pipeline and
stores log progress at info, repaired legacy data and refused deletes are
warnings, and persistence failures are errors carrying the caught exception.
Templates use percent placeholders and are formatted once per record.

Examples
--------
Configure logging from the environment and report a load:

>>> configure_logging(load_settings().log_level)
>>> log_info(get_logger(__name__), "Loaded %s channel(s).", 3)
"""

from __future__ import annotations

import enum
import typing as typ
import warnings

from femtologging import basicConfig, get_logger


class LogLevel(enum.StrEnum):
    """Level names accepted by ``STUDIOFLOW_LOG_LEVEL``.

    ``WARN`` is kept only as a deprecated spelling of ``WARNING``.
    """

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def normalise_level(level: str | None) -> tuple[LogLevel, bool]:
    """Return the effective level for ``level`` and whether it was defaulted.

    Names are matched case-insensitively after stripping whitespace. Missing
    or unknown names fall back to ``INFO``; ``WARN`` maps to ``WARNING`` with
    a ``DeprecationWarning``.
    """
    requested = level.strip().upper() if level else None
    if not requested or requested not in LogLevel.__members__:
        return (LogLevel.INFO, True)
    normalised = LogLevel(requested)
    if normalised is LogLevel.WARN:
        warnings.warn(
            "LogLevel.WARN is deprecated; use LogLevel.WARNING instead.",
            DeprecationWarning,
            stacklevel=3,
        )
        normalised = LogLevel.WARNING
    return (normalised, False)


def configure_logging(level: str | None, *, force: bool = False) -> tuple[str, bool]:
    """Install the root femtologging configuration for a studioflow process.

    Returns the effective level and whether the requested one was replaced by
    the default.
    """
    normalised, used_default = normalise_level(level)
    basicConfig(level=normalised, force=force)
    return (normalised, used_default)


class _SupportsLog(typ.Protocol):
    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> None: ...


def _emit(
    logger: _SupportsLog,
    level: LogLevel,
    template: str,
    args: tuple[object, ...],
    exc_info: object | None,
) -> None:
    # Templates without arguments may contain literal percent signs.
    message = template % args if args else template
    logger.log(level, message, exc_info=exc_info, stack_info=False)


def log_debug(logger: _SupportsLog, template: str, *args: object) -> None:
    """Emit a DEBUG record, used for commands that left the document alone."""
    _emit(logger, LogLevel.DEBUG, template, args, None)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Emit an INFO record.

    Raises
    ------
    TypeError
        If ``args`` do not fit the placeholders in ``template``.
    """
    _emit(logger, LogLevel.INFO, template, args, exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Emit a WARNING record for data the engine repaired or refused."""
    _emit(logger, LogLevel.WARNING, template, args, exc_info)


def log_error(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Emit an ERROR record.

    Parameters
    ----------
    logger : _SupportsLog
        femtologging logger, usually from :func:`get_logger`.
    template : str
        Percent-style message template.
    *args : object
        Values for the template placeholders.
    exc_info : object | None, optional
        Exception caught at the persistence boundary, attached to the record.
    """
    _emit(logger, LogLevel.ERROR, template, args, exc_info)


__all__ = (
    "LogLevel",
    "configure_logging",
    "get_logger",
    "log_debug",
    "log_error",
    "log_info",
    "log_warning",
    "normalise_level",
)
