"""Exception types raised by the scanning pipeline."""

from __future__ import annotations


class ScanError(Exception):
    """Base class for every error the scanner raises on purpose."""


class ConfigError(ScanError):
    """Invalid run configuration, reported before any phase starts."""


class ScriptParseError(ScanError):
    """A script buffer could not be parsed cleanly."""

    def __init__(self, message: str, line: int | None = None):
        super().__init__(message)
        self.line = line


class TaskError(ScanError):
    """A worker or task failed while running one phase of a scan."""

    def __init__(self, phase: str, cause: BaseException, item: str | None = None):
        where = f" while processing {item}" if item else ""
        super().__init__(f"{phase} phase failed{where}: {cause}")
        self.phase = phase
        self.item = item
        self.cause = cause
