"""Abstract base dialect."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from pathlib import Path

from circular_scan.models import Grammar
from circular_scan.scanner.markup_parser import MarkupDialect


@dataclass
class ScriptSource:
    """Script text pulled out of a file, with the grammar to parse it with."""
    text: str
    grammar: Grammar


@dataclass
class MarkupSource:
    text: str
    dialect: MarkupDialect


class BaseDialect(abc.ABC):
    """One file dialect: knows how to get at the script inside a file."""

    extensions: tuple[str, ...]

    @abc.abstractmethod
    def script_source(self, file_path: Path) -> ScriptSource | None:
        """Return the file's script text, or None if it carries no script."""

    def markup_source(self, file_path: Path) -> MarkupSource | None:
        """Return the file's template/markup text, if the dialect has any."""
        return None


def read_source(file_path: Path) -> str:
    return file_path.read_text(encoding="utf-8")
