"""File walker: dispatch a file to its dialect, then to the right parser."""

from __future__ import annotations

from pathlib import Path

from circular_scan.scanner.language_map import EXT_TO_DIALECT
from circular_scan.scanner.markup_parser import MarkupVisitor, walk_markup
from circular_scan.scanner.script_parser import ScriptVisitor, walk_script


def walk_file(filename: str | Path, visitor: ScriptVisitor) -> None:
    """Fire ``visitor`` for every import/export form of a file's script.

    Files of unknown dialect, and components without a script block,
    produce no callbacks.
    """
    file_path = Path(filename)
    dialect = EXT_TO_DIALECT.get(file_path.suffix.lower())
    if dialect is None:
        return
    source = dialect.script_source(file_path)
    if source is None:
        return
    walk_script(source.text, visitor, source.grammar)


def walk_template(filename: str | Path, visitor: MarkupVisitor) -> None:
    """Fire ``visitor.on_open_tag`` for each tag of a file's template."""
    file_path = Path(filename)
    dialect = EXT_TO_DIALECT.get(file_path.suffix.lower())
    if dialect is None:
        return
    source = dialect.markup_source(file_path)
    if source is None:
        return
    walk_markup(source.text, visitor, source.dialect)
