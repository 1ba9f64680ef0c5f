"""Concrete dialects: plain/typed/JSX script, Vue components, markup files."""

from __future__ import annotations

from pathlib import Path

from circular_scan.models import Grammar
from circular_scan.scanner.base import BaseDialect, MarkupSource, ScriptSource, read_source
from circular_scan.scanner.markup_parser import MarkupDialect
from circular_scan.scanner.sfc import parse_sfc


class ScriptDialect(BaseDialect):
    """The whole buffer is script."""

    def __init__(self, grammar: Grammar, extensions: tuple[str, ...]):
        self.grammar = grammar
        self.extensions = extensions

    def script_source(self, file_path: Path) -> ScriptSource | None:
        return ScriptSource(read_source(file_path), self.grammar)


class VueDialect(BaseDialect):
    """Single-file component: only the script block takes part in the graph."""

    extensions = (".vue",)

    def script_source(self, file_path: Path) -> ScriptSource | None:
        block = parse_sfc(read_source(file_path)).preferred_script
        if block is None:
            return None
        return ScriptSource(block.content, block.grammar)

    def markup_source(self, file_path: Path) -> MarkupSource | None:
        template = parse_sfc(read_source(file_path)).template
        if template is None:
            return None
        dialect = MarkupDialect.PUG if template.lang == "pug" else MarkupDialect.HTML
        return MarkupSource(template.content, dialect)


class MarkupFileDialect(BaseDialect):
    """Standalone markup file; it carries no script of interest."""

    def __init__(self, dialect: MarkupDialect, extensions: tuple[str, ...]):
        self.dialect = dialect
        self.extensions = extensions

    def script_source(self, file_path: Path) -> ScriptSource | None:
        return None

    def markup_source(self, file_path: Path) -> MarkupSource | None:
        return MarkupSource(read_source(file_path), self.dialect)
