"""Shared extension-to-dialect mapping for discovery and walking."""

from __future__ import annotations

from circular_scan.models import EXTENSIONS, Grammar
from circular_scan.scanner.base import BaseDialect
from circular_scan.scanner.dialects import MarkupFileDialect, ScriptDialect, VueDialect
from circular_scan.scanner.markup_parser import MarkupDialect

DIALECTS: tuple[BaseDialect, ...] = (
    ScriptDialect(Grammar.JAVASCRIPT, (".js", ".jsx", ".mjs", ".cjs")),
    ScriptDialect(Grammar.TYPESCRIPT, (".ts", ".mts", ".cts")),
    ScriptDialect(Grammar.TSX, (".tsx",)),
    VueDialect(),
    MarkupFileDialect(MarkupDialect.HTML, (".html", ".htm")),
    MarkupFileDialect(MarkupDialect.PUG, (".pug",)),
)

# Maps file extension -> dialect handler
EXT_TO_DIALECT: dict[str, BaseDialect] = {
    ext: dialect for dialect in DIALECTS for ext in dialect.extensions
}

# Extensions that take part in the dependency graph
SCRIPT_EXTENSIONS: set[str] = {f".{ext}" for ext in EXTENSIONS}
