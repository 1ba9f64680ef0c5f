"""tree-sitter based script parser reporting import-like and export-like forms."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Callable

from tree_sitter_language_pack import get_parser

from circular_scan.errors import ScriptParseError
from circular_scan.models import Grammar

SpecifierCallback = Callable[[str], None]


@dataclass
class ScriptVisitor:
    """Callbacks fired while a script tree is traversed."""
    on_import_from: SpecifierCallback | None = None
    on_export_from: SpecifierCallback | None = None


@functools.lru_cache(maxsize=None)
def _get_parser(grammar_name: str):
    return get_parser(grammar_name)


_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}


def _decode_escape(text: str) -> str:
    body = text[1:]
    if body[:1] in ("x", "u") and len(body) > 1:
        try:
            return chr(int(body[1:].strip("{}"), 16))
        except ValueError:
            return body
    if body[:1] in ("\n", "\r", "\u2028", "\u2029"):
        return ""  # line continuation
    return _SIMPLE_ESCAPES.get(body, body)


def _string_value(node) -> str | None:
    """Value of a plain string literal node, escapes decoded."""
    if node is None or node.type != "string":
        return None
    parts = []
    for child in node.named_children:
        text = child.text.decode("utf-8", errors="replace")
        if child.type == "escape_sequence":
            parts.append(_decode_escape(text))
        elif child.type == "string_fragment":
            parts.append(text)
    return "".join(parts)


def _first_argument(call_node):
    args = call_node.child_by_field_name("arguments")
    if args is None or args.named_child_count == 0:
        return None
    return args.named_children[0]


def _import_specifier(node) -> str | None:
    """Specifier of a static import, dynamic import() or require() call."""
    if node.type == "import_statement":
        return _string_value(node.child_by_field_name("source"))
    if node.type == "call_expression":
        callee = node.child_by_field_name("function")
        if callee is None:
            return None
        if callee.type == "import" or (callee.type == "identifier" and callee.text == b"require"):
            return _string_value(_first_argument(node))
    return None


def _export_specifier(node) -> str | None:
    """Source of ``export ... from "..."``; plain ``export { a }`` has none."""
    if node.type == "export_statement":
        return _string_value(node.child_by_field_name("source"))
    return None


def _first_error_line(root) -> int | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


class ScriptParser:
    """Parses one script buffer and walks it in document order.

    Nodes are visited pre-order: a node fires its callbacks before any of
    its children, and children are visited left to right.
    """

    def __init__(self, grammar: Grammar = Grammar.TSX):
        self.grammar = grammar

    def parse(self, source: str | bytes):
        if isinstance(source, str):
            source = source.encode("utf-8")
        tree = _get_parser(self.grammar.value).parse(source)
        if tree.root_node.has_error:
            line = _first_error_line(tree.root_node)
            where = f" at line {line}" if line else ""
            raise ScriptParseError(f"syntax error{where} ({self.grammar.value})", line=line)
        return tree

    def walk(self, source: str | bytes, visitor: ScriptVisitor) -> None:
        tree = self.parse(source)
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            if visitor.on_import_from:
                specifier = _import_specifier(node)
                if specifier is not None:
                    visitor.on_import_from(specifier)
            if visitor.on_export_from:
                specifier = _export_specifier(node)
                if specifier is not None:
                    visitor.on_export_from(specifier)
            stack.extend(reversed(node.children))


def walk_script(source: str | bytes, visitor: ScriptVisitor, grammar: Grammar = Grammar.TSX) -> None:
    """Parse ``source`` with ``grammar`` and fire ``visitor`` callbacks."""
    ScriptParser(grammar).walk(source, visitor)
