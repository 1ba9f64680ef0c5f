"""Tag walkers for the two markup dialects: plain tags and pug."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from html.parser import HTMLParser
from typing import Callable

TagCallback = Callable[[str], None]


class MarkupDialect(enum.Enum):
    HTML = "html"
    PUG = "pug"


@dataclass
class MarkupVisitor:
    on_open_tag: TagCallback | None = None


class _TagCollector(HTMLParser):
    def __init__(self, callback: TagCallback):
        # Component names are case sensitive; HTMLParser lowercases them.
        super().__init__(convert_charrefs=True)
        self._callback = callback

    def handle_starttag(self, tag: str, attrs):
        self._callback(self._original_case(tag))

    def handle_startendtag(self, tag: str, attrs):
        self._callback(self._original_case(tag))

    def _original_case(self, tag: str) -> str:
        text = self.get_starttag_text() or ""
        m = re.match(r"<\s*([^\s/>]+)", text)
        return m.group(1) if m else tag


# First token of a pug line: a tag name, optionally followed by . # ( : or space
_PUG_TAG_RE = re.compile(r"^([A-Za-z][\w-]*)(?=$|[.#(:\s=&!/])")
# `p.` / `div.note(title="x").` open a plain text block
_PUG_TEXT_BLOCK_RE = re.compile(r"[.#\w-]*(?:\([^)]*\))?\.")
_PUG_KEYWORDS = {
    "if", "else", "unless", "each", "for", "while", "case", "when", "default",
    "include", "extends", "block", "mixin", "append", "prepend", "doctype",
    "yield",
}


def _walk_pug(source: str, callback: TagCallback) -> None:
    text_block_indent: int | None = None
    for raw in source.splitlines():
        stripped = raw.lstrip()
        if not stripped:
            continue
        indent = len(raw) - len(stripped)
        if text_block_indent is not None:
            if indent > text_block_indent:
                continue
            text_block_indent = None
        if stripped.startswith(("//", "|", "-", "=", "!=", "<", "+")):
            continue
        # `a: b` block expansion puts several tags on one line
        for segment in re.split(r":\s+", stripped):
            m = _PUG_TAG_RE.match(segment)
            if m:
                name = m.group(1)
                if name in _PUG_KEYWORDS:
                    break
                callback(name)
                rest = segment[m.end():]
            elif segment.startswith((".", "#")):
                callback("div")
                rest = segment
            else:
                break
            if _PUG_TEXT_BLOCK_RE.fullmatch(rest.rstrip()):
                text_block_indent = indent
                break


def walk_markup(source: str, visitor: MarkupVisitor, dialect: MarkupDialect = MarkupDialect.HTML) -> None:
    """Fire ``visitor.on_open_tag`` for every opened tag, in document order."""
    if not visitor.on_open_tag:
        return
    if dialect is MarkupDialect.PUG:
        _walk_pug(source, visitor.on_open_tag)
    else:
        collector = _TagCollector(visitor.on_open_tag)
        collector.feed(source)
        collector.close()
