"""Single-file component (.vue) block finder.

Locates the top-level ``<script>``, ``<script setup>`` and ``<template>``
blocks and slices their raw content out of the source.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from html.parser import HTMLParser

from circular_scan.models import Grammar

_LANG_TO_GRAMMAR = {
    "ts": Grammar.TYPESCRIPT,
    "typescript": Grammar.TYPESCRIPT,
    "tsx": Grammar.TSX,
}


@dataclass
class SfcBlock:
    """A located top-level block of a component file."""
    tag: str
    attrs: dict[str, str | None]
    content: str
    start_line: int

    @property
    def lang(self) -> str | None:
        return self.attrs.get("lang")

    @property
    def is_setup(self) -> bool:
        return "setup" in self.attrs

    @property
    def grammar(self) -> Grammar:
        return _LANG_TO_GRAMMAR.get((self.lang or "").lower(), Grammar.JAVASCRIPT)


@dataclass
class SfcDescriptor:
    script: SfcBlock | None = None
    script_setup: SfcBlock | None = None
    template: SfcBlock | None = None
    styles: list[SfcBlock] = field(default_factory=list)

    @property
    def preferred_script(self) -> SfcBlock | None:
        return self.script_setup or self.script


class _SfcBlockFinder(HTMLParser):
    """HTMLParser subclass that locates the top-level blocks of a component."""

    def __init__(self, source: str):
        super().__init__(convert_charrefs=False)
        self.source = source
        self.blocks: list[SfcBlock] = []
        self._line_starts = [0]
        for i, ch in enumerate(source):
            if ch == "\n":
                self._line_starts.append(i + 1)
        self._open: tuple[str, dict[str, str | None], int, int] | None = None
        self._template_depth = 0

    def _offset(self) -> int:
        line, col = self.getpos()
        return self._line_starts[line - 1] + col

    def _line_of(self, offset: int) -> int:
        return bisect.bisect_right(self._line_starts, offset)

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]):
        if tag == "template":
            self._template_depth += 1
            if self._template_depth > 1:
                return
        elif self._open is not None or tag not in ("script", "style"):
            return
        start = self._offset() + len(self.get_starttag_text() or "")
        self._open = (tag, dict(attrs), start, self._line_of(start))

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]):
        # <Foo /> opens nothing
        pass

    def handle_endtag(self, tag: str):
        if tag == "template":
            self._template_depth -= 1
            if self._template_depth > 0:
                return
        if self._open is None or self._open[0] != tag:
            return
        open_tag, attrs, start, start_line = self._open
        self.blocks.append(SfcBlock(
            tag=open_tag,
            attrs=attrs,
            content=self.source[start:self._offset()],
            start_line=start_line,
        ))
        self._open = None


def parse_sfc(source: str) -> SfcDescriptor:
    """Split a component file into its top-level blocks."""
    finder = _SfcBlockFinder(source)
    finder.feed(source)
    finder.close()

    descriptor = SfcDescriptor()
    for block in finder.blocks:
        if block.tag == "script":
            if block.is_setup:
                descriptor.script_setup = descriptor.script_setup or block
            else:
                descriptor.script = descriptor.script or block
        elif block.tag == "template":
            descriptor.template = descriptor.template or block
        elif block.tag == "style":
            descriptor.styles.append(block)
    return descriptor
