"""Dialect parsers, file walker and file discovery."""

from __future__ import annotations

from circular_scan.scanner.base import BaseDialect
from circular_scan.scanner.discovery import glob_files, glob_pattern, is_ignored
from circular_scan.scanner.markup_parser import MarkupDialect, MarkupVisitor, walk_markup
from circular_scan.scanner.script_parser import ScriptParser, ScriptVisitor, walk_script
from circular_scan.scanner.sfc import parse_sfc
from circular_scan.scanner.walker import walk_file, walk_template

__all__ = [
    "BaseDialect",
    "MarkupDialect",
    "MarkupVisitor",
    "ScriptParser",
    "ScriptVisitor",
    "glob_files",
    "glob_pattern",
    "is_ignored",
    "parse_sfc",
    "walk_file",
    "walk_markup",
    "walk_script",
    "walk_template",
]
