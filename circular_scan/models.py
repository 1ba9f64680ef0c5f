"""Data models for the circular-scan pipeline."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path

# Checked in this order during extension completion.
EXTENSIONS: tuple[str, ...] = ("js", "ts", "jsx", "tsx", "vue", "mjs", "cjs")

DEFAULT_IGNORE = "**/node_modules/**"
DEFAULT_ALIAS: dict[str, str] = {"@": "src"}

# (prefix, directory) pairs; a repeated prefix lists fallback directories in order.
AliasTable = tuple[tuple[str, str], ...]
Cycle = list[str]


class Grammar(enum.Enum):
    """tree-sitter grammar used to parse a script buffer."""
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    TSX = "tsx"


class Phase(enum.Enum):
    GLOB = "glob"
    EXTRACT = "extract"
    ANALYZE = "analyze"


@dataclass(frozen=True)
class DetectOptions:
    """Immutable configuration for one scan, threaded through every phase."""
    cwd: Path = field(default_factory=Path.cwd)
    ignore: tuple[str, ...] = (DEFAULT_IGNORE,)
    alias: AliasTable = ()
    absolute: bool = False
    filter: str | None = None
    max_workers: int | None = None
    use_processes: bool = True

    def file_identity(self, path: str) -> str:
        """Normalise a path to the graph key used for this run."""
        full = os.path.normpath(os.path.join(self.cwd, path))
        if self.absolute:
            return full
        return os.path.relpath(full, self.cwd)


@dataclass
class FileEdges:
    """Result of extracting one file: its key and what it references."""
    source: str
    targets: list[str] = field(default_factory=list)
    external: list[str] = field(default_factory=list)  # bare package specifiers
    dangling: list[str] = field(default_factory=list)  # resolved to no file
    warning: str | None = None

    @property
    def edge(self) -> tuple[str, list[str]]:
        return self.source, self.targets


@dataclass
class DetectResult:
    """Everything a run hands to the presentation layer."""
    cycles: list[Cycle] = field(default_factory=list)
    edges: list[FileEdges] = field(default_factory=list)
    files: list[str] = field(default_factory=list)

    @property
    def warnings(self) -> list[str]:
        return [f"{e.source}: {e.warning}" for e in self.edges if e.warning]

    @property
    def dangling_count(self) -> int:
        return sum(len(e.dangling) for e in self.edges)

    @property
    def external_count(self) -> int:
        return sum(len(e.external) for e in self.edges)
