"""Find the source files of a project."""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Iterable

from circular_scan.models import EXTENSIONS
from circular_scan.scanner.language_map import SCRIPT_EXTENSIONS


def glob_pattern() -> str:
    return "**/*.{%s}" % ",".join(EXTENSIONS)


def _split(path: str) -> list[str]:
    return [part for part in path.replace("\\", "/").split("/") if part]


def _match_parts(parts: list[str], pattern: list[str]) -> bool:
    if not pattern:
        return not parts
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        return any(_match_parts(parts[i:], rest) for i in range(len(parts) + 1))
    return bool(parts) and fnmatch.fnmatchcase(parts[0], head) and _match_parts(parts[1:], rest)


def match_glob(path: str, pattern: str) -> bool:
    """Match a path against a glob, one path segment at a time.

    ``*`` and ``?`` stay inside a segment, ``**`` spans any number of
    segments. A pattern without ``/`` matches any single segment, so
    ``node_modules`` or ``*.spec.ts`` apply at every depth.
    """
    parts = _split(path)
    if "/" not in pattern:
        return any(fnmatch.fnmatchcase(part, pattern) for part in parts)
    return _match_parts(parts, _split(pattern))


def is_ignored(rel_path: str, patterns: Iterable[str]) -> bool:
    """True if a path relative to the root matches any ignore glob.

    ``**/node_modules/**`` also matches the ``node_modules`` directory
    itself, which lets discovery skip it without descending.
    """
    return any(match_glob(rel_path, pattern) for pattern in patterns)


def glob_files(cwd: str | Path, ignore: Iterable[str] = ()) -> list[str]:
    """Absolute paths of every supported source file under ``cwd``, sorted.

    Ignored directories are pruned before they are listed.
    """
    root = Path(cwd).resolve()
    patterns = tuple(ignore)
    files: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else rel_dir + "/"
        dirnames[:] = [d for d in dirnames if not is_ignored(prefix + d, patterns)]
        for name in filenames:
            if os.path.splitext(name)[1].lower() not in SCRIPT_EXTENSIONS:
                continue
            if is_ignored(prefix + name, patterns):
                continue
            path = os.path.join(dirpath, name)
            if os.path.isfile(path):
                files.append(path)
    return sorted(files)
