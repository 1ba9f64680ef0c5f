"""Turn a raw module specifier into a file on disk.

Relative specifiers are resolved against the importing file's directory,
aliased ones through the alias table. Whatever comes out is completed with
the supported extensions, then with ``index.<ext>``.
"""

from __future__ import annotations

import os
import re

from circular_scan.models import EXTENSIONS, AliasTable

_DUPLICATE_SLASHES = re.compile(r"/+")


def normalize_path(path: str) -> str:
    """Collapse runs of ``/`` into one."""
    return _DUPLICATE_SLASHES.sub("/", path)


def alias_candidates(specifier: str, aliases: AliasTable) -> list[str]:
    """Every substitution of the longest matching alias prefix, in table order.

    A prefix may appear more than once; each entry is one fallback target.
    Relative specifiers are never substituted.
    """
    if specifier.startswith("."):
        return []
    best = ""
    for prefix, _ in aliases:
        if specifier == prefix or specifier.startswith(prefix + "/"):
            if len(prefix) > len(best):
                best = prefix
    if not best:
        return []
    rest = specifier[len(best):]
    return [
        target if not rest else normalize_path(f"{target}/{rest}")
        for prefix, target in aliases
        if prefix == best
    ]


def replace_alias(specifier: str, aliases: AliasTable) -> str | None:
    """Substitute the longest matching alias prefix, or return None."""
    candidates = alias_candidates(specifier, aliases)
    return candidates[0] if candidates else None


def complete_extension(origin: str) -> str | None:
    """Find the file ``origin`` refers to once extensions are filled in."""
    if os.path.isfile(origin):
        return origin
    base = origin.rstrip("/\\") or origin
    for ext in EXTENSIONS:
        candidate = f"{base}.{ext}"
        if os.path.isfile(candidate):
            return candidate
    for ext in EXTENSIONS:
        candidate = os.path.join(base, f"index.{ext}")
        if os.path.isfile(candidate):
            return candidate
    return None


def candidate_paths(from_file: str, specifier: str, aliases: AliasTable) -> list[str]:
    """Where a specifier may point before extension completion.

    An empty list means a bare (package) specifier.
    """
    if specifier.startswith("."):
        return [os.path.normpath(os.path.join(os.path.dirname(from_file), specifier))]
    if os.path.isabs(specifier):
        return [specifier]
    return alias_candidates(specifier, aliases)


def resolve_specifier(from_file: str, specifier: str, aliases: AliasTable) -> str | None:
    """Resolve ``specifier`` as written in ``from_file`` to an existing file.

    Alias targets are tried in order; the first that completes wins.
    """
    for candidate in candidate_paths(from_file, specifier, aliases):
        resolved = complete_extension(candidate)
        if resolved is not None:
            return resolved
    return None
