"""Build the immutable options for one scan."""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Iterable, Mapping

from circular_scan.errors import ConfigError
from circular_scan.models import DEFAULT_ALIAS, DEFAULT_IGNORE, AliasTable, DetectOptions

logger = logging.getLogger(__name__)

TSCONFIG_FILES = ("tsconfig.json", "jsconfig.json")

# Strings are matched first so that "@/*" inside a string survives.
_JSONC_COMMENT_RE = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")


def _strip_jsonc(text: str) -> str:
    text = _JSONC_COMMENT_RE.sub(lambda m: m.group(1) or "", text)
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def find_tsconfig(cwd: Path) -> Path | None:
    """Nearest tsconfig.json (else jsconfig.json) in ``cwd`` or a parent."""
    for directory in (cwd, *cwd.parents):
        for name in TSCONFIG_FILES:
            path = directory / name
            if path.is_file():
                return path
    return None


def _resolve_extends(config_dir: Path, base_name: str) -> Path | None:
    if base_name.startswith(".") or os.path.isabs(base_name):
        candidates = [config_dir / base_name]
    else:
        candidates = [d / "node_modules" / base_name for d in (config_dir, *config_dir.parents)]
    for candidate in candidates:
        for path in (candidate, candidate.with_name(candidate.name + ".json"), candidate / "tsconfig.json"):
            if path.is_file():
                return path.resolve()
    return None


def load_compiler_options(path: Path, _seen: frozenset[Path] = frozenset()) -> dict:
    """``compilerOptions`` of a config with its ``extends`` chain merged in.

    Bases are applied first, later ones overriding earlier ones, then the
    config's own options. ``baseUrl`` is made absolute against the file that
    declares it, and ``pathsBasePath`` records the directory of the file
    that declares ``paths``.
    """
    data = json.loads(_strip_jsonc(path.read_text(encoding="utf-8")))
    if not isinstance(data, dict):
        return {}
    seen = _seen | {path.resolve()}

    merged: dict = {}
    extends = data.get("extends")
    if isinstance(extends, str):
        extends = [extends]
    for base_name in extends if isinstance(extends, list) else []:
        base = _resolve_extends(path.parent, base_name) if isinstance(base_name, str) else None
        if base is None:
            logger.warning("%s: cannot find base config %r", path, base_name)
            continue
        if base in seen:
            logger.warning("%s: circular extends through %s", path, base)
            continue
        merged.update(load_compiler_options(base, seen))

    own = data.get("compilerOptions")
    if isinstance(own, dict):
        own = dict(own)
        if isinstance(own.get("baseUrl"), str):
            own["baseUrl"] = os.path.normpath(path.parent / own["baseUrl"])
        if "paths" in own:
            own["pathsBasePath"] = str(path.parent)
        merged.update(own)
    return merged


def read_tsconfig_paths(cwd: Path) -> dict[str, list[str]]:
    """Alias entries from ``compilerOptions.paths`` of the nearest tsconfig.

    ``"@/*": ["src/*", "gen/*"]`` becomes
    ``{"@": ["<base>/src", "<base>/gen"]}``, where ``<base>`` is ``baseUrl``
    or else the directory of the config declaring ``paths``. A config that
    cannot be read is logged and ignored.
    """
    path = find_tsconfig(cwd)
    if path is None:
        return {}
    try:
        options = load_compiler_options(path)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable %s: %s", path, e)
        return {}
    paths = options.get("paths")
    if not isinstance(paths, dict) or not paths:
        return {}

    base = Path(options.get("baseUrl") or options.get("pathsBasePath") or path.parent)
    aliases: dict[str, list[str]] = {}
    for pattern, targets in paths.items():
        prefix = pattern[:-2] if pattern.endswith("/*") else pattern
        if not prefix or prefix == "*" or not isinstance(targets, list):
            continue
        resolved = [
            os.path.normpath(base / (t[:-2] if t.endswith("/*") else t))
            for t in targets
            if isinstance(t, str)
        ]
        if resolved:
            aliases[prefix] = resolved
    logger.info("Config file detected: %s", path)
    return aliases


def parse_alias_pairs(pairs: Iterable[str]) -> dict[str, str]:
    """Parse ``from:to`` pairs as given on the command line."""
    aliases: dict[str, str] = {}
    for pair in pairs:
        prefix, sep, target = pair.partition(":")
        if not sep or not prefix or not target:
            raise ConfigError(f"Invalid alias {pair!r}, expected <from>:<to>")
        aliases[prefix] = target
    return aliases


def _dedupe(patterns: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(patterns))


def load_options(
    cwd: str | Path | None = None,
    *,
    ignore: Iterable[str] = (),
    alias: Mapping[str, str] | None = None,
    absolute: bool = False,
    filter: str | None = None,
    max_workers: int | None = None,
    use_processes: bool = True,
    read_tsconfig: bool = True,
) -> DetectOptions:
    """Validate inputs and build ``DetectOptions``.

    Alias precedence, lowest first: the built-in ``@ -> src``, tsconfig
    paths, then ``alias``. A prefix replaced at one level loses all its
    lower-level targets. Alias directories are resolved against ``cwd``.
    """
    root = Path(cwd) if cwd is not None else Path.cwd()
    try:
        root = root.resolve(strict=True)
    except OSError as e:
        raise ConfigError(f"Working directory {str(root)!r} does not exist") from e
    if not root.is_dir():
        raise ConfigError(f"Working directory {str(root)!r} is not a directory")
    if not os.access(root, os.R_OK | os.X_OK):
        raise ConfigError(f"Working directory {str(root)!r} is not readable")
    if max_workers is not None and max_workers < 1:
        raise ConfigError(f"Worker count must be positive, got {max_workers}")

    merged: dict[str, list[str]] = {prefix: [target] for prefix, target in DEFAULT_ALIAS.items()}
    if read_tsconfig:
        merged.update(read_tsconfig_paths(root))
    merged.update({prefix: [target] for prefix, target in (alias or {}).items()})
    table: AliasTable = tuple(
        (prefix, os.path.normpath(root / target))
        for prefix, targets in merged.items()
        for target in targets
    )

    return DetectOptions(
        cwd=root,
        ignore=_dedupe([*ignore, DEFAULT_IGNORE]),
        alias=table,
        absolute=absolute,
        filter=filter,
        max_workers=max_workers,
        use_processes=use_processes,
    )
