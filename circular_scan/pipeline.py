"""3-phase pipeline orchestrator: glob -> extract -> analyze."""

from __future__ import annotations

import logging
import os
from functools import partial
from pathlib import Path
from typing import Any

from circular_scan.analysis.cycles import find_cycles
from circular_scan.analysis.dependency_graph import extract_file_edges
from circular_scan.config import load_options
from circular_scan.models import Cycle, DetectOptions, DetectResult, Phase
from circular_scan.runner import ProgressCallback, TaskRunner
from circular_scan.scanner.discovery import glob_files, glob_pattern, match_glob

logger = logging.getLogger(__name__)


def filter_cycles(cycles: list[Cycle], pattern: str | None) -> list[Cycle]:
    """Keep cycles with at least one node matching ``pattern``."""
    if not pattern:
        return cycles
    return [c for c in cycles if any(match_glob(node, pattern) for node in c)]


def run_detect(options: DetectOptions, progress: ProgressCallback | None = None) -> DetectResult:
    """Run all phases; each one completes before the next starts.

    ``progress`` is called as ``(file_name, completed, total)`` while files
    are being extracted.
    """
    logger.info("Working directory is %s", options.cwd)
    logger.info("Ignored paths: %s", ", ".join(options.ignore))
    for prefix, target in options.alias:
        logger.debug("Alias %s -> %s", prefix, target)

    runner = TaskRunner(options.max_workers, options.use_processes)

    # Phase 1: Glob
    logger.info("Globbing files with %s", glob_pattern())
    files: list[str] = runner.run(glob_files, str(options.cwd), options.ignore, phase=Phase.GLOB.value)
    logger.info("%d files were detected.", len(files))

    # Phase 2: Extract
    logger.info("Pulling out import specifiers from files...")
    edges = runner.map(
        partial(extract_file_edges, options=options),
        files,
        names=[os.path.relpath(f, options.cwd) for f in files],
        on_progress=progress,
        phase=Phase.EXTRACT.value,
    )
    for file_edges in edges:
        if file_edges.warning:
            logger.warning("%s: %s", file_edges.source, file_edges.warning)

    result = DetectResult(edges=edges, files=files)
    if result.dangling_count:
        logger.info("%d import(s) resolved to no file and were dropped.", result.dangling_count)

    # Phase 3: Analyze
    logger.info("Analyzing circular dependencies...")
    cycles = runner.run(find_cycles, [e.edge for e in edges], phase=Phase.ANALYZE.value)
    result.cycles = filter_cycles(cycles, options.filter)
    if options.filter:
        logger.info("%d circles were found, filtered with %s.", len(result.cycles), options.filter)
    else:
        logger.info("%d circles were found.", len(result.cycles))
    return result


def circular_deps_detect(
    cwd: str | Path | None = None,
    progress: ProgressCallback | None = None,
    **kwargs: Any,
) -> DetectResult:
    """Detect circles among dependencies of the project rooted at ``cwd``.

    Keyword arguments are passed to ``config.load_options``.
    """
    return run_detect(load_options(cwd, **kwargs), progress=progress)
