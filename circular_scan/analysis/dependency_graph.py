"""Edge extraction and dependency graph building."""

from __future__ import annotations

import logging
from typing import Iterable

from circular_scan.analysis.graph_models import DependencyGraph
from circular_scan.errors import ScriptParseError
from circular_scan.models import DetectOptions, FileEdges
from circular_scan.resolver import candidate_paths, resolve_specifier
from circular_scan.scanner.script_parser import ScriptVisitor
from circular_scan.scanner.walker import walk_file

logger = logging.getLogger(__name__)

Edge = tuple[str, Iterable[str]]


def pull_out_specifiers(filename: str) -> list[str]:
    """Every import/export specifier of a file, in document order."""
    specifiers: list[str] = []
    walk_file(filename, ScriptVisitor(
        on_import_from=specifiers.append,
        on_export_from=specifiers.append,
    ))
    return specifiers


def extract_file_edges(filename: str, options: DetectOptions) -> FileEdges:
    """Resolve what one file imports or re-exports into graph keys.

    Parse and read failures are file-local: the file gets no targets and a
    warning instead.
    """
    result = FileEdges(source=options.file_identity(filename))
    try:
        specifiers = pull_out_specifiers(filename)
    except ScriptParseError as e:
        result.warning = str(e)
        return result
    except (OSError, UnicodeDecodeError) as e:
        result.warning = f"could not read file: {e}"
        return result

    for specifier in specifiers:
        if not candidate_paths(filename, specifier, options.alias):
            result.external.append(specifier)
            continue
        resolved = resolve_specifier(filename, specifier, options.alias)
        if resolved is None:
            logger.debug("%s: dropping dangling reference %r", result.source, specifier)
            result.dangling.append(specifier)
            continue
        result.targets.append(options.file_identity(resolved))
    return result


def build_graph(edges: Iterable[Edge]) -> DependencyGraph:
    """Adjacency from an edge list; parallel edges collapse to membership."""
    graph = DependencyGraph()
    for source, targets in edges:
        graph.add_node(source)
        for target in targets:
            graph.add_edge(source, target)
    return graph
