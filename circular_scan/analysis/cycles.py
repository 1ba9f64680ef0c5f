"""Enumerate every elementary cycle of a directed graph.

Strongly connected components are found first (Tarjan); cycles are then
enumerated inside each non-trivial component with Johnson's blocking
search, starting from the component's least node. After that node is
exhausted it is removed and the components of what is left are searched
again. Both passes are iterative so deep graphs do not hit the recursion
limit.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Iterator, Mapping

from circular_scan.analysis.dependency_graph import Edge, build_graph
from circular_scan.models import Cycle

Adjacency = Mapping[str, list[str]]


def strongly_connected_components(adjacency: Adjacency) -> list[set[str]]:
    """Tarjan's algorithm. Every neighbour must also be a key of ``adjacency``."""
    index_of: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    on_stack: set[str] = set()
    stack: list[str] = []
    components: list[set[str]] = []
    counter = 0

    for root in adjacency:
        if root in index_of:
            continue
        index_of[root] = lowlink[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)
        work = [(root, iter(adjacency[root]))]

        while work:
            node, neighbours = work[-1]
            for nxt in neighbours:
                if nxt not in index_of:
                    index_of[nxt] = lowlink[nxt] = counter
                    counter += 1
                    stack.append(nxt)
                    on_stack.add(nxt)
                    work.append((nxt, iter(adjacency[nxt])))
                    break
                if nxt in on_stack:
                    lowlink[node] = min(lowlink[node], index_of[nxt])
            else:
                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlink[parent] = min(lowlink[parent], lowlink[node])
                if lowlink[node] == index_of[node]:
                    component: set[str] = set()
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        component.add(member)
                        if member == node:
                            break
                    components.append(component)
    return components


def _unblock(node: str, blocked: set[str], blocked_by: dict[str, set[str]]) -> None:
    pending = {node}
    while pending:
        current = pending.pop()
        if current in blocked:
            blocked.discard(current)
            pending.update(blocked_by[current])
            blocked_by[current].clear()


def _cycles_through(start: str, adjacency: Adjacency) -> Iterator[Cycle]:
    """Johnson's circuit search for cycles through ``start``."""
    path = [start]
    blocked = {start}
    closed: set[str] = set()
    blocked_by: dict[str, set[str]] = defaultdict(set)
    stack = [(start, iter(adjacency[start]))]

    while stack:
        node, neighbours = stack[-1]
        for nxt in neighbours:
            if nxt == start:
                yield path[:]
                closed.update(path)
            elif nxt not in blocked:
                path.append(nxt)
                stack.append((nxt, iter(adjacency[nxt])))
                closed.discard(nxt)
                blocked.add(nxt)
                break
        else:
            if node in closed:
                _unblock(node, blocked, blocked_by)
            else:
                for nxt in adjacency[node]:
                    blocked_by[nxt].add(node)
            stack.pop()
            path.pop()


def _normalize(adjacency: Mapping[str, Iterable[str]]) -> dict[str, list[str]]:
    nodes: set[str] = set(adjacency)
    for targets in adjacency.values():
        nodes.update(targets)
    return {node: sorted(set(adjacency.get(node, ()))) for node in sorted(nodes)}


def simple_cycles(adjacency: Mapping[str, Iterable[str]]) -> Iterator[Cycle]:
    """Yield each elementary cycle once, as an open path from its least node."""
    graph = _normalize(adjacency)

    for node, targets in graph.items():
        if node in targets:
            yield [node]
            targets.remove(node)

    def nontrivial(components: list[set[str]]) -> list[set[str]]:
        # processed smallest-first, so pushed largest-first
        return sorted((c for c in components if len(c) > 1), key=min, reverse=True)

    pending = nontrivial(strongly_connected_components(graph))
    while pending:
        component = pending.pop()
        start = min(component)
        subgraph = {
            node: [t for t in graph[node] if t in component]
            for node in sorted(component)
        }
        yield from _cycles_through(start, subgraph)

        rest = {
            node: [t for t in targets if t != start]
            for node, targets in subgraph.items()
            if node != start
        }
        pending.extend(nontrivial(strongly_connected_components(rest)))


def find_cycles(edges: Iterable[Edge]) -> list[Cycle]:
    """Every elementary cycle of the graph described by an edge list."""
    graph = build_graph(edges)
    return list(simple_cycles(graph.forward))
