"""Data models for the dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class DependencyGraph:
    forward: dict[str, set[str]] = field(default_factory=dict)  # source -> {targets}, first-seen order

    def add_node(self, node: str) -> None:
        self.forward.setdefault(node, set())

    def add_edge(self, source: str, target: str) -> None:
        self.add_node(source)
        self.add_node(target)
        self.forward[source].add(target)
