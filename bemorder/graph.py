"""Dependency graph construction.

Builds the graph the orderers walk:
1. Inserts known stems (the artifacts of this run) in arrival order
2. Adds declared edges, creating placeholder nodes for referenced stems
3. Adds implicit edges from the BEM ancestor chain of every node
4. Links every node without dependencies from the virtual root

Edges point from dependency to dependent. Nodes are kept in insertion
order and every adjacency is an insertion-ordered set, so traversals
over the graph are deterministic.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .errors import GraphNamingError, NamingError
from .naming import ancestor_chain, is_entity_only, parse_identifier

logger = logging.getLogger(__name__)

ROOT = "<root>"


class DependencyGraph:
    """Stems with their dependencies and, mirrored, their dependents."""

    def __init__(self) -> None:
        # stem -> dependencies / dependents (dicts used as ordered sets)
        self._dependencies: dict[str, dict[str, None]] = {}
        self._dependents: dict[str, dict[str, None]] = {}
        self._root_children: dict[str, None] = {}
        self._frozen = False

    def __contains__(self, stem: object) -> bool:
        return stem in self._dependencies

    def __len__(self) -> int:
        return len(self._dependencies)

    def __repr__(self) -> str:
        edge_count = sum(len(deps) for deps in self._dependencies.values())
        return f"DependencyGraph(nodes={len(self)}, edges={edge_count})"

    @property
    def nodes(self) -> list[str]:
        """All stems, in insertion order."""
        return list(self._dependencies)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RuntimeError("Dependency graph is frozen and cannot be modified")

    def add_node(self, stem: str) -> None:
        """Insert a node if it does not exist yet."""
        self._check_mutable()
        if stem == ROOT:
            raise ValueError("The virtual root cannot be added as a node")
        if stem not in self._dependencies:
            self._dependencies[stem] = {}
            self._dependents[stem] = {}

    def add_edge(self, dependency: str, dependent: str) -> None:
        """Record that ``dependent`` must come after ``dependency``."""
        self.add_node(dependency)
        self.add_node(dependent)
        self._dependencies[dependent][dependency] = None
        self._dependents[dependency][dependent] = None

    def dependencies_of(self, stem: str) -> list[str]:
        """Direct dependencies of a stem, in insertion order."""
        if stem == ROOT:
            return []
        return list(self._dependencies.get(stem, ()))

    def dependents_of(self, stem: str) -> list[str]:
        """Direct dependents of a stem. For ROOT, the linked sources."""
        if stem == ROOT:
            return list(self._root_children)
        return list(self._dependents.get(stem, ()))

    def sources(self) -> list[str]:
        """Nodes without dependencies, in insertion order."""
        return [stem for stem, deps in self._dependencies.items() if not deps]

    def link_root(self) -> None:
        """Link every node without dependencies from the virtual root."""
        self._check_mutable()
        self._root_children = dict.fromkeys(self.sources())

    def freeze(self) -> None:
        self._frozen = True

    def is_consistent(self) -> bool:
        """Check that the dependents mapping is the transpose of dependencies."""
        if self._dependencies.keys() != self._dependents.keys():
            return False
        for stem, deps in self._dependencies.items():
            for dep in deps:
                if stem not in self._dependents.get(dep, {}):
                    return False
        for stem, dependents in self._dependents.items():
            for dependent in dependents:
                if stem not in self._dependencies.get(dependent, {}):
                    return False
        return True

    def to_dict(self) -> dict[str, list[str]]:
        """Stem -> dependencies, for display and JSON output."""
        return {stem: list(deps) for stem, deps in self._dependencies.items()}


def merge_declarations(
    sources: Iterable[tuple[str, Iterable[str]]],
) -> dict[str, set[str]]:
    """Merge declarations of the same stem from several sources.

    Dependencies of a stem declared more than once are unioned, never
    overwritten.
    """
    merged: dict[str, set[str]] = {}
    for stem, deps in sources:
        merged.setdefault(stem, set()).update(deps)
    return merged


def _ancestor_edges(stem: str) -> list[tuple[str, str]]:
    """Edges (dependency, dependent) implied by a stem's naming."""
    try:
        record = parse_identifier(stem)
    except NamingError as exc:
        raise GraphNamingError(stem) from exc

    if is_entity_only(record):
        return []

    edges = []
    dependent = stem
    for ancestor in ancestor_chain(record):
        edges.append((ancestor, dependent))
        dependent = ancestor
    return edges


def build_graph(
    declarations_by_stem: Mapping[str, Iterable[str]],
    known_stems: Iterable[str],
) -> DependencyGraph:
    """
    Build the dependency graph for one run.

    Args:
        declarations_by_stem: Stem -> stems it depends on (already merged)
        known_stems: Stems of the artifacts being ordered, in arrival order

    Returns:
        A frozen DependencyGraph

    Raises:
        GraphNamingError: If any stem in the graph breaks the naming grammar
    """
    graph = DependencyGraph()

    for stem in known_stems:
        try:
            parse_identifier(stem)
        except NamingError as exc:
            raise GraphNamingError(stem) from exc
        graph.add_node(stem)

    for stem, deps in declarations_by_stem.items():
        graph.add_node(stem)
        # Sorted so set iteration order never leaks into traversal order
        for dep in sorted(deps):
            graph.add_edge(dep, stem)

    # Snapshot: ancestor edges add nodes while we iterate
    for stem in graph.nodes:
        for dependency, dependent in _ancestor_edges(stem):
            graph.add_edge(dependency, dependent)

    graph.link_root()
    graph.freeze()

    logger.debug(
        "Built %r with %d source node(s)", graph, len(graph.dependents_of(ROOT))
    )
    return graph
