"""Emission order for the stems of a dependency graph.

Two interchangeable strategies share the Orderer interface:

- ``bfs`` (default): breadth-first walk from the virtual root. A node is
  visited once all of its dependencies have been visited. Independent
  stems keep their discovery order, which for artifacts passed as known
  stems is their arrival order.
- ``weight``: longest-path weight (0 without dependencies, otherwise
  1 + the heaviest dependency). Stems are sorted by (weight, stem).

Both produce a valid linearization of an acyclic graph; they differ only
in how independent stems are tie-broken.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable

from .errors import CircularDependencyError, NamingError, OrderError, OrderNamingError
from .graph import ROOT, DependencyGraph
from .naming import parse_identifier

logger = logging.getLogger(__name__)


class Orderer(ABC):
    """Computes an emission order for the present stems of a graph."""

    name: str = "unknown"

    def order(self, graph: DependencyGraph, present: Iterable[str]) -> list[str]:
        """
        Order present stems so every dependency precedes its dependents.

        Args:
            graph: Graph built by build_graph()
            present: Stems of real artifacts, in arrival order. Other graph
                nodes are traversed but never emitted.

        Returns:
            Present stems in emission order, each exactly once

        Raises:
            OrderNamingError: If a present stem breaks the naming grammar
            OrderError: If a present stem is not a node of the graph
            CircularDependencyError: If a cycle is reachable from a present stem
        """
        stems = list(dict.fromkeys(present))

        # Naming validity first: broken names mean missing ancestor edges
        for stem in stems:
            try:
                parse_identifier(stem)
            except NamingError as exc:
                raise OrderNamingError(stem) from exc

        for stem in stems:
            if stem not in graph:
                raise OrderError(
                    f"Stem {stem!r} is not a node of the dependency graph; "
                    "pass it in known_stems when building the graph"
                )

        result = self._order(graph, stems)
        logger.debug("%s orderer emitted %d stem(s)", self.name, len(result))
        return result

    @abstractmethod
    def _order(self, graph: DependencyGraph, stems: list[str]) -> list[str]:
        """Order validated, deduplicated stems."""
        pass


def _find_unvisited_cycle(
    graph: DependencyGraph, start: str, visited: set[str]
) -> list[str]:
    """Follow unvisited dependencies from ``start`` until a stem repeats.

    After a BFS pass every unvisited node has at least one unvisited
    dependency, so the walk always closes a cycle.
    """
    path = [start]
    position = {start: 0}
    current = start

    while True:
        current = next(
            dep for dep in graph.dependencies_of(current) if dep not in visited
        )
        if current in position:
            return path[position[current]:] + [current]
        position[current] = len(path)
        path.append(current)


class BfsOrderer(Orderer):
    """Breadth-first reachability from the virtual root."""

    name = "bfs"

    def _order(self, graph: DependencyGraph, stems: list[str]) -> list[str]:
        wanted = set(stems)
        visited: set[str] = set()
        output: list[str] = []
        queue = deque(graph.dependents_of(ROOT))

        while queue:
            node = queue.popleft()
            if node in visited:
                continue

            # Multiple parents: wait until every dependency has been visited
            if any(dep not in visited for dep in graph.dependencies_of(node)):
                continue

            visited.add(node)
            if node in wanted:
                output.append(node)

            queue.extend(graph.dependents_of(node))

        for stem in stems:
            if stem not in visited:
                raise CircularDependencyError(
                    _find_unvisited_cycle(graph, stem, visited)
                )

        return output


def compute_weights(graph: DependencyGraph, stems: Iterable[str]) -> dict[str, int]:
    """
    Compute longest-path weights for stems and everything they depend on.

    Uses an explicit stack instead of recursion so deep graphs cannot hit
    the interpreter recursion limit.

    Raises:
        CircularDependencyError: When a dependency leads back onto the
            current path
    """
    weights: dict[str, int] = {}

    for target in stems:
        if target in weights:
            continue

        path = [target]
        on_path = {target: 0}
        stack = [(target, iter(graph.dependencies_of(target)))]

        while stack:
            node, pending = stack[-1]
            for dep in pending:
                if dep in weights:
                    continue
                if dep in on_path:
                    raise CircularDependencyError(path[on_path[dep]:] + [dep])
                on_path[dep] = len(path)
                path.append(dep)
                stack.append((dep, iter(graph.dependencies_of(dep))))
                break
            else:
                stack.pop()
                path.pop()
                del on_path[node]
                deps = graph.dependencies_of(node)
                weights[node] = 1 + max(weights[d] for d in deps) if deps else 0

    return weights


class WeightOrderer(Orderer):
    """Sort by longest-path weight, tie-broken by stem."""

    name = "weight"

    def _order(self, graph: DependencyGraph, stems: list[str]) -> list[str]:
        weights = compute_weights(graph, stems)
        return sorted(stems, key=lambda stem: (weights[stem], stem))


ORDERERS: dict[str, type[Orderer]] = {
    BfsOrderer.name: BfsOrderer,
    WeightOrderer.name: WeightOrderer,
}

DEFAULT_STRATEGY = BfsOrderer.name


def get_orderer(strategy: str | None = None) -> Orderer:
    """Get an orderer by strategy name.

    Falls back to the configured strategy when ``strategy`` is None.

    Raises:
        ValueError: If the strategy is unknown
    """
    if strategy is None:
        from .config import get_config

        strategy = get_config().ordering.strategy

    orderer_cls = ORDERERS.get(strategy)
    if orderer_cls is None:
        raise ValueError(
            f"Unknown ordering strategy: {strategy!r}. "
            f"Valid strategies: {', '.join(sorted(ORDERERS))}"
        )
    return orderer_cls()


def order(
    graph: DependencyGraph,
    present: Iterable[str],
    strategy: str | None = None,
) -> list[str]:
    """Order present stems with the given (or configured) strategy."""
    return get_orderer(strategy).order(graph, present)
