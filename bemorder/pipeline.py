"""End-to-end ordering of artifact files.

Declarations and artifacts are independent inputs and may be gathered
concurrently, but the graph is only built once both are complete: a
partial set of declarations would produce a graph with missing edges.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from pathlib import Path
from typing import Iterable, Mapping

from .artifacts import Artifact
from .graph import build_graph
from .ordering import order
from .sources import load_declarations, resolve_suffixes

logger = logging.getLogger(__name__)


def order_artifacts(
    artifacts: Iterable[Artifact],
    declarations: Mapping[str, Iterable[str]],
    strategy: str | None = None,
) -> list[Artifact]:
    """
    Reorder artifacts so each one follows everything it depends on.

    Artifacts sharing a stem (``button.css`` and ``button.js``) stay
    together, in arrival order.

    Args:
        artifacts: Artifacts in arrival order
        declarations: Stem -> dependency stems, already merged
        strategy: Orderer strategy name (defaults to config)

    Returns:
        The same artifacts in emission order

    Raises:
        GraphNamingError: If a stem breaks the naming grammar
        CircularDependencyError: If the artifacts depend on each other in a cycle
    """
    artifacts = list(artifacts)
    stems = [artifact.stem for artifact in artifacts]

    graph = build_graph(declarations, stems)
    ordered_stems = order(graph, stems, strategy)

    by_stem: dict[str, list[Artifact]] = defaultdict(list)
    for artifact in artifacts:
        by_stem[artifact.stem].append(artifact)

    logger.info(
        "Ordered %d artifact(s) over %d graph node(s)", len(artifacts), len(graph)
    )
    return [artifact for stem in ordered_stems for artifact in by_stem[stem]]


def collect_artifacts(paths: Iterable[Path | str]) -> list[Artifact]:
    """Build Artifacts for file paths, keeping their order.

    Raises:
        NamingError: If a file stem breaks the naming grammar
    """
    return [Artifact.from_path(path) for path in paths]


def order_files(
    artifact_paths: Iterable[Path | str],
    deps_paths: Iterable[Path | str],
    strategy: str | None = None,
    suffixes: Iterable[str] | None = None,
) -> list[Artifact]:
    """Load declarations and order artifact files synchronously."""
    artifacts = collect_artifacts(artifact_paths)
    declarations = load_declarations(deps_paths, suffixes)
    return order_artifacts(artifacts, declarations, strategy)


async def gather_inputs(
    artifact_paths: Iterable[Path | str],
    deps_paths: Iterable[Path | str],
    suffixes: Iterable[str] | None = None,
) -> tuple[list[Artifact], dict[str, set[str]]]:
    """Collect artifacts and declarations concurrently.

    Returns only when both inputs are fully materialized.
    """
    resolved_suffixes = resolve_suffixes(suffixes)
    artifacts, declarations = await asyncio.gather(
        asyncio.to_thread(collect_artifacts, list(artifact_paths)),
        asyncio.to_thread(load_declarations, list(deps_paths), resolved_suffixes),
    )
    return artifacts, declarations


async def aorder_files(
    artifact_paths: Iterable[Path | str],
    deps_paths: Iterable[Path | str],
    strategy: str | None = None,
    suffixes: Iterable[str] | None = None,
) -> list[Artifact]:
    """Async variant of order_files() that reads both inputs concurrently."""
    artifacts, declarations = await gather_inputs(artifact_paths, deps_paths, suffixes)
    return order_artifacts(artifacts, declarations, strategy)
