"""Graph command: show the dependency graph built for a set of artifacts."""

from pathlib import Path

import typer

from ...errors import DeclarationFileError, GraphNamingError, NamingError
from ...graph import build_graph
from ...pipeline import collect_artifacts
from ...sources import load_declarations
from ..app import app, console, get_json_mode
from ..utils import Output
from .order_cmd import report_engine_error, warn_skipped_files


@app.command("graph")
def graph_command(
    files: list[Path] | None = typer.Argument(
        None,
        help="Artifact files (their stems and ancestors become graph nodes)",
    ),
    deps: list[Path] | None = typer.Option(
        None,
        "--deps",
        "-d",
        help="Declaration file or directory (repeatable)",
    ),
):
    """Show every graph node with its direct dependencies.

    Nodes that are not backed by an artifact file are marked as virtual.

    Examples:
        bemorder graph --deps blocks/
        bemorder --json graph blocks/*.css -d blocks/
    """
    out = Output(console=console, json_mode=get_json_mode())
    warn_skipped_files(out, deps or [])

    try:
        artifacts = collect_artifacts(files or [])
        declarations = load_declarations(deps or [])
        graph = build_graph(declarations, [artifact.stem for artifact in artifacts])
    except (NamingError, GraphNamingError, DeclarationFileError) as exc:
        report_engine_error(out, exc)
        raise typer.Exit(out.finish())

    present = {artifact.stem for artifact in artifacts}
    rows = [
        [
            stem,
            ", ".join(graph.dependencies_of(stem)) or "-",
            "artifact" if stem in present else "virtual",
        ]
        for stem in graph.nodes
    ]

    out.set_data("graph", graph.to_dict())
    out.table(
        "Dependency Graph",
        ["Stem", "Depends on", "Kind"],
        rows,
        data_key="nodes",
    )
    out.success(f"{len(graph)} node(s)", node_count=len(graph))

    raise typer.Exit(out.finish())
