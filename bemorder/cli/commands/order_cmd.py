"""Order command: print artifact files in dependency order."""

import logging
from pathlib import Path

import typer

from ...errors import (
    CircularDependencyError,
    DeclarationFileError,
    GraphNamingError,
    NamingError,
    OrderNamingError,
)
from ...ordering import ORDERERS
from ...pipeline import order_files
from ...sources import is_decodable, iter_declaration_files
from ..app import app, console, get_json_mode
from ..utils import Output, ExitCode

logger = logging.getLogger(__name__)


def report_engine_error(out: Output, exc: Exception) -> None:
    """Map an engine or loader exception onto an error line and exit code."""
    if isinstance(exc, CircularDependencyError):
        out.error(
            str(exc),
            exit_code=ExitCode.CYCLE_ERROR,
            suggestion="Remove one of the mustDeps entries on this cycle",
            cycle=exc.path,
        )
    elif isinstance(exc, (NamingError, GraphNamingError, OrderNamingError)):
        out.error(
            str(exc),
            exit_code=ExitCode.NAMING_ERROR,
            suggestion="Expected block[_mod[_val]][__elem[_mod[_val]]]",
            stem=exc.stem,
        )
    elif isinstance(exc, DeclarationFileError):
        out.error(str(exc), exit_code=ExitCode.FILE_ERROR, path=exc.path)
    else:
        raise exc


def warn_skipped_files(out: Output, deps: list[Path]) -> None:
    """Warn about declaration files the loader will not read."""
    for path in iter_declaration_files(deps):
        if not is_decodable(path):
            out.warning(
                f"Skipped {path}: not a YAML or JSON file",
                suggestion="Convert it to .deps.yaml or .deps.json",
            )


@app.command("order")
def order_command(
    files: list[Path] = typer.Argument(
        ...,
        help="Artifact files, in arrival order",
    ),
    deps: list[Path] | None = typer.Option(
        None,
        "--deps",
        "-d",
        help="Declaration file or directory (repeatable)",
    ),
    strategy: str | None = typer.Option(
        None,
        "--strategy",
        "-s",
        help="Ordering strategy: bfs | weight (defaults to config)",
    ),
):
    """Print artifact files so each one follows everything it depends on.

    Examples:
        bemorder order blocks/*.css --deps blocks/
        bemorder order a.css b.css --deps bundle.yaml --strategy weight
        bemorder --json order blocks/*.css -d blocks/
    """
    out = Output(console=console, json_mode=get_json_mode())

    if strategy is not None and strategy not in ORDERERS:
        out.error(
            f"Unknown strategy: {strategy}",
            suggestion=f"Valid strategies: {', '.join(sorted(ORDERERS))}",
        )
        raise typer.Exit(out.finish())

    warn_skipped_files(out, deps or [])

    try:
        ordered = order_files(files, deps or [], strategy=strategy)
    except (
        CircularDependencyError,
        NamingError,
        GraphNamingError,
        OrderNamingError,
        DeclarationFileError,
    ) as exc:
        logger.debug("Ordering failed", exc_info=True)
        report_engine_error(out, exc)
        raise typer.Exit(out.finish())

    out.set_data("order", [str(artifact.path) for artifact in ordered])
    for artifact in ordered:
        out.text(str(artifact.path))

    raise typer.Exit(out.finish())
