"""Loading dependency declarations from files.

Two layouts are supported:

- Per-stem files: ``button.deps.yaml`` holds the declaration of ``button``
  (a record such as ``{mustDeps: [...]}``, or a list of records).
- Bundle files: any other YAML/JSON file holding a mapping of stem to
  declaration record, for example::

      admin-post:
        mustDeps:
          - block: mixins
          - block: variables
      mixins:
        mustDeps:
          - block: variables

The same stem may be declared by several files; its dependencies are
merged by union.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

import yaml

from .declarations import normalize_declaration
from .errors import DeclarationFileError
from .graph import merge_declarations

logger = logging.getLogger(__name__)

_BUNDLE_SUFFIXES = (".yaml", ".yml", ".json")


def is_decodable(path: Path) -> bool:
    """Whether a declaration file is in a format this loader reads."""
    return path.suffix in _BUNDLE_SUFFIXES


def resolve_suffixes(suffixes: Iterable[str] | None) -> list[str]:
    """Per-stem declaration suffixes, falling back to config."""
    if suffixes is not None:
        return list(suffixes)
    from .config import get_config

    return list(get_config().sources.deps_suffixes)


def _decode(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DeclarationFileError(str(path), str(exc)) from exc

    try:
        if path.suffix == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DeclarationFileError(str(path), str(exc)) from exc


def _matching_suffix(path: Path, suffixes: list[str]) -> str | None:
    # Longest first so ".deps.yaml" wins over ".yaml"
    for suffix in sorted(suffixes, key=len, reverse=True):
        if path.name.endswith(suffix) and len(path.name) > len(suffix):
            return suffix
    return None


def load_declaration_file(
    path: Path | str,
    suffixes: Iterable[str] | None = None,
) -> list[tuple[str, set[str]]]:
    """
    Load one declaration file.

    Args:
        path: Per-stem or bundle declaration file
        suffixes: Per-stem file suffixes (defaults to config)

    Returns:
        List of (stem, dependency stems) pairs, in file order

    Raises:
        DeclarationFileError: If the file cannot be read or decoded, or a
            bundle file does not hold a mapping
    """
    path = Path(path)
    suffix = _matching_suffix(path, resolve_suffixes(suffixes))
    data = _decode(path)

    if suffix is not None:
        stem = path.name[: -len(suffix)]
        return [(stem, normalize_declaration(data or []))]

    if data is None:
        return []
    if not isinstance(data, dict):
        raise DeclarationFileError(
            str(path), "bundle file must map stems to declarations"
        )

    return [(str(stem), normalize_declaration(record or [])) for stem, record in data.items()]


def iter_declaration_files(
    paths: Iterable[Path | str],
    suffixes: Iterable[str] | None = None,
) -> list[Path]:
    """Expand directories into the per-stem declaration files they contain.

    Plain file paths are kept as given. Directory contents are sorted so
    the result does not depend on file system listing order.
    """
    resolved_suffixes = resolve_suffixes(suffixes)
    files: list[Path] = []

    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            found = sorted(
                p
                for p in path.rglob("*")
                if p.is_file() and _matching_suffix(p, resolved_suffixes)
            )
            logger.debug("Found %d declaration file(s) in %s", len(found), path)
            files.extend(found)
        else:
            files.append(path)

    return files


def load_declarations(
    paths: Iterable[Path | str],
    suffixes: Iterable[str] | None = None,
) -> dict[str, set[str]]:
    """Load and merge declarations from files and directories."""
    resolved_suffixes = resolve_suffixes(suffixes)
    pairs: list[tuple[str, set[str]]] = []

    for path in iter_declaration_files(paths, resolved_suffixes):
        if not is_decodable(path):
            logger.info("Skipping %s: not a YAML or JSON file", path)
            continue
        pairs.extend(load_declaration_file(path, resolved_suffixes))

    return merge_declarations(pairs)
