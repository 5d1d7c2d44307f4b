"""Artifacts routed through the ordering.

The engine never looks inside an artifact; it only needs its stem. An
Artifact carries the stem and its parsed naming next to the payload
location so nothing has to be attached to the payload itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .naming import NamingRecord, parse_identifier


def stem_from_path(path: Path | str, ext: str | None = None) -> str:
    """Get the file name without its extension.

    Args:
        path: File path
        ext: Extension to strip (may be compound, e.g. ".deps.yaml").
            Defaults to the last suffix of the file name.

    Examples:
        blocks/button__icon.css -> button__icon
        deps/button.deps.yaml with ext=".deps.yaml" -> button
    """
    name = Path(path).name
    if ext:
        return name[: -len(ext)] if name.endswith(ext) else name
    return Path(name).stem


@dataclass(frozen=True)
class Artifact:
    """One artifact file with its stem and naming."""

    path: Path
    stem: str
    naming: NamingRecord

    @classmethod
    def from_path(cls, path: Path | str, ext: str | None = None) -> "Artifact":
        """Build an Artifact from a file path.

        Raises:
            NamingError: If the file stem breaks the naming grammar
        """
        path = Path(path)
        stem = stem_from_path(path, ext)
        return cls(path=path, stem=stem, naming=parse_identifier(stem))
