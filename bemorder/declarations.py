"""Flatten ``mustDeps`` declarations into sets of dependency stems.

A declaration is decoded data (dicts and lists), for example::

    {
        "mustDeps": [
            {"block": "button", "mods": {"size": ["s", "m"]}},
            {"block": "input", "elem": "box", "elemMods": {"focused": True}},
            {"mustDeps": [{"block": "i-bem", "elems": ["dom"]}]},
        ]
    }

Entries that cannot be turned into a stem (no ``block``, wrong type) are
skipped; validating declaration syntax is the caller's concern.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .naming import ELEM_SEPARATOR, MOD_SEPARATOR

logger = logging.getLogger(__name__)


def _join_mod(stem: str, *facets: Any) -> str:
    return MOD_SEPARATOR.join([stem, *(str(facet) for facet in facets)])


def _expand_mods(block: str, mods: Any) -> list[str]:
    """Expand a ``mods`` list or mapping into modifier stems."""
    output: list[str] = []

    if isinstance(mods, (list, tuple)):
        for mod_name in mods:
            output.append(_join_mod(block, mod_name))
        return output

    for mod_name, mod_val in mods.items():
        if isinstance(mod_val, (list, tuple)):
            for final_val in mod_val:
                output.append(_join_mod(block, mod_name, final_val))
        elif isinstance(mod_val, bool):
            output.append(_join_mod(block, mod_name))
        else:
            # Both the valued and the bare modifier are buildable targets
            output.append(_join_mod(block, mod_name, mod_val))
            output.append(_join_mod(block, mod_name))

    return output


def _expand_reference(dependency: dict[str, Any]) -> list[str]:
    """Expand a single leaf reference into stems, in declaration order."""
    block = dependency.get("block")
    if not block or not isinstance(block, str):
        logger.debug("Skipping dependency without block: %r", dependency)
        return []

    mods = dependency.get("mods")
    if isinstance(mods, (dict, list, tuple)):
        return _expand_mods(block, mods)

    elems = dependency.get("elems")
    if isinstance(elems, (list, tuple)):
        return [f"{block}{ELEM_SEPARATOR}{elem}" for elem in elems]

    output: list[str] = []
    stem = block

    if dependency.get("mod"):
        stem = _join_mod(stem, dependency["mod"])
    if dependency.get("val"):
        stem = _join_mod(stem, dependency["val"])

    if dependency.get("elem"):
        stem = f"{stem}{ELEM_SEPARATOR}{dependency['elem']}"

        elem_mods = dependency.get("elemMods")
        if isinstance(elem_mods, dict):
            for mod_name, mod_val in elem_mods.items():
                stem = _join_mod(stem, mod_name)
                output.append(stem)

                if isinstance(mod_val, (list, tuple)):
                    # One stem per value; later elemMods chain onto the bare modifier
                    for final_val in mod_val:
                        output.append(_join_mod(stem, final_val))
                elif not isinstance(mod_val, bool):
                    stem = _join_mod(stem, mod_val)

    output.append(stem)
    return output


def flatten_declaration(raw: Any) -> list[str]:
    """Flatten a declaration depth-first into a list of stems.

    Duplicates are kept; use normalize_declaration() for the final set.
    """
    dependencies: Iterable[Any] = raw if isinstance(raw, (list, tuple)) else [raw]
    output: list[str] = []

    for dependency in dependencies:
        if not isinstance(dependency, dict):
            logger.debug("Skipping non-mapping dependency: %r", dependency)
            continue

        if dependency.get("tech") or dependency.get("noDeps"):
            continue

        if dependency.get("mustDeps") is not None:
            output.extend(flatten_declaration(dependency["mustDeps"] or []))
            continue

        output.extend(_expand_reference(dependency))

    return output


def normalize_declaration(raw: Any) -> set[str]:
    """Evaluate a declaration into the set of stems it depends on.

    Args:
        raw: A declaration record, or a list of records

    Returns:
        Set of dependency stems; empty or falsy stems are dropped

    Example:
        >>> sorted(normalize_declaration({"mustDeps": [{"block": "b", "mods": {"m": "v"}}]}))
        ['b_m', 'b_m_v']
    """
    return {stem for stem in flatten_declaration(raw) if stem}
