"""BEM identifier model.

A stem such as ``button_size_s__icon_state_active`` decomposes into:

    block         button
    mod           size
    mod_val       s
    elem          icon
    elem_mod      state
    elem_mod_val  active

Grammar: ``block[_mod[_val]][__elem[_emod[_eval]]]``. A facet that is
present but empty (dangling or doubled separator) makes the stem invalid.

Compound identifiers structurally depend on their simpler ancestors:
``block__elem`` needs ``block``, ``block_mod_val`` needs ``block_mod``
which needs ``block``. The ancestor chain is produced by stripping one
facet at a time, most specific first.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .errors import NamingError

ELEM_SEPARATOR = "__"
MOD_SEPARATOR = "_"

# Most specific facet first
FACET_STRIP_ORDER = ("elem_mod_val", "elem_mod", "elem", "mod_val", "mod")


@dataclass(frozen=True)
class NamingRecord:
    """Structured view of one stem."""

    block: str
    mod: str | None = None
    mod_val: str | None = None
    elem: str | None = None
    elem_mod: str | None = None
    elem_mod_val: str | None = None

    def __post_init__(self) -> None:
        facets = ("block",) + FACET_STRIP_ORDER
        if any(getattr(self, facet) == "" for facet in facets):
            raise NamingError(to_stem_id(self), "empty facet")
        if self.mod_val is not None and self.mod is None:
            raise NamingError(to_stem_id(self), "modifier value without modifier")
        if self.elem_mod is not None and self.elem is None:
            raise NamingError(to_stem_id(self), "element modifier without element")
        if self.elem_mod_val is not None and self.elem_mod is None:
            raise NamingError(to_stem_id(self), "element modifier value without modifier")

    def __str__(self) -> str:
        return to_stem_id(self)


def _split_part(part: str, stem: str, what: str) -> list[str]:
    pieces = part.split(MOD_SEPARATOR)
    if len(pieces) > 3:
        raise NamingError(stem, f"too many modifier facets in {what}")
    if any(piece == "" for piece in pieces):
        raise NamingError(stem, f"empty facet in {what}")
    return pieces


def parse_identifier(stem: str) -> NamingRecord:
    """Parse a stem into a NamingRecord.

    Raises:
        NamingError: If the stem is empty, has an empty facet, or has
            more facets than the grammar allows.
    """
    if not isinstance(stem, str) or not stem:
        raise NamingError(str(stem), "empty stem")

    parts = stem.split(ELEM_SEPARATOR)
    if len(parts) > 2:
        raise NamingError(stem, "more than one element separator")

    block_pieces = _split_part(parts[0], stem, "block")
    block = block_pieces[0]
    mod = block_pieces[1] if len(block_pieces) > 1 else None
    mod_val = block_pieces[2] if len(block_pieces) > 2 else None

    elem = elem_mod = elem_mod_val = None
    if len(parts) == 2:
        elem_pieces = _split_part(parts[1], stem, "element")
        elem = elem_pieces[0]
        elem_mod = elem_pieces[1] if len(elem_pieces) > 1 else None
        elem_mod_val = elem_pieces[2] if len(elem_pieces) > 2 else None

    return NamingRecord(
        block=block,
        mod=mod,
        mod_val=mod_val,
        elem=elem,
        elem_mod=elem_mod,
        elem_mod_val=elem_mod_val,
    )


def is_entity_only(record: NamingRecord) -> bool:
    """True iff only the block facet is populated."""
    return all(getattr(record, facet) is None for facet in FACET_STRIP_ORDER)


def to_stem_id(record: NamingRecord) -> str:
    """Serialize a record back into its stem."""
    output = record.block
    if record.mod:
        output += f"{MOD_SEPARATOR}{record.mod}"
    if record.mod_val:
        output += f"{MOD_SEPARATOR}{record.mod_val}"
    if record.elem:
        output += f"{ELEM_SEPARATOR}{record.elem}"
    if record.elem_mod:
        output += f"{MOD_SEPARATOR}{record.elem_mod}"
    if record.elem_mod_val:
        output += f"{MOD_SEPARATOR}{record.elem_mod_val}"
    return output


def strip_facet(record: NamingRecord) -> NamingRecord | None:
    """Return a new record without its most specific facet.

    Returns None for entity-only records, which have nothing to strip.
    """
    for facet in FACET_STRIP_ORDER:
        if getattr(record, facet) is not None:
            return replace(record, **{facet: None})
    return None


def ancestor_chain(record: NamingRecord) -> list[str]:
    """List the ancestors of a record, nearest first, ending at the block.

    Examples:
        block__elem_mod_val -> [block__elem_mod, block__elem, block]
        block_mod_val       -> [block_mod, block]
        block               -> []
    """
    chain = []
    current = strip_facet(record)
    while current is not None:
        chain.append(to_stem_id(current))
        current = strip_facet(current)
    return chain
