"""Relation model for content-to-content relations.

The legacy relation table stores one integer ``relation_type`` per row, a
bitmask over a fixed set of atomic relation kinds. Older writers OR-ed kinds
into a single row, so a row may carry a *composite* mask (e.g. ``6`` for
embed and link together).

Inside this package relation kinds are handled as sets of `RelationKind`;
the integer mask only exists at the relation table boundary
(`RelationRow.kind_mask`), converted with `decode_kind_mask` and
`encode_kinds`.

This module also defines the relation sets produced by the relation
extractor:

- **ExtractedRelations**: raw content and location ids found in a document,
  split by link vs embed
- **RelationSet**: content ids only (locations resolved), split by link vs
  embed, ready to be committed to the relation table
"""

from enum import IntEnum
from typing import Iterable, Optional

from pydantic import BaseModel, Field


class RelationKind(IntEnum):
    """Atomic relation kinds. Each value is a single bit."""

    COMMON = 1
    EMBED = 2
    LINK = 4
    FIELD = 8
    ASSET = 16
    RESERVED_32 = 32
    RESERVED_64 = 64
    RESERVED_128 = 128


# Fixed decomposition order: ascending bit value.
ATOMIC_KINDS: tuple[RelationKind, ...] = tuple(sorted(RelationKind))
_ATOMIC_VALUES = frozenset(int(kind) for kind in ATOMIC_KINDS)


def decode_kind_mask(mask: int) -> frozenset[RelationKind]:
    """Return the atomic kinds present in a bitmask. Unknown bits are ignored."""
    return frozenset(kind for kind in ATOMIC_KINDS if mask & kind)


def encode_kinds(kinds: Iterable[RelationKind]) -> int:
    """Encode a set of kinds into the table's integer bitmask."""
    mask = 0
    for kind in kinds:
        mask |= int(kind)
    return mask


def is_atomic_mask(mask: int) -> bool:
    """True if the mask is exactly one of the defined atomic kinds."""
    return mask in _ATOMIC_VALUES


class RelationRow(BaseModel):
    """One row of the relation table.

    Attributes:
        id: Row id assigned by the table, None for rows not yet inserted.
        from_content_id: Content object holding the relation.
        from_version: Version of the source content object.
        to_content_id: Related content object.
        field_definition_id: Field definition that created the relation, or 0
            for object-level relations (links and embeds).
        kind_mask: Integer bitmask of relation kinds.
    """

    model_config = {"frozen": True}

    id: Optional[int] = None
    from_content_id: int
    from_version: int
    to_content_id: int
    field_definition_id: int = 0
    kind_mask: int = Field(ge=0)

    @property
    def kinds(self) -> frozenset[RelationKind]:
        return decode_kind_mask(self.kind_mask)

    def is_atomic(self) -> bool:
        return is_atomic_mask(self.kind_mask)

    def with_kind(self, kind: RelationKind) -> "RelationRow":
        """Copy of this row carrying exactly one kind and no row id."""
        return self.model_copy(update={"id": None, "kind_mask": int(kind)})


class ExtractedRelations(BaseModel):
    """Raw ids referenced by one rich text document.

    Ids are local ids as found in ``content://`` and ``location://``
    references; location ids still need resolving to their content objects.
    """

    model_config = {"frozen": True}

    linked_content_ids: frozenset[int] = frozenset()
    linked_location_ids: frozenset[int] = frozenset()
    embedded_content_ids: frozenset[int] = frozenset()
    embedded_location_ids: frozenset[int] = frozenset()

    def union(self, other: "ExtractedRelations") -> "ExtractedRelations":
        return ExtractedRelations(
            linked_content_ids=self.linked_content_ids | other.linked_content_ids,
            linked_location_ids=self.linked_location_ids | other.linked_location_ids,
            embedded_content_ids=self.embedded_content_ids | other.embedded_content_ids,
            embedded_location_ids=self.embedded_location_ids | other.embedded_location_ids,
        )

    def is_empty(self) -> bool:
        return not (
            self.linked_content_ids or self.linked_location_ids or self.embedded_content_ids or self.embedded_location_ids
        )


class RelationSet(BaseModel):
    """Content ids linked and embedded by a content version.

    Built fresh for each publish and never stored as such; it is committed to
    the relation table as LINK and EMBED rows.
    """

    model_config = {"frozen": True}

    linked: frozenset[int] = frozenset()
    embedded: frozenset[int] = frozenset()

    def union(self, other: "RelationSet") -> "RelationSet":
        return RelationSet(linked=self.linked | other.linked, embedded=self.embedded | other.embedded)

    def is_empty(self) -> bool:
        return not (self.linked or self.embedded)

    def by_kind(self) -> dict[RelationKind, frozenset[int]]:
        """Input relation list for committing: only kinds with ids are present."""
        out: dict[RelationKind, frozenset[int]] = {}
        if self.linked:
            out[RelationKind.LINK] = self.linked
        if self.embedded:
            out[RelationKind.EMBED] = self.embedded
        return out
