"""Tests for relation kinds, masks and relation sets.

This module verifies:
- Kind masks decode into sets of atomic kinds and back
- Unknown bits are ignored when decoding
- Atomic masks are exactly the single defined kinds
- RelationRow.with_kind produces an uninserted single-kind copy
- RelationSet.by_kind only lists kinds that have ids
"""

from rtschema.relation import (
    ATOMIC_KINDS,
    ExtractedRelations,
    RelationKind,
    RelationRow,
    RelationSet,
    decode_kind_mask,
    encode_kinds,
    is_atomic_mask,
)


class TestKindMasks:
    """Tests for mask encoding and decoding."""

    def test_atomic_kinds_ascending(self) -> None:
        assert list(ATOMIC_KINDS) == sorted(ATOMIC_KINDS, key=int)
        assert ATOMIC_KINDS[0] is RelationKind.COMMON

    def test_every_kind_is_one_bit(self) -> None:
        for kind in ATOMIC_KINDS:
            assert int(kind) & (int(kind) - 1) == 0

    def test_decode_composite(self) -> None:
        assert decode_kind_mask(6) == {RelationKind.EMBED, RelationKind.LINK}

    def test_decode_zero(self) -> None:
        assert decode_kind_mask(0) == frozenset()

    def test_decode_ignores_unknown_bits(self) -> None:
        assert decode_kind_mask(256 | int(RelationKind.LINK)) == {RelationKind.LINK}

    def test_encode(self) -> None:
        assert encode_kinds([RelationKind.COMMON, RelationKind.EMBED]) == 3
        assert encode_kinds([]) == 0

    def test_encode_decode(self) -> None:
        kinds = {RelationKind.LINK, RelationKind.ASSET}
        assert decode_kind_mask(encode_kinds(kinds)) == kinds

    def test_is_atomic_mask(self) -> None:
        assert is_atomic_mask(int(RelationKind.EMBED))
        assert not is_atomic_mask(3)
        assert not is_atomic_mask(0)
        assert not is_atomic_mask(256)


class TestRelationRow:
    """Tests for RelationRow."""

    def test_kinds_and_atomicity(self) -> None:
        row = RelationRow(id=1, from_content_id=10, from_version=1, to_content_id=20, kind_mask=3)
        assert row.kinds == {RelationKind.COMMON, RelationKind.EMBED}
        assert not row.is_atomic()

    def test_with_kind(self) -> None:
        row = RelationRow(id=5, from_content_id=10, from_version=1, to_content_id=20, field_definition_id=3, kind_mask=6)
        split = row.with_kind(RelationKind.LINK)
        assert split.id is None
        assert split.kind_mask == 4
        assert (split.from_content_id, split.from_version, split.to_content_id, split.field_definition_id) == (10, 1, 20, 3)
        assert row.kind_mask == 6


class TestRelationSets:
    """Tests for ExtractedRelations and RelationSet."""

    def test_extracted_union(self) -> None:
        a = ExtractedRelations(linked_content_ids=frozenset({1}), embedded_location_ids=frozenset({5}))
        b = ExtractedRelations(linked_content_ids=frozenset({2}))
        merged = a.union(b)
        assert merged.linked_content_ids == {1, 2}
        assert merged.embedded_location_ids == {5}

    def test_extracted_is_empty(self) -> None:
        assert ExtractedRelations().is_empty()
        assert not ExtractedRelations(linked_location_ids=frozenset({7})).is_empty()

    def test_relation_set_union(self) -> None:
        merged = RelationSet(linked=frozenset({1})).union(RelationSet(embedded=frozenset({9})))
        assert merged == RelationSet(linked=frozenset({1}), embedded=frozenset({9}))

    def test_by_kind_only_lists_present_kinds(self) -> None:
        assert RelationSet().by_kind() == {}
        assert RelationSet(embedded=frozenset({9})).by_kind() == {RelationKind.EMBED: frozenset({9})}

    def test_linked_and_embedded_may_overlap(self) -> None:
        relation_set = RelationSet(linked=frozenset({1}), embedded=frozenset({1}))
        assert relation_set.by_kind() == {RelationKind.LINK: frozenset({1}), RelationKind.EMBED: frozenset({1})}
