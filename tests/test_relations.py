"""Tests for RelationExtractor."""

from rtschema.relation import RelationSet
from rtschema.value import RichTextValue

from tests.conftest import make_document


class TestExtract:
    """Tests for raw id extraction from one document."""

    def test_links_and_embeds(self, extractor) -> None:
        value = RichTextValue(
            make_document(
                '<para><link xlink:href="content://1">a</link> and <link xlink:href="content://2">b</link></para>'
                '<ezembed xlink:href="location://5"/>'
            )
        )
        extracted = extractor.extract(value)
        assert extracted.linked_content_ids == {1, 2}
        assert extracted.embedded_location_ids == {5}
        assert extracted.linked_location_ids == frozenset()
        assert extracted.embedded_content_ids == frozenset()

    def test_inline_embed_counts_as_embed(self, extractor) -> None:
        value = RichTextValue(make_document('<para><ezembedinline xlink:href="content://42"/></para>'))
        assert extractor.extract(value).embedded_content_ids == {42}

    def test_non_numeric_and_external_references_are_ignored(self, extractor) -> None:
        value = RichTextValue(
            make_document(
                '<para><link xlink:href="content://abc">a</link>'
                '<link xlink:href="https://example.com">b</link>'
                '<link xlink:href="content://">c</link></para>'
            )
        )
        assert extractor.extract(value).is_empty()

    def test_fragment_does_not_matter(self, extractor) -> None:
        value = RichTextValue(make_document('<para><link xlink:href="content://99#section1">a</link></para>'))
        assert extractor.extract(value).linked_content_ids == {99}

    def test_empty_document(self, extractor) -> None:
        assert extractor.extract(RichTextValue.empty()).is_empty()


class TestRelationSet:
    """Tests for resolved relation sets."""

    def test_locations_resolve_to_content(self, extractor) -> None:
        """Two links and an embedded location pointing to content 9."""
        value = RichTextValue(
            make_document(
                '<para><link xlink:href="content://1">a</link> and <link xlink:href="content://2">b</link></para>'
                '<ezembed xlink:href="location://5"/>'
            )
        )
        assert extractor.relation_set([value]) == RelationSet(linked=frozenset({1, 2}), embedded=frozenset({9}))

    def test_unresolvable_location_is_dropped(self, extractor) -> None:
        value = RichTextValue(
            make_document('<para><link xlink:href="location://7">a</link><link xlink:href="content://1">b</link></para>')
        )
        assert extractor.relation_set([value]) == RelationSet(linked=frozenset({1}))

    def test_union_over_translations(self, extractor) -> None:
        english = RichTextValue(make_document('<para><link xlink:href="content://1">a</link></para>'))
        german = RichTextValue(
            make_document('<para><link xlink:href="content://2">b</link></para><ezembed xlink:href="content://42"/>')
        )
        assert extractor.relation_set([english, german]) == RelationSet(
            linked=frozenset({1, 2}),
            embedded=frozenset({42}),
        )

    def test_same_target_linked_and_embedded(self, extractor) -> None:
        value = RichTextValue(
            make_document('<para><link xlink:href="content://9">a</link></para><ezembed xlink:href="location://5"/>')
        )
        relation_set = extractor.relation_set([value])
        assert relation_set.linked == {9}
        assert relation_set.embedded == {9}

    def test_no_values(self, extractor) -> None:
        assert extractor.relation_set([]).is_empty()
