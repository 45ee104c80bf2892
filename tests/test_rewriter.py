"""Tests for LinkRewriter.

This module verifies:
- Documents without references survive to_portable then to_local unchanged
- content:// ids are rewritten to remote ids and back
- Fragments are preserved in both directions
- Unresolvable references stay on export and are removed on import
- Removal keeps the text that follows the removed element
- Malformed or empty references, external links and other tags are untouched
- The caller's value is never modified
"""

from rtschema.value import DOCBOOK_NS, RichTextValue, qualified

from richtext.config import RichTextConfig
from richtext.resolver import ReferenceResolver
from richtext.rewriter import LinkRewriter, RewriteDirection
from richtext.storage.memory import InMemoryContentDirectory
from tests.conftest import HREF, make_document

LINK = qualified(DOCBOOK_NS, "link")
EMBED = qualified(DOCBOOK_NS, "ezembed")
PARA = qualified(DOCBOOK_NS, "para")


def hrefs(value: RichTextValue, tag: str = LINK) -> list[str]:
    return [element.get(HREF) for element in value.xml.iter(tag)]


class TestRoundTrip:
    """Tests for to_portable followed by to_local."""

    def test_document_without_references(self, rewriter) -> None:
        """Rewriting both ways leaves a document without references intact."""
        original = RichTextValue(
            make_document(
                "<title>Heading</title>"
                "<para>Some <emphasis role='strong'>bold</emphasis> text.</para>"
                "<itemizedlist><listitem><para>item</para></listitem></itemizedlist>"
            )
        )
        assert rewriter.to_local(rewriter.to_portable(original)) == original

    def test_content_reference(self, rewriter) -> None:
        """content://42 becomes content://abc and back."""
        original = RichTextValue(make_document('<para><link xlink:href="content://42">see</link></para>'))

        portable = rewriter.to_portable(original)
        assert hrefs(portable) == ["content://abc"]

        local = rewriter.to_local(portable)
        assert hrefs(local) == ["content://42"]
        assert local == original

    def test_fragment_is_preserved(self, rewriter) -> None:
        """The #fragment survives both directions unchanged."""
        original = RichTextValue(make_document('<para><link xlink:href="content://99#section1">x</link></para>'))

        portable = rewriter.to_portable(original)
        assert hrefs(portable) == ["content://remote-99#section1"]
        assert hrefs(rewriter.to_local(portable)) == ["content://99#section1"]

    def test_location_reference(self, rewriter) -> None:
        """Locations map to location remote ids, not content remote ids."""
        original = RichTextValue(make_document('<ezembed xlink:href="location://5"/>'))

        portable = rewriter.to_portable(original)
        assert hrefs(portable, EMBED) == ["location://loc-5"]
        assert hrefs(rewriter.to_local(portable), EMBED) == ["location://5"]

    def test_other_attributes_and_children_are_kept(self, rewriter) -> None:
        """Only the href changes."""
        original = RichTextValue(
            make_document(
                '<para><link xlink:href="content://42" xlink:title="Title" ezxhtml:class="btn">'
                "<emphasis>label</emphasis></link> tail</para>"
            )
        )
        portable = rewriter.to_portable(original)
        link = next(portable.xml.iter(LINK))
        original_link = next(original.xml.iter(LINK))

        assert {k: v for k, v in link.attrib.items() if k != HREF} == {
            k: v for k, v in original_link.attrib.items() if k != HREF
        }
        assert "".join(link.itertext()) == "label"
        assert link.tail == " tail"


class TestUnresolvable:
    """Tests for references that cannot be resolved."""

    def test_export_leaves_reference(self, rewriter) -> None:
        """location://7 cannot be resolved and stays as is on export."""
        original = RichTextValue(make_document('<para><link xlink:href="location://7">x</link></para>'))
        portable = rewriter.to_portable(original)
        assert hrefs(portable) == ["location://7"]
        assert portable == original

    def test_export_leaves_reference_with_unusable_remote_id(self) -> None:
        """Remote ids that a reference cannot carry are not written on export."""
        directory = InMemoryContentDirectory()
        directory.add_content(3, "two words")
        directory.add_content(4, "a#b")
        directory.add_content(5, "plain")
        rewriter = LinkRewriter(ReferenceResolver(directory))
        original = RichTextValue(
            make_document(
                '<para><link xlink:href="content://3">a</link>'
                '<link xlink:href="content://4#top">b</link>'
                '<link xlink:href="content://5">c</link></para>'
            )
        )

        portable = rewriter.to_portable(original)

        assert hrefs(portable) == ["content://3", "content://4#top", "content://plain"]

    def test_import_removes_element(self, rewriter) -> None:
        """An unknown remote id removes the element on import."""
        portable = RichTextValue(
            make_document('<para>before <link xlink:href="content://missing">gone</link> after</para>')
        )
        local = rewriter.to_local(portable)

        assert list(local.xml.iter(LINK)) == []
        para = next(local.xml.iter(PARA))
        assert para.text == "before  after"
        assert "gone" not in "".join(local.xml.itertext())

    def test_import_removal_keeps_tail_after_sibling(self, rewriter) -> None:
        """The tail of a removed element moves onto the previous sibling."""
        portable = RichTextValue(
            make_document(
                '<para><emphasis>a</emphasis>, <link xlink:href="location://nowhere">b</link> and c</para>'
            )
        )
        local = rewriter.to_local(portable)
        emphasis = next(local.xml.iter(qualified(DOCBOOK_NS, "emphasis")))
        assert emphasis.tail == ",  and c"

    def test_import_removes_only_unresolvable(self, rewriter) -> None:
        portable = RichTextValue(
            make_document(
                '<para><link xlink:href="content://abc">ok</link>'
                '<link xlink:href="content://missing">bad</link></para>'
                '<ezembed xlink:href="location://loc-5"/>'
            )
        )
        local = rewriter.to_local(portable)
        assert hrefs(local) == ["content://42"]
        assert hrefs(local, EMBED) == ["location://5"]

    def test_remote_id_of_other_scheme_is_unresolvable(self, rewriter) -> None:
        """A content remote id used with location:// does not resolve."""
        portable = RichTextValue(make_document('<ezembed xlink:href="location://abc"/>'))
        assert list(rewriter.to_local(portable).xml.iter(EMBED)) == []


class TestSkipped:
    """Tests for references the rewriter does not touch."""

    def test_malformed_reference(self, rewriter) -> None:
        original = RichTextValue(make_document('<para><link xlink:href="content://4 2">x</link></para>'))
        assert rewriter.to_portable(original) == original
        assert rewriter.to_local(original) == original

    def test_empty_identifier(self, rewriter) -> None:
        original = RichTextValue(make_document('<para><link xlink:href="content://#top">x</link></para>'))
        assert hrefs(rewriter.to_portable(original)) == ["content://#top"]
        assert hrefs(rewriter.to_local(original)) == ["content://#top"]

    def test_external_link(self, rewriter) -> None:
        original = RichTextValue(make_document('<para><link xlink:href="https://example.com/">x</link></para>'))
        assert rewriter.to_local(original) == original

    def test_remote_id_on_export(self, rewriter) -> None:
        """A document that is already portable passes through export unchanged."""
        original = RichTextValue(make_document('<para><link xlink:href="content://abc">x</link></para>'))
        assert rewriter.to_portable(original) == original

    def test_other_tags_are_ignored(self, rewriter) -> None:
        original = RichTextValue(make_document('<para><anchor xlink:href="content://42"/></para>'))
        assert rewriter.to_portable(original) == original
        assert rewriter.to_local(original) == original


class TestImmutability:
    """Tests that rewriting works on a copy."""

    def test_original_is_not_mutated(self, rewriter) -> None:
        original = RichTextValue(
            make_document('<para><link xlink:href="content://42">x</link><link xlink:href="content://none">y</link></para>')
        )
        before = str(original)

        rewriter.to_portable(original)
        rewriter.to_local(original)

        assert str(original) == before
        assert hrefs(original) == ["content://42", "content://none"]

    def test_result_is_a_new_value(self, rewriter) -> None:
        original = RichTextValue(make_document("<para>x</para>"))
        result = rewriter.rewrite(original, RewriteDirection.TO_PORTABLE)
        assert result is not original
        assert result.xml is not original.xml


class TestConfiguredTags:
    """Tests for custom link and embed tags."""

    def test_extra_link_tag(self, directory) -> None:
        config = RichTextConfig(link_tags=("link", "ezlink"))
        rewriter = LinkRewriter(ReferenceResolver(directory), config)
        original = RichTextValue(make_document('<para><ezlink xlink:href="content://42">x</ezlink></para>'))
        assert hrefs(rewriter.to_portable(original), qualified(DOCBOOK_NS, "ezlink")) == ["content://abc"]
