"""Tests for ReferenceResolver."""

from rtschema.reference import ReferenceScheme

from richtext.resolver import ReferenceResolver


class TestReferenceResolver:
    """Tests for local <-> remote id resolution per scheme."""

    def test_content_to_remote(self, directory) -> None:
        assert ReferenceResolver(directory).to_remote(ReferenceScheme.CONTENT, 42) == "abc"

    def test_location_to_remote(self, directory) -> None:
        assert ReferenceResolver(directory).to_remote(ReferenceScheme.LOCATION, 5) == "loc-5"

    def test_content_to_local(self, directory) -> None:
        assert ReferenceResolver(directory).to_local(ReferenceScheme.CONTENT, "abc") == 42

    def test_location_to_local_is_location_id(self, directory) -> None:
        """Locations resolve to their own id, not the content they point to."""
        assert ReferenceResolver(directory).to_local(ReferenceScheme.LOCATION, "loc-5") == 5

    def test_unknown_ids(self, directory) -> None:
        resolver = ReferenceResolver(directory)
        assert resolver.to_remote(ReferenceScheme.LOCATION, 7) is None
        assert resolver.to_remote(ReferenceScheme.CONTENT, 12345) is None
        assert resolver.to_local(ReferenceScheme.CONTENT, "missing") is None
        assert resolver.to_local(ReferenceScheme.LOCATION, "abc") is None
