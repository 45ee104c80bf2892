"""Extraction of linked and embedded content from rich text.

Extraction happens in two steps:

1. `RelationExtractor.extract` walks one document and collects the raw ids
   found in ``content://N`` and ``location://N`` references, split by
   whether the element is a link or an embed (`ExtractedRelations`).
2. `RelationExtractor.resolve` maps location ids to the content objects they
   point to and merges them with the content ids (`RelationSet`). Locations
   that no longer resolve are dropped; a missing node is not an error here.

A content object usually carries one attribute instance per translation.
`relation_set` extracts from every instance and unions the results so that
relations are committed once per content version.
"""

from typing import Iterable

from rtschema.reference import ReferenceScheme, parse_reference
from rtschema.relation import ExtractedRelations, RelationSet
from rtschema.storage import ContentDirectoryInterface
from rtschema.value import RichTextValue, local_tag

from richtext.config import RichTextConfig
from richtext.logging import setup_logging
from richtext.tree import iter_tagged, repository_href

logger = setup_logging()


class RelationExtractor:
    """Collect content ids a rich text document links to or embeds."""

    def __init__(self, directory: ContentDirectoryInterface, config: RichTextConfig | None = None):
        self.directory = directory
        self.config = config or RichTextConfig()

    def extract(self, value: RichTextValue) -> ExtractedRelations:
        """Return raw local ids referenced by one document."""
        ids: dict[tuple[bool, ReferenceScheme], set[int]] = {
            (embedded, scheme): set() for embedded in (False, True) for scheme in ReferenceScheme
        }
        embed_tags = frozenset(self.config.embed_tags)

        for _, element in iter_tagged(value.xml, self.config.reference_tags):
            href = repository_href(element, self.config.href_attribute)
            if href is None:
                continue
            reference = parse_reference(href)
            if reference is None or reference.local_id is None:
                continue
            embedded = local_tag(element.tag) in embed_tags
            ids[(embedded, reference.scheme)].add(reference.local_id)

        return ExtractedRelations(
            linked_content_ids=frozenset(ids[(False, ReferenceScheme.CONTENT)]),
            linked_location_ids=frozenset(ids[(False, ReferenceScheme.LOCATION)]),
            embedded_content_ids=frozenset(ids[(True, ReferenceScheme.CONTENT)]),
            embedded_location_ids=frozenset(ids[(True, ReferenceScheme.LOCATION)]),
        )

    def content_ids_for_locations(self, location_ids: Iterable[int]) -> frozenset[int]:
        """Map location ids to content ids, dropping locations that do not resolve."""
        content_ids: set[int] = set()
        for location_id in location_ids:
            content_id = self.directory.content_id_for_location(location_id)
            if content_id is None:
                logger.debug({"message": "Dropping unresolvable location", "location_id": location_id})
                continue
            content_ids.add(content_id)
        return frozenset(content_ids)

    def resolve(self, extracted: ExtractedRelations) -> RelationSet:
        """Merge content ids with the content ids of referenced locations."""
        return RelationSet(
            linked=extracted.linked_content_ids | self.content_ids_for_locations(extracted.linked_location_ids),
            embedded=extracted.embedded_content_ids | self.content_ids_for_locations(extracted.embedded_location_ids),
        )

    def relation_set(self, values: Iterable[RichTextValue]) -> RelationSet:
        """Union of the resolved relations of several documents.

        Raw ids are merged first so every location is resolved once.
        """
        extracted = ExtractedRelations()
        for value in values:
            extracted = extracted.union(self.extract(value))
        return self.resolve(extracted)
