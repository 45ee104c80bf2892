"""Test fixtures for the rich text engine.

This module provides:
- `make_document`, building a DocBook section with the rich text namespaces
  declared around a body fragment
- A content directory with a small, fixed id map (see `directory`)
- Pytest fixtures for in-memory collaborators and a wired `RichTextDataType`
- `make_attribute` for content attribute instances

Directory contents used throughout the tests:

| local id        | remote id   | notes                       |
|-----------------|-------------|-----------------------------|
| content 1       | "one"       |                             |
| content 2       | "two"       |                             |
| content 9       | "nine"      |                             |
| content 42      | "abc"       |                             |
| content 99      | "remote-99" |                             |
| location 5      | "loc-5"     | points to content 9         |
| location 7      | (none)      | not resolvable in any way   |
"""

import pytest

from rtschema.field import ContentAttribute
from rtschema.value import DOCBOOK_NS, EZXHTML_NS, XLINK_NS

from richtext.config import RichTextConfig
from richtext.datatype import RichTextDataType
from richtext.relations import RelationExtractor
from richtext.resolver import ReferenceResolver
from richtext.rewriter import LinkRewriter
from richtext.storage.memory import (
    InMemoryContentDirectory,
    InMemoryContentRepository,
    InMemoryFieldStorage,
    InMemoryRelationTable,
)

HREF = f"{{{XLINK_NS}}}href"


def make_document(body: str = "") -> str:
    """Wrap a body fragment in a rich text section element."""
    return (
        f'<section xmlns="{DOCBOOK_NS}" xmlns:xlink="{XLINK_NS}" xmlns:ezxhtml="{EZXHTML_NS}" '
        f'version="5.0-variant ezpublish-1.0">{body}</section>'
    )


def make_attribute(
    attribute_id: int = 100,
    content_id: int = 10,
    version: int = 1,
    language_code: str = "eng-GB",
    data_text: str = "",
    identifier: str = "body",
) -> ContentAttribute:
    """Create a rich text attribute instance with sensible defaults."""
    return ContentAttribute(
        id=attribute_id,
        content_id=content_id,
        version=version,
        field_definition_id=7,
        identifier=identifier,
        language_code=language_code,
        data_text=data_text,
    )


@pytest.fixture
def directory() -> InMemoryContentDirectory:
    """Content directory with the id map from the module docstring."""
    directory = InMemoryContentDirectory()
    for content_id, remote_id in ((1, "one"), (2, "two"), (9, "nine"), (42, "abc"), (99, "remote-99")):
        directory.add_content(content_id, remote_id)
    directory.add_location(5, "loc-5", content_id=9)
    return directory


@pytest.fixture
def config() -> RichTextConfig:
    return RichTextConfig()


@pytest.fixture
def rewriter(directory: InMemoryContentDirectory, config: RichTextConfig) -> LinkRewriter:
    return LinkRewriter(ReferenceResolver(directory), config)


@pytest.fixture
def extractor(directory: InMemoryContentDirectory, config: RichTextConfig) -> RelationExtractor:
    return RelationExtractor(directory, config)


@pytest.fixture
def relation_table() -> InMemoryRelationTable:
    return InMemoryRelationTable()


@pytest.fixture
def field_storage() -> InMemoryFieldStorage:
    return InMemoryFieldStorage()


@pytest.fixture
def repository() -> InMemoryContentRepository:
    return InMemoryContentRepository()


@pytest.fixture
def datatype(
    directory: InMemoryContentDirectory,
    field_storage: InMemoryFieldStorage,
    repository: InMemoryContentRepository,
    relation_table: InMemoryRelationTable,
    config: RichTextConfig,
) -> RichTextDataType:
    """Datatype wired to in-memory collaborators."""
    return RichTextDataType(
        directory=directory,
        external_storage=field_storage,
        repository=repository,
        relation_table=relation_table,
        config=config,
    )
