"""In-memory storage implementations for testing and development.

This module provides dictionary-based implementations of the collaborator
interfaces in `rtschema.storage`. They are suitable for:

- **Unit testing**: Fast, isolated tests without a database
- **Command line use**: Rewriting single documents against a small id map
- **Prototyping**: Exercising the datatype before wiring a real repository

Data is lost when the process exits, and none of these classes are safe for
concurrent use.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Sequence

from rtschema.field import ContentAttribute, Field, VersionInfo
from rtschema.relation import RelationRow
from rtschema.storage import (
    ContentDirectoryInterface,
    ContentRepositoryInterface,
    FieldStorageInterface,
    RelationTableInterface,
)


class InMemoryContentDirectory(ContentDirectoryInterface):
    """Content and location id maps held in dictionaries.

    Example:
        ```python
        directory = InMemoryContentDirectory()
        directory.add_content(42, "abc")
        directory.add_location(5, "loc-5", content_id=9)
        directory.find_remote_id(42)  # "abc"
        ```
    """

    def __init__(self) -> None:
        self._content_remote_ids: dict[int, str] = {}
        self._content_ids: dict[str, int] = {}
        self._location_remote_ids: dict[int, str] = {}
        self._location_ids: dict[str, int] = {}
        self._location_content: dict[int, int] = {}

    def add_content(self, content_id: int, remote_id: str) -> None:
        self._content_remote_ids[content_id] = remote_id
        self._content_ids[remote_id] = content_id

    def add_location(self, location_id: int, remote_id: str | None = None, content_id: int | None = None) -> None:
        """Register a location.

        Args:
            location_id: Local location id.
            remote_id: Remote id of the location; None leaves it without one.
            content_id: Content object the location points to, if known.
        """
        if remote_id is not None:
            self._location_remote_ids[location_id] = remote_id
            self._location_ids[remote_id] = location_id
        if content_id is not None:
            self._location_content[location_id] = content_id

    def find_content_id(self, remote_id: str) -> int | None:
        return self._content_ids.get(remote_id)

    def find_remote_id(self, content_id: int) -> str | None:
        return self._content_remote_ids.get(content_id)

    def find_location_id(self, remote_id: str) -> int | None:
        return self._location_ids.get(remote_id)

    def find_remote_id_for_location(self, location_id: int) -> str | None:
        return self._location_remote_ids.get(location_id)

    def content_id_for_location(self, location_id: int) -> int | None:
        return self._location_content.get(location_id)


class InMemoryRelationTable(RelationTableInterface):
    """Relation table rows in a dictionary keyed by row id.

    Row ids are assigned from a counter starting at 1. `transaction()` takes a
    snapshot on entry and restores it if the outermost block raises.
    """

    def __init__(self) -> None:
        self._rows: dict[int, RelationRow] = {}
        self._next_id = 1
        self._depth = 0

    def fetch_rows(self, from_content_id: int, from_version: int) -> list[RelationRow]:
        return [
            row
            for _, row in sorted(self._rows.items())
            if row.from_content_id == from_content_id and row.from_version == from_version
        ]

    def insert_row(self, row: RelationRow) -> RelationRow:
        stored = row.model_copy(update={"id": self._next_id})
        self._rows[self._next_id] = stored
        self._next_id += 1
        return stored

    def update_kind_mask(self, row_id: int, kind_mask: int) -> bool:
        row = self._rows.get(row_id)
        if row is None:
            return False
        self._rows[row_id] = row.model_copy(update={"kind_mask": kind_mask})
        return True

    def delete_row(self, row_id: int) -> bool:
        return self._rows.pop(row_id, None) is not None

    def all_rows(self) -> list[RelationRow]:
        """Every row in the table, ordered by row id."""
        return [row for _, row in sorted(self._rows.items())]

    @contextmanager
    def transaction(self) -> Iterator[None]:
        snapshot = (dict(self._rows), self._next_id) if self._depth == 0 else None
        self._depth += 1
        try:
            yield
        except Exception:
            if snapshot is not None:
                self._rows, self._next_id = snapshot
            raise
        finally:
            self._depth -= 1


class InMemoryFieldStorage(FieldStorageInterface):
    """External field storage keeping field data per (content, version, field).

    Every call is appended to `calls` as ``(operation, content_id, version_no,
    context)`` so callers can check what reached the storage layer.
    """

    def __init__(self) -> None:
        self._data: dict[tuple[int, int, int], str] = {}
        self.calls: list[tuple[str, int, int, dict[str, Any]]] = []

    def store_field_data(self, version_info: VersionInfo, field: Field, context: dict[str, Any]) -> bool:
        content_id = version_info.content_info.id
        self.calls.append(("store", content_id, version_info.version_no, dict(context)))
        self._data[(content_id, version_info.version_no, field.id)] = field.value.data
        return False

    def get_field_data(self, version_info: VersionInfo, field: Field, context: dict[str, Any]) -> None:
        content_id = version_info.content_info.id
        self.calls.append(("get", content_id, version_info.version_no, dict(context)))
        data = self._data.get((content_id, version_info.version_no, field.id))
        if data is not None:
            field.value.data = data

    def delete_field_data(self, version_info: VersionInfo, field_ids: Sequence[int], context: dict[str, Any]) -> None:
        content_id = version_info.content_info.id
        self.calls.append(("delete", content_id, version_info.version_no, dict(context)))
        for field_id in field_ids:
            self._data.pop((content_id, version_info.version_no, field_id), None)

    def has_data(self, content_id: int, version_no: int, field_id: int) -> bool:
        return (content_id, version_no, field_id) in self._data


class InMemoryContentRepository(ContentRepositoryInterface):
    """Attribute instances of content objects, one list per repository."""

    def __init__(self) -> None:
        self._attributes: list[ContentAttribute] = []

    def add_attribute(self, attribute: ContentAttribute) -> ContentAttribute:
        self._attributes.append(attribute)
        return attribute

    def fetch_attributes_by_identifier(self, content_id: int, version: int, identifier: str) -> list[ContentAttribute]:
        return [
            attribute
            for attribute in self._attributes
            if attribute.content_id == content_id and attribute.version == version and attribute.identifier == identifier
        ]

    def fetch_version_numbers(self, content_id: int) -> list[int]:
        return sorted({attribute.version for attribute in self._attributes if attribute.content_id == content_id})
