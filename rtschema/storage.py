"""Collaborator interfaces for the rich text engine.

This module defines abstract interfaces for everything the engine reads from
or writes to outside of the XML document itself:

- **ContentDirectoryInterface**: local id <-> remote id lookups for content
  objects and locations, and location -> content resolution
- **FieldStorageInterface**: external field storage (store, fetch, delete)
- **RelationTableInterface**: the legacy relation table with bitmask kinds
- **ContentRepositoryInterface**: attribute instances and versions of a
  content object

Collaborators are passed to constructors explicitly; nothing in the engine
looks them up from a global registry.

Lookups that cannot find an id return None. Unknown ids are an expected case
(deleted objects, partial imports) and must not raise.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, Sequence

from rtschema.field import ContentAttribute, Field, VersionInfo
from rtschema.relation import RelationRow


class ContentDirectoryInterface(ABC):
    """Abstract interface for content and location id lookups.

    Remote ids are globally stable identifiers that survive export from one
    repository and import into another; local ids are the repository's own
    integer ids.
    """

    @abstractmethod
    def find_content_id(self, remote_id: str) -> int | None:
        """Return the content id for a content remote id, or None."""

    @abstractmethod
    def find_remote_id(self, content_id: int) -> str | None:
        """Return the remote id of a content object, or None."""

    @abstractmethod
    def find_location_id(self, remote_id: str) -> int | None:
        """Return the location id for a location remote id, or None."""

    @abstractmethod
    def find_remote_id_for_location(self, location_id: int) -> str | None:
        """Return the remote id of a location, or None."""

    @abstractmethod
    def content_id_for_location(self, location_id: int) -> int | None:
        """Return the id of the content object a location points to, or None."""


class FieldStorageInterface(ABC):
    """Abstract interface for external field storage.

    The context mapping carries the storage backend identifier under
    ``"identifier"``; other keys are opaque to the engine.
    """

    @abstractmethod
    def store_field_data(self, version_info: VersionInfo, field: Field, context: dict[str, Any]) -> bool:
        """Store external data for a field.

        Returns:
            True if `field.value` was modified and must be stored again.
        """

    @abstractmethod
    def get_field_data(self, version_info: VersionInfo, field: Field, context: dict[str, Any]) -> None:
        """Populate `field.value` with externally stored data."""

    @abstractmethod
    def delete_field_data(self, version_info: VersionInfo, field_ids: Sequence[int], context: dict[str, Any]) -> None:
        """Delete external data of the given fields in one version."""


class RelationTableInterface(ABC):
    """Abstract interface for the legacy relation table.

    Rows carry an integer kind bitmask (see `rtschema.relation`). The table is
    shared state: callers that read rows and then write based on them must do
    so inside `transaction()` and must not run two such sequences for the same
    content version concurrently.
    """

    @abstractmethod
    def fetch_rows(self, from_content_id: int, from_version: int) -> list[RelationRow]:
        """Return all rows of a content version, ordered by row id."""

    @abstractmethod
    def insert_row(self, row: RelationRow) -> RelationRow:
        """Insert a row and return it with its assigned id."""

    @abstractmethod
    def update_kind_mask(self, row_id: int, kind_mask: int) -> bool:
        """Set the kind mask of a row. Returns True if the row exists."""

    @abstractmethod
    def delete_row(self, row_id: int) -> bool:
        """Delete a row. Returns True if the row existed."""

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the enclosed reads and writes as one unit.

        The default does nothing; backends with real transactions override it.
        """
        yield


class ContentRepositoryInterface(ABC):
    """Abstract interface for reading content attribute instances."""

    @abstractmethod
    def fetch_attributes_by_identifier(self, content_id: int, version: int, identifier: str) -> list[ContentAttribute]:
        """Return the attribute instances of every translation of a version."""

    @abstractmethod
    def fetch_version_numbers(self, content_id: int) -> list[int]:
        """Return all version numbers of a content object."""
