"""Bridge between content attributes and external field storage.

External field storage works on storage-layer `VersionInfo` and `Field`
objects. The bridge builds both from one `ContentAttribute` instance (field
id, field definition id, type, language and version all come from that same
instance) and hands them over together with a context mapping naming the
storage backend.
"""

from typing import Any

from rtschema.field import ContentAttribute, ContentInfo, Field, VersionInfo
from rtschema.storage import ContentRepositoryInterface, FieldStorageInterface
from rtschema.value import RichTextValue

from richtext.fieldtype import RichTextFieldType


class RichTextStorageBridge:
    """Store, fetch and delete rich text field data through external storage."""

    def __init__(
        self,
        field_type: RichTextFieldType,
        external_storage: FieldStorageInterface,
        repository: ContentRepositoryInterface,
        storage_identifier: str,
    ):
        self.field_type = field_type
        self.external_storage = external_storage
        self.repository = repository
        self.storage_identifier = storage_identifier

    def store_field_data(self, attribute: ContentAttribute, value: RichTextValue) -> RichTextValue:
        """Store a value and return it as decoded from the stored field."""
        version_info = self.version_info(attribute.content_id, attribute.version)
        field = self.field(attribute, value)
        self.external_storage.store_field_data(version_info, field, self.context())
        return self.field_type.from_persistence_value(field.value)

    def get_field_data(self, attribute: ContentAttribute, value: RichTextValue) -> RichTextValue:
        """Let external storage complete a value loaded from the attribute."""
        version_info = self.version_info(attribute.content_id, attribute.version)
        field = self.field(attribute, value)
        self.external_storage.get_field_data(version_info, field, self.context())
        return self.field_type.from_persistence_value(field.value)

    def delete_field_data(self, attribute: ContentAttribute, version: int | None = None) -> None:
        """Delete external data of an attribute in one version, or in all versions."""
        if version is None:
            version_numbers = self.repository.fetch_version_numbers(attribute.content_id)
        else:
            version_numbers = [version]

        for version_no in version_numbers:
            version_info = self.version_info(attribute.content_id, version_no)
            self.external_storage.delete_field_data(version_info, [attribute.id], self.context())

    def context(self) -> dict[str, Any]:
        return {"identifier": self.storage_identifier}

    @staticmethod
    def version_info(content_id: int, version_no: int) -> VersionInfo:
        return VersionInfo(version_no=version_no, content_info=ContentInfo(id=content_id))

    def field(self, attribute: ContentAttribute, value: RichTextValue) -> Field:
        return Field(
            id=attribute.id,
            field_definition_id=attribute.field_definition_id,
            type=attribute.data_type_string,
            value=self.field_type.to_persistence_value(value),
            language_code=attribute.language_code,
            version_no=attribute.version,
        )
