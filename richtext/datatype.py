"""Rich text datatype: attribute lifecycle, publishing and package import/export.

`RichTextDataType` is the single entry point the content repository talks to
for rich text attributes. It owns no state of its own; every collaborator is
passed in, except that the relation table defaults to a `SqlRelationTable`
on `RichTextConfig.database_url`:

    ```python
    datatype = RichTextDataType(
        directory=directory,
        external_storage=field_storage,
        repository=repository,
        relation_table=relation_table,
        config=load_config(),
    )

    datatype.store_object_attribute(attribute)
    datatype.on_publish(attribute)
    exported = datatype.serialize_content_object_attribute(attribute)
    ```

**Publishing.** `on_publish` extracts linked and embedded content from every
translation of the attribute in the published version, unions the results and
commits them once for the version. Committing can leave composite relation
masks behind, so the reconciler runs right after, in the same relation table
transaction. Nothing is written when the version references no content.

**Export/import.** Export rewrites references to remote ids
(`LinkRewriter.to_portable`) and reports the content the attribute depends
on. Import rewrites remote ids back to local ids before the value is accepted
and validated; input that fails either step leaves the attribute unchanged.
"""

import xml.etree.ElementTree as ET
from typing import Optional

from rtschema.field import DATA_TYPE_STRING, ContentAttribute, ContentClassAttribute
from rtschema.relation import RelationSet
from rtschema.storage import (
    ContentDirectoryInterface,
    ContentRepositoryInterface,
    FieldStorageInterface,
    RelationTableInterface,
)
from rtschema.value import EMPTY_VALUE, InvalidValueError, RichTextValue

from richtext.bridge import RichTextStorageBridge
from richtext.commit import commit_input_relations
from richtext.config import RichTextConfig
from richtext.fieldtype import RichTextFieldType
from richtext.logging import setup_logging
from richtext.package import (
    SerializedAttribute,
    append_num_rows,
    append_rich_text,
    create_attribute_node,
    read_num_rows,
    read_rich_text,
)
from richtext.reconcile import RelationBitmaskReconciler
from richtext.relations import RelationExtractor
from richtext.resolver import ReferenceResolver
from richtext.rewriter import LinkRewriter
from richtext.storage.sql import SqlRelationTable
from richtext.text import extract_text
from richtext.validation import DocbookValidator, ValidationResult

logger = setup_logging()


class RichTextDataType:
    """Rich text attribute handling for a content repository."""

    data_type_string = DATA_TYPE_STRING

    def __init__(
        self,
        *,
        directory: ContentDirectoryInterface,
        external_storage: FieldStorageInterface,
        repository: ContentRepositoryInterface,
        relation_table: RelationTableInterface | None = None,
        config: RichTextConfig | None = None,
    ):
        self.config = config or RichTextConfig()
        self.repository = repository
        if relation_table is None:
            relation_table = SqlRelationTable(self.config.database_url)
        self.relation_table = relation_table

        self.resolver = ReferenceResolver(directory)
        self.rewriter = LinkRewriter(self.resolver, self.config)
        self.extractor = RelationExtractor(directory, self.config)
        self.field_type = RichTextFieldType(self.extractor)
        self.validator = DocbookValidator(self.config)
        self.reconciler = RelationBitmaskReconciler(relation_table)
        self.storage = RichTextStorageBridge(
            self.field_type,
            external_storage,
            repository,
            self.config.storage_identifier,
        )

    # --- Class attributes ---

    def initialize_class_attribute(self, class_attribute: ContentClassAttribute) -> None:
        if class_attribute.num_rows is None:
            class_attribute.num_rows = self.config.default_num_rows

    def serialize_content_class_attribute(
        self,
        class_attribute: ContentClassAttribute,
        parameters_node: ET.Element,
    ) -> None:
        append_num_rows(parameters_node, int(class_attribute.num_rows or 0))

    def unserialize_content_class_attribute(
        self,
        class_attribute: ContentClassAttribute,
        parameters_node: ET.Element,
    ) -> None:
        class_attribute.num_rows = read_num_rows(parameters_node)

    # --- Object attributes ---

    def initialize_object_attribute(
        self,
        attribute: ContentAttribute,
        current_version: Optional[int],
        original_attribute: ContentAttribute,
    ) -> None:
        """Start a new attribute from a previous version, or empty for new objects."""
        if current_version:
            attribute.content = self.content(original_attribute)
        else:
            attribute.content = self.field_type.empty_value()

    def validate_input(self, text: str | None, required: bool = False) -> ValidationResult:
        """Check raw rich text input before it is stored."""
        text = (text or "").strip()

        if not text or text == EMPTY_VALUE.strip():
            if required:
                return ValidationResult.invalid("Rich text is required.")
            return ValidationResult.accepted()

        try:
            value = self.field_type.accept_value(text)
        except InvalidValueError:
            return ValidationResult.invalid("Attribute contains invalid data.")

        errors = self.validator.validate(value.xml)
        if errors:
            return ValidationResult.invalid("Validation of XML content failed:\n" + "\n".join(errors))

        return ValidationResult.accepted()

    def content(self, attribute: ContentAttribute) -> RichTextValue:
        """The attribute's value, loading it through field storage on first use."""
        if not isinstance(attribute.content, RichTextValue):
            attribute.content = self.object_attribute_content(attribute)
        return attribute.content

    def object_attribute_content(self, attribute: ContentAttribute) -> RichTextValue:
        value = RichTextValue(attribute.data_text)
        return self.storage.get_field_data(attribute, value)

    def has_content(self, attribute: ContentAttribute) -> bool:
        value = attribute.content
        if not isinstance(value, RichTextValue):
            return False
        return not self.field_type.is_empty_value(value)

    def store_object_attribute(self, attribute: ContentAttribute) -> None:
        stored = self.storage.store_field_data(attribute, self.content(attribute))
        attribute.content = stored
        attribute.data_text = str(stored)

    def delete_stored_object_attribute(self, attribute: ContentAttribute, version: Optional[int] = None) -> None:
        self.storage.delete_field_data(attribute, version)

    def to_string(self, attribute: ContentAttribute) -> str:
        value = attribute.content
        if not isinstance(value, RichTextValue):
            value = self.field_type.empty_value()
        return str(value)

    def from_string(self, attribute: ContentAttribute, text: str) -> bool:
        """Set the attribute from its string form. Returns False for invalid input."""
        try:
            value = self.field_type.accept_value(text)
        except InvalidValueError:
            return False

        if self.validator.validate(value.xml):
            return False

        attribute.content = value
        return True

    # --- Search and naming ---

    def metadata(self, attribute: ContentAttribute) -> str:
        """Text for the search index."""
        value = attribute.content
        if not isinstance(value, RichTextValue):
            return ""
        return extract_text(value.xml)

    def title(self, attribute: ContentAttribute) -> str:
        value = attribute.content
        if not isinstance(value, RichTextValue):
            return ""
        return self.field_type.get_name(value)

    def is_indexable(self) -> bool:
        return True

    # --- Publishing ---

    def on_publish(self, attribute: ContentAttribute) -> RelationSet:
        """Record the content this attribute links to and embeds.

        Relations are gathered from all translations of the attribute in the
        published version and committed once for the version.

        Returns:
            The committed relation set (empty if nothing was written).
        """
        attributes = self.repository.fetch_attributes_by_identifier(
            attribute.content_id,
            attribute.version,
            attribute.identifier,
        )
        relation_set = self.extractor.relation_set(self.content(a) for a in attributes)

        if relation_set.is_empty():
            return relation_set

        with self.relation_table.transaction():
            commit_input_relations(
                self.relation_table,
                attribute.content_id,
                attribute.version,
                relation_set.by_kind(),
            )
            self.reconciler.reconcile(attribute.content_id, attribute.version)

        logger.debug(
            {
                "message": "Committed rich text relations",
                "content_id": attribute.content_id,
                "version": attribute.version,
                "linked": sorted(relation_set.linked),
                "embedded": sorted(relation_set.embedded),
            }
        )
        return relation_set

    # --- Packages ---

    def serialize_content_object_attribute(self, attribute: ContentAttribute) -> SerializedAttribute:
        """Export node for the attribute, with references in portable form."""
        value = attribute.content
        if not isinstance(value, RichTextValue):
            value = self.field_type.empty_value()

        node = create_attribute_node(attribute)
        append_rich_text(node, str(self.rewriter.to_portable(value)))

        return SerializedAttribute(node=node, relations=self.extractor.relation_set([value]))

    def unserialize_content_object_attribute(self, attribute: ContentAttribute, attribute_node: ET.Element) -> bool:
        """Import the attribute value from an export node.

        Returns:
            True if the value was accepted; False leaves the attribute unchanged.
        """
        text = read_rich_text(attribute_node)
        if text is None:
            return False

        try:
            value = self.field_type.accept_value(text)
        except InvalidValueError as e:
            logger.warning({"message": "Rejected imported rich text", "attribute_id": attribute.id, "error": str(e)})
            return False

        value = self.rewriter.to_local(value)

        errors = self.validator.validate(value.xml)
        if errors:
            logger.warning({"message": "Imported rich text failed validation", "attribute_id": attribute.id, "errors": errors})
            return False

        attribute.content = value
        return True
