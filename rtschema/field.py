"""Field and attribute models exchanged with storage collaborators.

A rich text field lives in two shapes:

- **ContentAttribute**: the repository's attribute instance for one content
  object, version and language. It carries the identifying data the storage
  bridge needs and the stored XML (`data_text`).
- **Field**: the storage-layer view handed to external field storage, built
  from a `ContentAttribute` plus a persistence-encoded `FieldValue`.

`Field` is deliberately mutable: external storage may replace `Field.value`
when it loads data.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field as PydanticField

DATA_TYPE_STRING = "ezrichtext"


class ContentInfo(BaseModel):
    model_config = {"frozen": True}

    id: int


class VersionInfo(BaseModel):
    """Version of a content object as seen by field storage."""

    model_config = {"frozen": True}

    version_no: int
    content_info: ContentInfo


class FieldValue(BaseModel):
    """Persistence-encoded field value.

    Attributes:
        data: Serialized rich text XML.
        external_data: Data kept by external storage, if any.
        sort_key: Sort key for the field, if any.
    """

    data: Optional[str] = None
    external_data: Any = None
    sort_key: Optional[str] = None


class Field(BaseModel):
    """A field as passed to external field storage."""

    id: int
    field_definition_id: int
    type: str = DATA_TYPE_STRING
    value: FieldValue = PydanticField(default_factory=FieldValue)
    language_code: str
    version_no: int


class ContentAttribute(BaseModel):
    """An attribute instance of a content object.

    One instance exists per (content object, version, language). The
    identifying fields (`id`, `field_definition_id`, `language_code`,
    `version`) must all come from the same instance when building a `Field`.

    Attributes:
        id: Attribute id, shared by all versions and translations.
        content_id: Owning content object.
        version: Version number of the owning content object.
        field_definition_id: Class attribute (field definition) id.
        identifier: Class attribute identifier, e.g. "body".
        data_type_string: Datatype of the attribute.
        language_code: Translation, e.g. "eng-GB".
        data_text: Stored rich text XML.
        content: In-memory value, set by the datatype.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=False)

    id: int
    content_id: int
    version: int
    field_definition_id: int
    identifier: str
    data_type_string: str = DATA_TYPE_STRING
    language_code: str = "eng-GB"
    data_text: str = ""
    content: Any = None


class ContentClassAttribute(BaseModel):
    """Class attribute (field definition) settings for a rich text field."""

    id: int
    identifier: str = ""
    num_rows: Optional[int] = None
