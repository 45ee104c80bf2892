"""
Rich Text Schema - Value Models and Collaborator Interfaces

This package contains only Pydantic models, the rich text value wrapper and
ABC interfaces with no engine code. It defines:

- The rich text value and its XML namespaces
- Content/location references
- Relation kinds, relation rows and relation sets
- Field and attribute models
- Collaborator interfaces (directory, field storage, relation table, repository)

These are used by the `richtext` engine and by storage backends.
"""

from rtschema.field import (
    DATA_TYPE_STRING,
    ContentAttribute,
    ContentClassAttribute,
    ContentInfo,
    Field,
    FieldValue,
    VersionInfo,
)
from rtschema.reference import Reference, ReferenceScheme, is_reference_identifier, parse_reference
from rtschema.relation import (
    ATOMIC_KINDS,
    ExtractedRelations,
    RelationKind,
    RelationRow,
    RelationSet,
    decode_kind_mask,
    encode_kinds,
    is_atomic_mask,
)
from rtschema.storage import (
    ContentDirectoryInterface,
    ContentRepositoryInterface,
    FieldStorageInterface,
    RelationTableInterface,
)
from rtschema.value import EMPTY_VALUE, InvalidValueError, RichTextValue

__all__ = [
    "ATOMIC_KINDS",
    "ContentAttribute",
    "ContentClassAttribute",
    "ContentDirectoryInterface",
    "ContentInfo",
    "ContentRepositoryInterface",
    "DATA_TYPE_STRING",
    "EMPTY_VALUE",
    "ExtractedRelations",
    "Field",
    "FieldStorageInterface",
    "FieldValue",
    "InvalidValueError",
    "Reference",
    "ReferenceScheme",
    "RelationKind",
    "RelationRow",
    "RelationSet",
    "RelationTableInterface",
    "RichTextValue",
    "VersionInfo",
    "decode_kind_mask",
    "encode_kinds",
    "is_atomic_mask",
    "is_reference_identifier",
    "parse_reference",
]

__version__ = "0.1.0"
