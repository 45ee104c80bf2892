"""
Rich Text Engine - DocBook rich text fields for a content repository.

Handles the parts of a rich text field that go beyond storing XML:

- Rewriting ``content://`` and ``location://`` references between local ids
  and portable remote ids for package export and import
- Extracting linked and embedded content and committing it to the relation
  table, including reconciliation of legacy composite relation masks
- Plain text extraction for search indexing
- Field storage bridging and the attribute lifecycle (`RichTextDataType`)

Value models and collaborator interfaces live in `rtschema`; backends for
the collaborators live in `richtext.storage`.
"""

from richtext.commit import CommitResult, commit_input_relations
from richtext.config import RichTextConfig, load_config
from richtext.datatype import RichTextDataType
from richtext.fieldtype import RichTextFieldType
from richtext.reconcile import ReconciliationResult, RelationBitmaskReconciler
from richtext.relations import RelationExtractor
from richtext.resolver import ReferenceResolver
from richtext.rewriter import LinkRewriter, RewriteDirection
from richtext.text import extract_text
from richtext.validation import DocbookValidator, InputState, ValidationResult

__all__ = [
    "CommitResult",
    "DocbookValidator",
    "InputState",
    "LinkRewriter",
    "ReconciliationResult",
    "ReferenceResolver",
    "RelationBitmaskReconciler",
    "RelationExtractor",
    "RewriteDirection",
    "RichTextConfig",
    "RichTextDataType",
    "RichTextFieldType",
    "ValidationResult",
    "commit_input_relations",
    "extract_text",
    "load_config",
]

__version__ = "0.1.0"
