"""Validation of rich text values.

Two layers report problems with a value:

- `DocbookValidator` checks the internal document format and returns a list
  of human-readable error messages (empty when the document is valid).
- `ValidationResult` is what the datatype hands back to its caller: an input
  state plus one message. Validation failures are recoverable; the caller
  decides whether they block a save.
"""

import xml.etree.ElementTree as ET
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from rtschema.reference import REFERENCE_PREFIXES
from rtschema.value import DOCBOOK_NS, local_tag, qualified

from richtext.config import RichTextConfig
from richtext.tree import iter_tagged


class InputState(str, Enum):
    ACCEPTED = "accepted"
    INVALID = "invalid"


class ValidationResult(BaseModel):
    """Outcome of validating input for a rich text attribute."""

    model_config = {"frozen": True}

    state: InputState
    message: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.state is InputState.ACCEPTED

    @classmethod
    def accepted(cls) -> "ValidationResult":
        return cls(state=InputState.ACCEPTED)

    @classmethod
    def invalid(cls, message: str) -> "ValidationResult":
        return cls(state=InputState.INVALID, message=message)


class DocbookValidator:
    """Structural checks on the internal DocBook format."""

    def __init__(self, config: RichTextConfig | None = None):
        self.config = config or RichTextConfig()

    def validate(self, root: ET.Element) -> list[str]:
        errors: list[str] = []
        if root.tag != qualified(DOCBOOK_NS, "section"):
            errors.append(f"Root element must be a DocBook section, found '{root.tag}'")

        embed_tags = frozenset(self.config.embed_tags)
        for _, element in iter_tagged(root, self.config.reference_tags):
            name = local_tag(element.tag)
            href = element.get(self.config.href_attribute)
            if not href:
                if name not in embed_tags and element.get("linkend") is not None:
                    continue
                errors.append(f"Element '{name}' is missing its link target")
            elif name in embed_tags and not href.startswith(REFERENCE_PREFIXES):
                errors.append(f"Element '{name}' can only embed content or locations, found '{href}'")
        return errors
