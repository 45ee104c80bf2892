"""Content and location references inside rich text.

Links and embeds point at repository objects with URI-like references:

    - ``content://42``          a content object by id
    - ``location://7#intro``    a location (tree node), with a fragment
    - ``content://abc-remote``  the portable form, using a remote id

Only these two schemes are recognised. The scheme set is closed: the legacy
document format fixes exactly two, so `ReferenceScheme` is a plain enum
rather than an extension point.
"""

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ReferenceScheme(str, Enum):
    """Scheme of a repository reference."""

    CONTENT = "content"
    """Target is a content object; the identifier is a content id."""

    LOCATION = "location"
    """Target is a location (tree node); the identifier is a location id."""

    @property
    def prefix(self) -> str:
        return f"{self.value}://"


REFERENCE_PREFIXES: tuple[str, ...] = tuple(scheme.prefix for scheme in ReferenceScheme)

# scheme://identifier-optional#fragment-or-trailing-whitespace-optional
REFERENCE_PATTERN = re.compile(r"^(content|location)://([^#\s]*)(#.*|\s*)$", re.DOTALL)
IDENTIFIER_PATTERN = re.compile(r"[^#\s]+")


class Reference(BaseModel):
    """A parsed ``scheme://identifier[#fragment]`` reference.

    Attributes:
        scheme: Content or location.
        identifier: Local numeric id or remote id. May be empty.
        fragment: Verbatim tail after the identifier: a ``#fragment`` or
            trailing whitespace. Preserved byte for byte by `str()`.
    """

    model_config = {"frozen": True}

    scheme: ReferenceScheme
    identifier: str = Field(default="", description="Local id or remote id; empty means no id present.")
    fragment: str = Field(default="", description="Verbatim '#fragment' or trailing whitespace.")

    @property
    def local_id(self) -> Optional[int]:
        """Integer id when the identifier is numeric, otherwise None."""
        if self.identifier.isascii() and self.identifier.isdigit():
            return int(self.identifier)
        return None

    def with_identifier(self, identifier: str) -> "Reference":
        return self.model_copy(update={"identifier": identifier})

    def __str__(self) -> str:
        return f"{self.scheme.prefix}{self.identifier}{self.fragment}"


def parse_reference(text: str) -> Optional[Reference]:
    """Parse a reference string, or return None if it does not match."""
    match = REFERENCE_PATTERN.match(text)
    if match is None:
        return None
    scheme, identifier, fragment = match.groups()
    return Reference(scheme=ReferenceScheme(scheme), identifier=identifier, fragment=fragment or "")


def is_reference_identifier(identifier: str) -> bool:
    """True if `identifier` parses back unchanged when written into a reference."""
    return IDENTIFIER_PATTERN.fullmatch(identifier) is not None
