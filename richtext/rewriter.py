"""Rewriting of content and location references for export and import.

When content is exported to a package, local integer ids inside links and
embeds mean nothing to the repository that will import it. The rewriter
translates references between the two forms:

- **to_portable** (export): ``content://42`` -> ``content://<remote id>``
- **to_local** (import): ``content://<remote id>`` -> ``content://<local id>``

Only elements whose local tag is a configured link or embed tag are looked
at, and only their href attribute, and only when it starts with
``content://`` or ``location://``. Fragments (``#anchor``) and all other
attributes and children are left exactly as they were.

The two directions treat an unresolvable reference differently:

- Export leaves the stale reference in place. The element stays, so a user
  can still fix it after import.
  A remote id containing ``#`` or whitespace counts as unresolvable too.
- Import removes the element. A reference to an object that does not exist
  in this repository must not render as a broken link.

Rewriting never touches the caller's value: each pass deep-copies the tree
and returns a new `RichTextValue`.
"""

from enum import Enum

from pydantic import BaseModel

from rtschema.reference import Reference, is_reference_identifier, parse_reference
from rtschema.value import RichTextValue

from richtext.config import RichTextConfig
from richtext.logging import setup_logging
from richtext.resolver import ReferenceResolver
from richtext.tree import iter_tagged, remove_element, repository_href

logger = setup_logging()


class RewriteDirection(str, Enum):
    TO_PORTABLE = "to_portable"
    TO_LOCAL = "to_local"


class RewriteStats(BaseModel):
    """Counts from one rewriting pass, for logging."""

    rewritten: int = 0
    skipped: int = 0
    unresolved: int = 0
    removed: int = 0


class LinkRewriter:
    """Rewrite reference ids between local and portable (remote id) form."""

    def __init__(self, resolver: ReferenceResolver, config: RichTextConfig | None = None):
        self.resolver = resolver
        self.config = config or RichTextConfig()

    def to_portable(self, value: RichTextValue) -> RichTextValue:
        """Replace local ids with remote ids. Unresolvable references are left as is."""
        return self.rewrite(value, RewriteDirection.TO_PORTABLE)

    def to_local(self, value: RichTextValue) -> RichTextValue:
        """Replace remote ids with local ids. Unresolvable references are removed."""
        return self.rewrite(value, RewriteDirection.TO_LOCAL)

    def rewrite(self, value: RichTextValue, direction: RewriteDirection) -> RichTextValue:
        root = value.copy_tree()
        stats = RewriteStats()

        for parent, element in iter_tagged(root, self.config.reference_tags):
            href = repository_href(element, self.config.href_attribute)
            if href is None:
                continue

            reference = parse_reference(href)
            if reference is None or not reference.identifier or not self._well_formed(reference, direction):
                # Malformed, or no id to rewrite
                stats.skipped += 1
                logger.debug({"message": "Skipping reference", "href": href, "direction": direction.value})
                continue

            target = self._resolve(reference, direction)
            if target is None:
                stats.unresolved += 1
                if direction is RewriteDirection.TO_LOCAL and parent is not None:
                    remove_element(parent, element)
                    stats.removed += 1
                    logger.debug({"message": "Removed dangling reference", "href": href})
                continue

            if not is_reference_identifier(target):
                # A '#' or whitespace would split the id on import
                stats.unresolved += 1
                logger.warning({"message": "Id cannot be written into a reference", "href": href, "id": target})
                continue

            element.set(self.config.href_attribute, str(reference.with_identifier(target)))
            stats.rewritten += 1

        logger.debug({"message": f"Rewrote references {direction.value}", **stats.model_dump()})
        return RichTextValue.adopt(root)

    @staticmethod
    def _well_formed(reference: Reference, direction: RewriteDirection) -> bool:
        # Local ids are numeric; remote ids can be any string
        return direction is RewriteDirection.TO_LOCAL or reference.local_id is not None

    def _resolve(self, reference: Reference, direction: RewriteDirection) -> str | None:
        if direction is RewriteDirection.TO_PORTABLE:
            return self.resolver.to_remote(reference.scheme, int(reference.identifier))
        local = self.resolver.to_local(reference.scheme, reference.identifier)
        return None if local is None else str(local)

