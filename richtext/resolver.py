"""Bidirectional resolution of local ids and remote ids.

The resolver is a thin, read-only layer over a `ContentDirectoryInterface`
that picks the right lookup for a reference scheme:

| scheme   | to_remote (local -> remote)        | to_local (remote -> local) |
|----------|------------------------------------|----------------------------|
| content  | content id -> content remote id    | -> content id              |
| location | location id -> location remote id  | -> location id             |

Unresolvable ids come back as None; the caller decides what that means.
"""

from rtschema.reference import ReferenceScheme
from rtschema.storage import ContentDirectoryInterface


class ReferenceResolver:
    """Resolve ids for ``content://`` and ``location://`` references."""

    def __init__(self, directory: ContentDirectoryInterface):
        self.directory = directory

    def to_remote(self, scheme: ReferenceScheme, local_id: int) -> str | None:
        """Return the remote id for a local content or location id, or None."""
        if scheme is ReferenceScheme.CONTENT:
            return self.directory.find_remote_id(local_id)
        return self.directory.find_remote_id_for_location(local_id)

    def to_local(self, scheme: ReferenceScheme, remote_id: str) -> int | None:
        """Return the local id for a remote id, or None.

        For locations this is a location id, never the content id the
        location points to.
        """
        if scheme is ReferenceScheme.CONTENT:
            return self.directory.find_content_id(remote_id)
        return self.directory.find_location_id(remote_id)
