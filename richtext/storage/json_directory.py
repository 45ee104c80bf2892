"""JSON file-based implementation of ContentDirectoryInterface.

The file maps local ids to remote ids. JSON object keys are strings, so ids
are written as decimal strings:

    {
        "content": {"42": "abc"},
        "locations": {
            "5": {"remote_id": "loc-5", "content_id": 9}
        }
    }

A location entry may omit either field. Entries with ids that are not
integers are skipped with a warning.
"""

import json
from pathlib import Path
from typing import Any, Optional

from richtext.logging import setup_logging
from richtext.storage.memory import InMemoryContentDirectory


class JsonFileContentDirectory(InMemoryContentDirectory):
    """Content directory loaded from (and saved to) a JSON file.

    Attributes:
        directory_file: Path to the JSON file.
    """

    def __init__(self, directory_file: Optional[Path] = None):
        super().__init__()
        self.directory_file = directory_file or Path("content_directory.json")
        self.logger = setup_logging()
        self._dirty = False
        self.load()

    def load(self) -> None:
        """Load id mappings from the JSON file, if it exists."""
        if not self.directory_file.exists():
            self.logger.debug(
                {
                    "message": f"Directory file does not exist: {self.directory_file}",
                    "directory_file": str(self.directory_file),
                },
                pprint=True,
            )
            return

        with open(self.directory_file, "r") as f:
            data = json.load(f)

        for key, remote_id in data.get("content", {}).items():
            content_id = self._int_key(key)
            if content_id is not None and isinstance(remote_id, str):
                super().add_content(content_id, remote_id)

        for key, entry in data.get("locations", {}).items():
            location_id = self._int_key(key)
            if location_id is None or not isinstance(entry, dict):
                continue
            super().add_location(location_id, entry.get("remote_id"), entry.get("content_id"))

        self.logger.debug(
            {
                "message": f"Loaded content directory from {self.directory_file}",
                "content": len(self._content_remote_ids),
                "locations": len(set(self._location_remote_ids) | set(self._location_content)),
            },
            pprint=True,
        )

    def add_content(self, content_id: int, remote_id: str) -> None:
        super().add_content(content_id, remote_id)
        self._dirty = True

    def add_location(self, location_id: int, remote_id: str | None = None, content_id: int | None = None) -> None:
        super().add_location(location_id, remote_id, content_id)
        self._dirty = True

    def save(self) -> None:
        """Write the mappings back to the JSON file if anything changed."""
        if not self._dirty:
            return

        locations: dict[str, dict[str, Any]] = {}
        for location_id in sorted(set(self._location_remote_ids) | set(self._location_content)):
            entry: dict[str, Any] = {}
            if location_id in self._location_remote_ids:
                entry["remote_id"] = self._location_remote_ids[location_id]
            if location_id in self._location_content:
                entry["content_id"] = self._location_content[location_id]
            locations[str(location_id)] = entry

        data = {
            "content": {str(content_id): remote_id for content_id, remote_id in sorted(self._content_remote_ids.items())},
            "locations": locations,
        }

        self.directory_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.directory_file, "w") as f:
            json.dump(data, f, indent=2)
        self._dirty = False

    def _int_key(self, key: str) -> int | None:
        try:
            return int(key)
        except ValueError:
            self.logger.warning({"message": "Skipping directory entry with non-integer id", "id": key})
            return None
