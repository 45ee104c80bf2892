"""Load rich text engine config from TOML (e.g. richtext.toml).

Config file is looked up in order:
  1. Path in RICHTEXT_CONFIG env var (if set)
  2. richtext.toml in the current working directory

If no file is found, built-in defaults are used. Example file:

    [rewriter]
    link_tags = ["link"]
    embed_tags = ["ezembed", "ezembedinline"]

    [storage]
    identifier = "LegacyStorage"
    database_url = "sqlite:///relations.db"

    [class_attribute]
    default_num_rows = 10
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from rtschema.value import XLINK_NS, qualified

from richtext.logging import setup_logging

DEFAULT_LINK_TAGS = ("link",)
DEFAULT_EMBED_TAGS = ("ezembed", "ezembedinline")
DEFAULT_HREF_ATTRIBUTE = qualified(XLINK_NS, "href")
DEFAULT_STORAGE_IDENTIFIER = "LegacyStorage"
DEFAULT_NUM_ROWS = 10

logger = setup_logging()


class RichTextConfig(BaseModel):
    """Settings for the rich text engine.

    Attributes:
        link_tags: Local names of elements that link to content.
        embed_tags: Local names of elements that embed content.
        href_attribute: Attribute holding the reference, in ElementTree
            ``{namespace}name`` form.
        storage_identifier: Identifier of the external storage backend,
            passed to field storage in the context mapping.
        default_num_rows: Editor rows for new class attributes.
        database_url: SQLAlchemy URL for the relation table.
    """

    model_config = {"frozen": True}

    link_tags: tuple[str, ...] = Field(default=DEFAULT_LINK_TAGS)
    embed_tags: tuple[str, ...] = Field(default=DEFAULT_EMBED_TAGS)
    href_attribute: str = Field(default=DEFAULT_HREF_ATTRIBUTE)
    storage_identifier: str = Field(default=DEFAULT_STORAGE_IDENTIFIER)
    default_num_rows: int = Field(default=DEFAULT_NUM_ROWS, gt=0)
    database_url: str = Field(default="sqlite:///:memory:")

    @property
    def reference_tags(self) -> frozenset[str]:
        return frozenset(self.link_tags) | frozenset(self.embed_tags)


def _default_config_paths() -> list[Path]:
    """Return paths to check for richtext.toml (first existing wins)."""
    paths: list[Path] = []
    if os.environ.get("RICHTEXT_CONFIG"):
        paths.append(Path(os.environ["RICHTEXT_CONFIG"]))
    paths.append(Path.cwd() / "richtext.toml")
    return paths


def _settings_from_toml(data: dict[str, Any]) -> dict[str, Any]:
    settings: dict[str, Any] = {}
    rewriter = data.get("rewriter")
    if isinstance(rewriter, dict):
        for key in ("link_tags", "embed_tags"):
            if isinstance(rewriter.get(key), list):
                settings[key] = tuple(rewriter[key])
        if isinstance(rewriter.get("href_attribute"), str):
            settings["href_attribute"] = rewriter["href_attribute"]
    storage = data.get("storage")
    if isinstance(storage, dict):
        if isinstance(storage.get("identifier"), str):
            settings["storage_identifier"] = storage["identifier"]
        if isinstance(storage.get("database_url"), str):
            settings["database_url"] = storage["database_url"]
    class_attribute = data.get("class_attribute")
    if isinstance(class_attribute, dict) and isinstance(class_attribute.get("default_num_rows"), int):
        settings["default_num_rows"] = class_attribute["default_num_rows"]
    return settings


def load_config(path: Path | None = None) -> RichTextConfig:
    """Load config from a TOML file.

    Args:
        path: Explicit file to read. When None, the default lookup order is used.

    Returns:
        RichTextConfig. Falls back to defaults if no file is found or the file
        cannot be read or validated.
    """
    candidates = [path] if path is not None else _default_config_paths()
    for candidate in candidates:
        if not candidate.is_file():
            continue
        try:
            with open(candidate, "rb") as f:
                data = tomllib.load(f)
            return RichTextConfig(**_settings_from_toml(data))
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(
                {
                    "message": "Ignoring unreadable rich text config",
                    "config_file": str(candidate),
                    "error": str(e),
                }
            )
        break
    return RichTextConfig()
