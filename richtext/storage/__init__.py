"""Storage backends for the rich text engine's collaborators."""

from richtext.storage.json_directory import JsonFileContentDirectory
from richtext.storage.memory import (
    InMemoryContentDirectory,
    InMemoryContentRepository,
    InMemoryFieldStorage,
    InMemoryRelationTable,
)
from richtext.storage.sql import ContentObjectLink, SqlRelationTable

__all__ = [
    "ContentObjectLink",
    "InMemoryContentDirectory",
    "InMemoryContentRepository",
    "InMemoryFieldStorage",
    "InMemoryRelationTable",
    "JsonFileContentDirectory",
    "SqlRelationTable",
]
