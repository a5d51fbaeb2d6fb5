"""Source patcher: write diagram edits back into schema text."""

from dbdiagram.patcher.document import Document, FileDocument, TextDocument
from dbdiagram.patcher.edits import EntityKind, SchemaEdit
from dbdiagram.patcher.patcher import SourcePatcher, format_value
from dbdiagram.patcher.splice import Splice

__all__ = [
    "Document",
    "EntityKind",
    "FileDocument",
    "SchemaEdit",
    "SourcePatcher",
    "Splice",
    "TextDocument",
    "format_value",
]
