"""Schema model exports."""

from dbdiagram.schema.models import (
    Cardinality,
    Diagnostic,
    EnumDef,
    Field,
    IndexDef,
    InlineRef,
    Note,
    ProjectSettings,
    Relationship,
    Schema,
    Severity,
    Table,
    TablePartial,
    column_anchor_id,
    sanitize_id,
    table_anchor_id,
)

__all__ = [
    "Cardinality",
    "Diagnostic",
    "EnumDef",
    "Field",
    "IndexDef",
    "InlineRef",
    "Note",
    "ProjectSettings",
    "Relationship",
    "Schema",
    "Severity",
    "Table",
    "TablePartial",
    "column_anchor_id",
    "sanitize_id",
    "table_anchor_id",
]
