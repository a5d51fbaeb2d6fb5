"""Schema-language and diagram constants.

These are format facts and fixed defaults that are not user-configurable.
For configurable values, see models.py (RouterConfig, LayoutConfig, etc.).
"""

# =============================================================================
# Source Formats
# =============================================================================

DEFAULT_FORMAT = "dbml"
"""Format key assumed when a source file has no recognizable extension."""

# =============================================================================
# Sticky Notes
# =============================================================================

NOTE_DEFAULT_WIDTH = 250
"""Width of a sticky note that declares none."""

NOTE_DEFAULT_COLOR = "#fff9c4"
"""Background of a sticky note that declares no color."""

NOTE_ESTIMATED_HEIGHT = 120
"""Height used for a sticky note without a height when drawing headless."""

# =============================================================================
# Tables
# =============================================================================

DEFAULT_SCHEMA = "public"
"""Schema name implied by an unqualified table name."""

ID_FALLBACK = "unnamed"
"""Identifier used when a name sanitizes to nothing."""

# =============================================================================
# Anchors
# =============================================================================
# Anchor ids shared between rectangle providers and the router.

COLUMN_ANCHOR_PREFIX = "col-"
"""Prefix of a column anchor id: col-<tableId>-<column>."""

TABLE_ANCHOR_PREFIX = "table-"
"""Prefix of a table anchor id: table-<tableId>."""

NOTE_ANCHOR_PREFIX = "note-"
"""Prefix of a sticky note element id: note-<noteId>."""
