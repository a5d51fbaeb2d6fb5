"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DBDIAGRAM__SECTION__KEY)
3. Repo YAML (.dbdiagram/config.yaml)
4. Global YAML (~/.config/dbdiagram/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    DBDIAGRAM__<SECTION>__<KEY>=<VALUE>

Examples:
    DBDIAGRAM__LOGGING__LEVEL=DEBUG
    DBDIAGRAM__DISPLAY__LINE_STYLE=Rectilinear
    DBDIAGRAM__ROUTER__LANE_SPACING=10
    DBDIAGRAM__PREVIEW__DEBOUNCE_SEC=0.5
"""

from enum import StrEnum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
Theme = Literal["light", "dark"]


class LineStyle(StrEnum):
    """Connection line drawing styles."""

    CURVE = "Curve"
    RECTILINEAR = "Rectilinear"
    ROUND_RECTILINEAR = "RoundRectilinear"
    OBLIQUE = "Oblique"
    ROUND_OBLIQUE = "RoundOblique"

    @classmethod
    def parse(cls, value: object) -> "LineStyle | None":
        """Case-insensitive lookup by style name; None when unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        wanted = value.strip().replace("_", "").replace("-", "").lower()
        for style in cls:
            if style.value.lower() == wanted:
                return style
        return None


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        DBDIAGRAM__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. The CLI raises it to DEBUG with -v.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class DisplaySettings(BaseModel):
    """Global diagram display settings shared by every open diagram.

    A Project block in the schema source may override line_style and
    show_grid for that one document.

    Env vars:
        DBDIAGRAM__DISPLAY__LINE_STYLE: One of Curve, Rectilinear,
            RoundRectilinear, Oblique, RoundOblique
        DBDIAGRAM__DISPLAY__SHOW_GRID: Draw the background grid
        DBDIAGRAM__DISPLAY__GRID_SIZE: Grid cell size in pixels
        DBDIAGRAM__DISPLAY__THEME: light or dark
    """

    model_config = {"frozen": True}

    line_style: LineStyle = Field(
        default=LineStyle.CURVE,
        description="Drawing style for relationship lines.",
    )
    show_grid: bool = Field(default=True, description="Draw the background grid.")
    grid_size: int = Field(default=20, description="Grid cell size in pixels.")
    theme: Theme = Field(default="light", description="Color theme.")

    @field_validator("line_style", mode="before")
    @classmethod
    def validate_line_style(cls, v: object) -> LineStyle:
        style = LineStyle.parse(v)
        if style is None:
            raise ValueError(f"Unknown line style: {v}")
        return style

    @field_validator("grid_size")
    @classmethod
    def validate_grid_size(cls, v: int) -> int:
        if not (4 <= v <= 200):
            raise ValueError(f"Grid size must be 4-200, got {v}")
        return v


class RouterConfig(BaseModel):
    """Connection router tuning.

    Env vars:
        DBDIAGRAM__ROUTER__MIN_STRAIGHT: Shortest horizontal run off an anchor
        DBDIAGRAM__ROUTER__MAX_STRAIGHT: Longest horizontal run off an anchor
        DBDIAGRAM__ROUTER__LANE_SPACING: Extra offset per lane index
    """

    min_straight: float = Field(
        default=15.0,
        description="Lower clamp for the base horizontal offset off an anchor.",
    )
    max_straight: float = Field(
        default=40.0,
        description="Upper clamp for the base horizontal offset off an anchor.",
    )
    lane_spacing: float = Field(
        default=12.0,
        description="Offset added per lane index within a table-side group.",
    )
    label_offset: float = Field(
        default=25.0,
        description="Distance of a cardinality glyph from its anchor.",
    )
    label_stagger: float = Field(
        default=16.0,
        description="Extra distance per stagger index for colliding glyphs.",
    )
    corner_radius: float = Field(
        default=15.0,
        description="Maximum fillet radius for RoundRectilinear corners.",
    )
    u_turn_min: float = Field(
        default=40.0,
        description="Minimum bow-out past the right edges for overlapping tables.",
    )
    u_turn_ratio: float = Field(
        default=0.4,
        description="Bow-out grows with vertical distance times this ratio.",
    )

    @field_validator("max_straight")
    @classmethod
    def validate_max_straight(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"max_straight must be positive, got {v}")
        return v


class LayoutConfig(BaseModel):
    """Default placement and estimated geometry for headless rendering.

    Tables without x/y settings are placed on a grid. When no measured
    rectangles are available (CLI, SVG export) table and column boxes are
    estimated from these sizes.

    Env vars:
        DBDIAGRAM__LAYOUT__COLUMNS: Tables per row for auto placement
        DBDIAGRAM__LAYOUT__GAP_X: Horizontal grid pitch
        DBDIAGRAM__LAYOUT__GAP_Y: Vertical grid pitch
    """

    columns: int = Field(default=3, description="Tables per row for auto placement.")
    gap_x: float = Field(default=350.0, description="Horizontal grid pitch.")
    gap_y: float = Field(default=300.0, description="Vertical grid pitch.")
    origin: float = Field(default=50.0, description="Offset of the first grid cell.")
    table_width: float = Field(default=220.0, description="Width when a table sets none.")
    header_height: float = Field(default=36.0, description="Estimated table header height.")
    row_height: float = Field(default=28.0, description="Estimated field row height.")

    @field_validator("columns")
    @classmethod
    def validate_columns(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"columns must be >= 1, got {v}")
        return v


class PreviewConfig(BaseModel):
    """Live preview behavior.

    Env vars:
        DBDIAGRAM__PREVIEW__DEBOUNCE_SEC: Quiet period before re-rendering
        DBDIAGRAM__PREVIEW__MIN_SIZE: Smallest width/height a resize may produce
    """

    debounce_sec: float = Field(
        default=0.3,
        description="Quiet period after the last text change before re-rendering.",
    )
    min_size: float = Field(
        default=100.0,
        description="Smallest width (and note height) an interactive resize may set.",
    )

    @field_validator("debounce_sec")
    @classmethod
    def validate_debounce(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"debounce_sec must be >= 0, got {v}")
        return v


class DiagramConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    router: RouterConfig = Field(default_factory=RouterConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    preview: PreviewConfig = Field(default_factory=PreviewConfig)
