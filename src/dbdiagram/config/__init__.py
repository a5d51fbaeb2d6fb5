"""Config module exports."""

from dbdiagram.config.loader import load_config
from dbdiagram.config.models import (
    DiagramConfig,
    DisplaySettings,
    LayoutConfig,
    LineStyle,
    LoggingConfig,
    PreviewConfig,
    RouterConfig,
)
from dbdiagram.config.store import SettingsChanged, SettingsStore

__all__ = [
    "load_config",
    "DiagramConfig",
    "DisplaySettings",
    "LayoutConfig",
    "LineStyle",
    "LoggingConfig",
    "PreviewConfig",
    "RouterConfig",
    "SettingsChanged",
    "SettingsStore",
]
