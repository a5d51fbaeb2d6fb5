"""Observable store for the global display settings.

Every open diagram subscribes to one SettingsStore. An update validates
the new values through DisplaySettings, swaps the snapshot, and notifies
subscribers with a typed SettingsChanged event naming the keys that
actually changed. An update that changes nothing notifies nobody.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import ValidationError

from dbdiagram.config.models import DisplaySettings
from dbdiagram.core.errors import ConfigError

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class SettingsChanged:
    """One committed settings change."""

    previous: DisplaySettings
    current: DisplaySettings
    changed: frozenset[str]


Listener = Callable[[SettingsChanged], None]


class SettingsStore:
    """Holds the current DisplaySettings and broadcasts changes."""

    def __init__(self, initial: DisplaySettings | None = None) -> None:
        self._current = initial or DisplaySettings()
        self._listeners: list[Listener] = []

    @property
    def current(self) -> DisplaySettings:
        return self._current

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes: Any) -> SettingsChanged | None:
        """Validate and apply changes; notify listeners when anything differs.

        Raises:
            ConfigError: If a value fails validation. The store is unchanged.
        """
        unknown = set(changes) - set(DisplaySettings.model_fields)
        if unknown:
            name = sorted(unknown)[0]
            raise ConfigError.invalid_value(f"display.{name}", changes[name], "unknown setting")

        merged = {**self._current.model_dump(), **changes}
        try:
            updated = DisplaySettings.model_validate(merged)
        except ValidationError as e:
            err = e.errors()[0]
            field = ".".join(str(loc) for loc in err["loc"])
            raise ConfigError.invalid_value(f"display.{field}", err.get("input"), err["msg"]) from e

        changed = frozenset(
            name
            for name in DisplaySettings.model_fields
            if getattr(updated, name) != getattr(self._current, name)
        )
        if not changed:
            return None

        event = SettingsChanged(previous=self._current, current=updated, changed=changed)
        self._current = updated
        logger.debug("display_settings_changed", changed=sorted(changed))

        for listener in list(self._listeners):
            listener(event)
        return event

    def reset(self) -> SettingsChanged | None:
        """Restore defaults."""
        return self.update(**DisplaySettings().model_dump())
