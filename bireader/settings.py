"""User-tunable viewer settings backed by :class:`QSettings`."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Final

from PySide6.QtCore import QSettings

#: QSettings keys for each :class:`ViewerSettings` field.
SETTINGS_KEYS: Final[dict[str, str]] = {
    "max_selection_length": "lookup/max_selection_length",
    "max_unmatched_tokens": "lookup/max_unmatched_tokens",
    "not_found_marker": "lookup/not_found_marker",
    "arm_delay_ms": "lookup/arm_delay_ms",
    "guard_ms": "scroll/guard_ms",
    "left_percent": "layout/left_percent",
    "sync_scroll": "features/sync_scroll",
    "word_lookup": "features/word_lookup",
    "zoom": "view/zoom",
    "log_level": "logging/level",
}


@dataclass
class ViewerSettings:
    """
    Tunable thresholds and feature toggles for the viewer.

    The lookup cutoffs are heuristics for suppressing accidental selections, so
    they live here rather than as constants in the lookup controller.
    """

    #: Longer selections are not treated as lookup targets.
    max_selection_length: int = 80
    #: Unmatched selections with more whitespace tokens than this are ignored.
    max_unmatched_tokens: int = 4
    #: Translation shown for a single word with no dictionary entry.
    not_found_marker: str = "(not in dictionary)"
    #: Delay before the tooltip's outside-click listener is armed.
    arm_delay_ms: int = 100
    #: Window during which a mirrored scroll write suppresses re-mirroring.
    guard_ms: int = 50
    #: Width of the source pane, in percent of the container.
    left_percent: float = 50.0
    #: Whether proportional scroll sync starts enabled.
    sync_scroll: bool = False
    #: Whether word lookup on selection starts enabled.
    word_lookup: bool = True
    #: Text zoom in percent.
    zoom: int = 100
    #: Level name for the JSON log file.
    log_level: str = "INFO"

    @classmethod
    def load(cls, settings: QSettings | None = None) -> ViewerSettings:
        """
        Load settings, falling back to the defaults for missing keys.

        Keyword Args:
            settings: The QSettings to read; defaults to the application's

        Returns:
            A new :class:`ViewerSettings`

        """
        settings = settings or QSettings()
        defaults = cls()
        values: dict[str, Any] = {}
        for field in fields(cls):
            default = getattr(defaults, field.name)
            value = settings.value(
                SETTINGS_KEYS[field.name], default, type=type(default)
            )
            values[field.name] = value if value is not None else default
        return cls(**values)

    def save(self, settings: QSettings | None = None) -> None:
        """
        Persist every field.

        Keyword Args:
            settings: The QSettings to write; defaults to the application's

        """
        settings = settings or QSettings()
        for field in fields(self):
            settings.setValue(SETTINGS_KEYS[field.name], getattr(self, field.name))
        settings.sync()
