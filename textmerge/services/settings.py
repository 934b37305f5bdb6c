"""
Application settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from textmerge.core.merge.conflict_resolver import ResolutionStrategy
from textmerge.core.merge.resolution import DEFAULT_HISTORY_LIMIT
from textmerge.core.merge.segments import CONFLICT_REASON


@dataclass
class MergeSettings:
    """Settings for merge operations."""
    history_limit: int = DEFAULT_HISTORY_LIMIT
    conflict_reason: str = CONFLICT_REASON
    max_alignment_cells: Optional[int] = None
    auto_resolve_whitespace: bool = True
    default_strategy: ResolutionStrategy = ResolutionStrategy.MANUAL


@dataclass
class OutputSettings:
    """Settings for reading inputs and writing results."""
    encoding: str = "utf-8"
    show_segments: bool = True


@dataclass
class ApplicationSettings:
    """Main application settings container."""
    merge: MergeSettings = field(default_factory=MergeSettings)
    output: OutputSettings = field(default_factory=OutputSettings)

    recent_paths: list[str] = field(default_factory=list)
    recent_paths_limit: int = 10


class SettingsManager:
    """Manager for loading/saving application settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[ApplicationSettings] = None
        self._observers: list[Callable[[ApplicationSettings], None]] = []

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            # Windows
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'TextMerge' / 'settings.json'
        else:
            # Linux/Mac
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / 'textmerge' / 'settings.json'

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ApplicationSettings:
        """Load settings from disk; defaults if missing or unreadable."""
        if not self.settings_path.exists():
            return ApplicationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return self._from_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logging.warning(f"SettingsManager - Ignoring unreadable settings {self.settings_path}: {e}")
            return ApplicationSettings()

    def save(self, settings: Optional[ApplicationSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(self._to_dict(settings), f, indent=2)

            self._settings = settings
            self._notify_observers()
            return True

        except OSError as e:
            logging.error(f"SettingsManager - Failed to save settings: {e}")
            return False

    def reset(self) -> ApplicationSettings:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self.save()
        return self._settings

    def add_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Add a callback to be notified of settings changes."""
        self._observers.append(callback)

    def remove_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Remove a settings change observer."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self) -> None:
        """Notify all observers of settings change."""
        for callback in self._observers:
            callback(self._settings)

    def add_recent_path(self, path: str) -> None:
        """Add a path to the recent versions list."""
        settings = self.settings
        recent = settings.recent_paths

        if path in recent:
            recent.remove(path)
        recent.insert(0, path)

        settings.recent_paths = recent[:settings.recent_paths_limit]
        self.save()

    def _to_dict(self, settings: ApplicationSettings) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        def convert(obj: Any) -> Any:
            if isinstance(obj, Enum):
                return obj.name
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert(item) for item in obj]
            else:
                return obj

        return convert(asdict(settings))

    def _from_dict(self, data: dict) -> ApplicationSettings:
        """Convert dictionary back to settings objects."""
        def get_enum(enum_class: type, value: Any) -> Enum:
            if isinstance(value, str):
                try:
                    return enum_class[value]
                except KeyError:
                    return list(enum_class)[0]
            return value

        merge_data = data.get('merge', {})
        defaults = MergeSettings()
        merge = MergeSettings(
            history_limit=merge_data.get('history_limit', defaults.history_limit),
            conflict_reason=merge_data.get('conflict_reason', defaults.conflict_reason),
            max_alignment_cells=merge_data.get('max_alignment_cells', defaults.max_alignment_cells),
            auto_resolve_whitespace=merge_data.get('auto_resolve_whitespace', defaults.auto_resolve_whitespace),
            default_strategy=get_enum(ResolutionStrategy, merge_data.get('default_strategy', 'MANUAL')),
        )

        output_data = data.get('output', {})
        output = OutputSettings(
            encoding=output_data.get('encoding', 'utf-8'),
            show_segments=output_data.get('show_segments', True),
        )

        return ApplicationSettings(
            merge=merge,
            output=output,
            recent_paths=data.get('recent_paths', []),
            recent_paths_limit=data.get('recent_paths_limit', 10),
        )
