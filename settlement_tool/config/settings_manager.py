"""
Settings Manager for Settlement Tool

Manages persistent user-editable defaults.
Stores settings in JSON format at: ~/.settlement_tool/settings.json

Features:
- Save/load default exceedance limits
- Save/load coordinate and display units
- Remember the report template path
- Reset to built-in defaults
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from .models import ReportLimits
from .settings import Settings

logger = logging.getLogger(__name__)

# Default settings location
DEFAULT_SETTINGS_DIR = Path.home() / ".settlement_tool"
SETTINGS_FILE = DEFAULT_SETTINGS_DIR / "settings.json"

SETTINGS_FORMAT = "settlement_tool_user_settings"
VALID_UNITS = ("mm", "cm", "dm", "m")


class SettingsManager:
    """
    Manages persistent settings.

    Settings are stored in JSON format at ~/.settlement_tool/settings.json
    """

    def __init__(self, settings_file: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            settings_file: Optional custom settings file path
        """
        self.settings_file = Path(settings_file) if settings_file else SETTINGS_FILE
        self.settings_dir = self.settings_file.parent

    def _load_settings_file(self) -> Dict[str, Any]:
        """
        Load the entire settings file.

        Returns:
            Settings dictionary or empty dict if missing or unreadable
        """
        if not self.settings_file.exists():
            return {}

        try:
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse settings file (invalid JSON): {e}")
            return {}
        except OSError as e:
            logger.error(f"Failed to read settings: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning("Invalid settings file format - using defaults")
            return {}
        return data

    def _save_settings_file(self, data: Dict[str, Any]) -> bool:
        data.setdefault("version", "1.0")
        data.setdefault("format", SETTINGS_FORMAT)
        try:
            self.settings_dir.mkdir(parents=True, exist_ok=True)
            with open(self.settings_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            logger.info(f"Settings saved successfully to {self.settings_file}")
            return True
        except OSError as e:
            logger.error(f"Failed to save settings: {e}")
            return False

    def save_limits(self, limits: ReportLimits) -> bool:
        """
        Save default exceedance limits.

        Args:
            limits: Limits to store (None values disable a check)

        Returns:
            True if save successful, False otherwise
        """
        data = self._load_settings_file()
        data["limits"] = {
            "max_nomen": limits.max_nomen,
            "max_calculated": limits.max_calculated,
            "rel_nomen": limits.rel_nomen,
            "rel_calculated": limits.rel_calculated,
        }
        return self._save_settings_file(data)

    def load_limits(self) -> Optional[ReportLimits]:
        """
        Load default exceedance limits.

        Returns:
            ReportLimits if stored, None otherwise
        """
        stored = self._load_settings_file().get("limits")
        if not isinstance(stored, dict):
            logger.info("No stored limits - using defaults")
            return None

        def value(key):
            raw = stored.get(key)
            try:
                return None if raw is None else float(raw)
            except (TypeError, ValueError):
                logger.warning(f"Ignoring invalid limit {key}={raw!r}")
                return None

        return ReportLimits(
            max_nomen=value("max_nomen"),
            max_calculated=value("max_calculated"),
            rel_nomen=value("rel_nomen"),
            rel_calculated=value("rel_calculated"),
        )

    def get_unit(self, key: str = "coord_unit") -> str:
        """
        Get a stored unit ('coord_unit' or 'display_unit').

        Returns:
            Unit name, 'mm' if not set or invalid
        """
        unit = self._load_settings_file().get(key, "mm")
        if unit not in VALID_UNITS:
            logger.warning(f"Invalid unit '{unit}', using mm")
            return "mm"
        return unit

    def set_unit(self, unit: str, key: str = "coord_unit") -> bool:
        """Store a unit name ('mm', 'cm', 'dm', 'm')."""
        if unit not in VALID_UNITS:
            logger.error(f"Invalid unit: {unit}. Must be one of {', '.join(VALID_UNITS)}.")
            return False
        data = self._load_settings_file()
        data[key] = unit
        return self._save_settings_file(data)

    @property
    def template_path(self) -> Optional[str]:
        return self._load_settings_file().get("template_path")

    @template_path.setter
    def template_path(self, value: Optional[str]):
        data = self._load_settings_file()
        data["template_path"] = value
        self._save_settings_file(data)

    def apply_to(self, settings: Settings) -> Settings:
        """Overlay stored values on a Settings instance."""
        limits = self.load_limits()
        if limits is not None:
            settings.limits.max_nomen = limits.max_nomen
            settings.limits.max_calculated = limits.max_calculated
            settings.limits.rel_nomen = limits.rel_nomen
            settings.limits.rel_calculated = limits.rel_calculated
        settings.coord_unit = self.get_unit("coord_unit")
        settings.display_unit = self.get_unit("display_unit")
        return settings

    def reset_to_defaults(self) -> bool:
        """
        Delete settings file to revert to built-in defaults.

        Returns:
            True if reset successful (or file didn't exist), False otherwise
        """
        try:
            if self.settings_file.exists():
                self.settings_file.unlink()
                logger.info("Settings reset to defaults")
            return True
        except OSError as e:
            logger.error(f"Failed to reset settings: {e}")
            return False

    def backup_settings(self, backup_suffix: str = "backup") -> Optional[Path]:
        """
        Create a backup of current settings.

        Returns:
            Path to backup file if successful, None otherwise
        """
        if not self.settings_file.exists():
            logger.warning("No settings file to backup")
            return None

        try:
            backup_file = self.settings_file.with_suffix(f".{backup_suffix}.json")
            backup_file.write_text(self.settings_file.read_text(encoding='utf-8'), encoding='utf-8')
            logger.info(f"Settings backed up to {backup_file}")
            return backup_file
        except OSError as e:
            logger.error(f"Failed to backup settings: {e}")
            return None


# Module-level singleton instance
_settings_manager_instance: Optional[SettingsManager] = None


def get_settings_manager() -> SettingsManager:
    """
    Get the global settings manager instance (singleton pattern).

    Returns:
        SettingsManager instance
    """
    global _settings_manager_instance
    if _settings_manager_instance is None:
        _settings_manager_instance = SettingsManager()
    return _settings_manager_instance
