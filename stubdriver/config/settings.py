"""
Settings module for stub and driver generation.

This module provides a settings class to manage configuration options and
defaults for matrix parsing, name matching, generation and storage.
"""

import copy
import os
import json
import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class Settings:
    """
    Settings for the ingestion and generation pipeline.

    Values come from built-in defaults, then an optional JSON config file,
    then environment variables prefixed with STUBDRIVER_.
    """

    ENV_PREFIX = "STUBDRIVER_"

    DEFAULT_SETTINGS = {
        # Requirement traceability matrix
        "rtm": {
            "columns": {
                "id": [
                    "requirement id", "req id", "req_id", "requirementid",
                    "function id", "id", "requirement",
                ],
                "name": [
                    "system function", "function name", "function",
                    "systemfunction", "name", "description",
                ],
                "diagram": [
                    "sequence diagram", "seq diagram", "sequencediagram",
                    "sequence diagrams", "diagram", "sequence",
                ],
                "related": [
                    "related sequence diagram", "related diagram",
                    "relateddiagram", "additional diagrams",
                ],
            },
            "separators": [",", ";", "|"],
            "fuzzy_threshold": 0.8,
        },

        # Name resolution
        "matching": {
            "strict": False,
            "min_length": 3,
        },

        # Code generation
        "generation": {
            "seed": None,
            "boolean_true_bias": 0.8,
            "summary_file_name": "GenerationSummary.txt",
        },

        # Persistence of workspace collections
        "storage": {
            "namespace": "stub_driver",
            "path": None,
        },

        "logging": {
            "level": "INFO",
            "format": "text",
        },
    }

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize settings.

        Args:
            config_path: Optional path to a JSON config file
        """
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)

        if config_path:
            self.load_from_file(config_path)

        self._load_from_env()

    def load_from_file(self, config_path: str) -> bool:
        """
        Load settings from a JSON config file.

        Args:
            config_path: Path to the config file

        Returns:
            True if successfully loaded, False otherwise
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                user_settings = json.load(f)

            self._update_dict_recursive(self.settings, user_settings)
            logger.info(f"Loaded settings from {config_path}")
            return True

        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load settings from {config_path}: {str(e)}")
            return False

    def _update_dict_recursive(self, target: Dict, source: Dict) -> None:
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._update_dict_recursive(target[key], value)
            else:
                target[key] = value

    def _load_from_env(self) -> None:
        """Load settings from environment variables."""
        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue

            setting_path = key[len(self.ENV_PREFIX):].lower().split('_')
            if not setting_path or not setting_path[0]:
                continue

            current = self.settings
            for part in setting_path[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]

            current[setting_path[-1]] = self._convert_value(value)
            logger.debug(f"Setting {key} from environment variable")

    def _convert_value(self, value: str) -> Any:
        """
        Convert string value to appropriate type.

        Args:
            value: String value to convert

        Returns:
            Converted value
        """
        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False
        if value.lower() in ("none", "null"):
            return None

        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

        return value

    def get(self, *path: str, default: Any = None) -> Any:
        """
        Get a setting value by path.

        Args:
            *path: Path components to the setting
            default: Default value if setting not found

        Returns:
            Setting value or default
        """
        current = self.settings

        for part in path:
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        return current

    def set(self, *path_and_value: Any) -> None:
        """
        Set a setting value by path.

        Args:
            *path_and_value: Path components and value, where the last
                            element is the value to set
        """
        if len(path_and_value) < 2:
            logger.error("set() requires at least one path component and a value")
            return

        path = path_and_value[:-1]
        value = path_and_value[-1]

        current = self.settings
        for part in path[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]

        current[path[-1]] = value

    def save_to_file(self, config_path: str) -> bool:
        """
        Save current settings to a JSON file.

        Args:
            config_path: Path to save the config file

        Returns:
            True if successfully saved, False otherwise
        """
        try:
            os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)

            with open(config_path, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=2)

            logger.info(f"Saved settings to {config_path}")
            return True

        except OSError as e:
            logger.warning(f"Failed to save settings to {config_path}: {str(e)}")
            return False

    def get_all(self) -> Dict[str, Any]:
        """Get a copy of all settings."""
        return copy.deepcopy(self.settings)

    def reset(self) -> None:
        """Reset all settings to defaults."""
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)
        logger.info("Reset settings to defaults")

    def reset_section(self, section: str) -> bool:
        """
        Reset a specific section to defaults.

        Args:
            section: Section name

        Returns:
            True if section existed and was reset, False otherwise
        """
        if section in self.DEFAULT_SETTINGS:
            self.settings[section] = copy.deepcopy(self.DEFAULT_SETTINGS[section])
            logger.info(f"Reset {section} settings to defaults")
            return True
        logger.warning(f"Section {section} not found in default settings")
        return False
