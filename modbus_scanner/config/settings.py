"""Settings manager for the Modbus scanner.

Handles loading/saving configuration from INI and JSON files.
INI serves as factory defaults, JSON stores user overrides.
"""

import json
import configparser
import threading
from pathlib import Path
from typing import Dict, Any

from modbus_scanner.scan_config import FUNCTION_CODES
from modbus_scanner.utils.logging import log, VALID_LEVELS
from modbus_scanner.config.defaults import DEFAULT_CONFIG, DEFAULT_INI_TEMPLATE

INI_FILENAME = "scanner-config.ini"
JSON_FILENAME = "web-settings.json"

POSITIVE_KEYS = ("httpPort", "dataBits", "stopBits", "timeoutS", "pollIntervalS")


class SettingsManager:
    """Manages application settings from INI and JSON files.

    Settings are loaded in order of priority (lowest to highest):
    1. DEFAULT_CONFIG (hardcoded defaults)
    2. INI file (base line and server config)
    3. JSON file (user overrides)
    """

    def __init__(self, config_dir: Path):
        """Initialize the settings manager.

        Args:
            config_dir: Directory containing configuration files.
        """
        self.config_dir = Path(config_dir)
        self.ini_file = self.config_dir / INI_FILENAME
        self.json_file = self.config_dir / JSON_FILENAME
        self.lock = threading.Lock()
        self.cache: Dict[str, Any] = {}
        self._load()

    def _generate_default_ini(self) -> None:
        """Generate default INI file with all required values."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.ini_file, 'w', encoding='utf-8') as f:
                f.write(DEFAULT_INI_TEMPLATE)
            log(f"[Settings] Generated default INI: {self.ini_file}")
        except OSError as e:
            log(f"[Settings] Error generating default INI: {e}", level="WARNING")

    def _parse_ini_value(self, value: str) -> Any:
        """Parse an INI value string to the appropriate Python type.

        Args:
            value: The string value from the INI file.

        Returns:
            The parsed value (bool, None, float, int, or string).
        """
        lower_value = value.lower()
        if lower_value == 'true':
            return True
        elif lower_value == 'false':
            return False
        elif lower_value == 'null':
            return None

        try:
            if '.' in value:
                return float(value)
            else:
                return int(value)
        except ValueError:
            return value

    def _load(self) -> None:
        """Load all settings into cache."""
        with self.lock:
            self.cache = DEFAULT_CONFIG.copy()

            if not self.ini_file.exists():
                log("[Settings] INI file not found, generating defaults...")
                self._generate_default_ini()

            ini_config = {}
            parser = configparser.ConfigParser()
            # Keep camelCase keys as written
            parser.optionxform = str
            try:
                parser.read(self.ini_file, encoding="utf-8")
                for section in parser.sections():
                    for key, value in parser.items(section):
                        ini_config[key] = self._parse_ini_value(value)
            except configparser.Error as e:
                log(f"[Settings] Error loading INI: {e}", level="WARNING")

            json_config = {}
            if self.json_file.exists():
                try:
                    with open(self.json_file, 'r', encoding='utf-8') as f:
                        json_config = json.load(f)
                except (OSError, json.JSONDecodeError) as e:
                    log(f"[Settings] Error loading JSON: {e}", level="WARNING")

            # defaults -> INI -> JSON
            self.cache.update(ini_config)
            if isinstance(json_config, dict):
                self.cache.update(json_config)

    def get_all(self) -> Dict[str, Any]:
        """Get all settings as a dictionary.

        Returns:
            A copy of all current settings.
        """
        with self.lock:
            return self.cache.copy()

    def get(self, key: str, default: Any = None) -> Any:
        """Get a specific setting value."""
        with self.lock:
            return self.cache.get(key, default)

    def _validate(self, new_settings: Dict[str, Any]) -> None:
        """Check new values against the types of DEFAULT_CONFIG.

        Raises:
            ValueError: On an unknown key or a value of the wrong type.
        """
        if not isinstance(new_settings, dict):
            raise ValueError("settings must be a JSON object")

        for key, value in new_settings.items():
            if key not in DEFAULT_CONFIG:
                raise ValueError(f"Unknown setting: {key}")

            expected = type(DEFAULT_CONFIG[key])
            if isinstance(value, bool):
                valid = expected is bool
            elif expected is float:
                valid = isinstance(value, (int, float))
            else:
                valid = isinstance(value, expected)
            if not valid:
                raise ValueError(f"{key} must be of type {expected.__name__}")

            if key == "functionCode" and value not in FUNCTION_CODES:
                raise ValueError("functionCode must be one of: 1, 2, 3, 4")
            if key == "loggingLevel" and value not in VALID_LEVELS:
                raise ValueError("loggingLevel must be one of: " + ", ".join(VALID_LEVELS))
            if key in POSITIVE_KEYS and value <= 0:
                raise ValueError(f"{key} must be greater than zero")

    def update(self, new_settings: Dict[str, Any]) -> None:
        """Update settings and save to JSON.

        Args:
            new_settings: Dictionary of settings to update.

        Raises:
            ValueError: If a key is unknown or a value is invalid.
        """
        self._validate(new_settings)

        with self.lock:
            self.cache.update(new_settings)

            try:
                with open(self.json_file, 'w', encoding='utf-8') as f:
                    json.dump(self.cache, f, indent=2)
            except OSError as e:
                log(f"[Settings] Error saving JSON: {e}", level="WARNING")

    def reload(self) -> None:
        """Reload settings from files."""
        self._load()
