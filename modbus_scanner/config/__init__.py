"""Configuration management modules."""

from modbus_scanner.config.settings import SettingsManager
from modbus_scanner.config.defaults import DEFAULT_CONFIG, DEFAULT_INI_TEMPLATE

__all__ = ["SettingsManager", "DEFAULT_CONFIG", "DEFAULT_INI_TEMPLATE"]
