"""Tests for the configuration management module."""

import json
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from modbus_scanner.config.defaults import DEFAULT_CONFIG, DEFAULT_INI_TEMPLATE
from modbus_scanner.config.settings import SettingsManager


class TestDefaults:
    """Tests for default configuration values."""

    def test_default_config_has_line_settings(self):
        """Default config should have serial line defaults."""
        assert DEFAULT_CONFIG["dataBits"] == 8
        assert DEFAULT_CONFIG["stopBits"] == 1

    def test_default_config_has_modbus_settings(self):
        """Default config should read holding registers with a 2 s timeout."""
        assert DEFAULT_CONFIG["functionCode"] == 3
        assert DEFAULT_CONFIG["timeoutS"] == 2.0
        assert "retries" in DEFAULT_CONFIG

    def test_default_ini_template_has_sections(self):
        """Default INI template should have expected sections."""
        assert "[Server]" in DEFAULT_INI_TEMPLATE
        assert "[Serial]" in DEFAULT_INI_TEMPLATE
        assert "[Modbus]" in DEFAULT_INI_TEMPLATE


class TestSettingsManager:
    """Tests for the SettingsManager class."""

    @pytest.fixture
    def settings_dir(self, tmp_path):
        """Create a temporary settings directory."""
        return tmp_path

    @pytest.fixture
    def settings(self, settings_dir):
        """Create a SettingsManager instance."""
        return SettingsManager(settings_dir)

    def test_generates_default_ini_if_missing(self, settings_dir, settings):
        """Should write the INI template when no INI exists."""
        ini_file = settings_dir / "scanner-config.ini"
        assert ini_file.exists()
        assert ini_file.read_text(encoding="utf-8") == DEFAULT_INI_TEMPLATE

    def test_ini_keys_keep_their_case(self, settings):
        """camelCase keys from the INI should not be lowercased."""
        config = settings.get_all()
        assert config["httpPort"] == 8080
        assert "httpport" not in config

    def test_ini_values_are_typed(self, settings):
        """INI values should be parsed into int/float/str."""
        assert settings.get("timeoutS") == 2.0
        assert settings.get("functionCode") == 3
        assert settings.get("loggingLevel") == "INFO"

    def test_get_missing_with_default(self, settings):
        """get with missing key should return default."""
        assert settings.get("nonexistent", "default") == "default"

    def test_update_saves_to_json(self, settings_dir, settings):
        """update should save changes to JSON file."""
        settings.update({"timeoutS": 0.5})

        with open(settings_dir / "web-settings.json") as f:
            saved = json.load(f)
        assert saved["timeoutS"] == 0.5

    def test_json_overrides_ini(self, settings_dir):
        """JSON settings should override INI settings."""
        (settings_dir / "scanner-config.ini").write_text("[Modbus]\nfunctionCode=3\n")
        (settings_dir / "web-settings.json").write_text(json.dumps({"functionCode": 4}))

        settings = SettingsManager(settings_dir)
        assert settings.get("functionCode") == 4

    def test_ini_parses_booleans_and_null(self, settings_dir):
        """true/false/null INI values should map to Python values."""
        (settings_dir / "scanner-config.ini").write_text(
            "[Extra]\nflagOn=true\nflagOff=false\nnothing=null\n"
        )
        settings = SettingsManager(settings_dir)
        assert settings.get("flagOn") is True
        assert settings.get("flagOff") is False
        assert settings.get("nothing", "missing") is None

    def test_malformed_json_falls_back_to_ini(self, settings_dir):
        """A broken JSON file should not prevent loading."""
        (settings_dir / "web-settings.json").write_text("{not json")
        settings = SettingsManager(settings_dir)
        assert settings.get("dataBits") == 8

    def test_reload_updates_cache(self, settings_dir, settings):
        """reload should update cache from files."""
        assert settings.get("retries") == 1

        (settings_dir / "web-settings.json").write_text(json.dumps({"retries": 3}))

        settings.reload()
        assert settings.get("retries") == 3

    def test_default_poll_interval(self, settings):
        """Polling should rescan every 2 seconds by default."""
        assert settings.get("pollIntervalS") == 2.0

    @pytest.mark.parametrize("bad", [
        {"functionCode": 9},
        {"functionCode": "3"},
        {"timeoutS": "abc"},
        {"timeoutS": 0},
        {"httpPort": "x"},
        {"dataBits": True},
        {"retries": 1.5},
        {"loggingLevel": "LOUD"},
        {"colour": "blue"},
    ])
    def test_update_rejects_invalid_values(self, settings_dir, settings, bad):
        """Invalid values should raise and leave cache and file untouched."""
        with pytest.raises(ValueError):
            settings.update(bad)

        assert settings.get_all() == SettingsManager(settings_dir).get_all()
        assert not (settings_dir / "web-settings.json").exists()

    def test_update_is_all_or_nothing(self, settings):
        """One bad key should reject the whole update."""
        with pytest.raises(ValueError, match="functionCode"):
            settings.update({"retries": 2, "functionCode": 9})

        assert settings.get("retries") == 1

    def test_update_accepts_int_for_float_setting(self, settings):
        """Whole numbers are valid for float settings."""
        settings.update({"timeoutS": 1, "pollIntervalS": 0.5})
        assert settings.get("timeoutS") == 1
        assert settings.get("pollIntervalS") == 0.5

    def test_update_rejects_non_object(self, settings):
        with pytest.raises(ValueError, match="JSON object"):
            settings.update(["functionCode", 4])
