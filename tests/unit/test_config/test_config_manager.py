"""
Unit tests for configuration loading and the configuration singleton.
"""

import tomllib

import pytest

from procmon.config import (
    clear_config_cache,
    get_config,
    set_config_path,
)
from procmon.config import manager
from procmon.config.loader import load_main_config
from procmon.validation import ValidationError

CONFIG_TEXT = """
[monitor.collection]
processes = ["nginx", "postgres"]
metrics = ["rss", "minflt"]
interval_seconds = 2.0

[monitor.server]
port = 9100

[monitor.logging]
level = "debug"
"""


@pytest.fixture
def config_file(temp_dir):
    path = temp_dir / "config.toml"
    path.write_text(CONFIG_TEXT)
    return path


@pytest.mark.unit
class TestConfigLoading:
    """Test cases for reading config.toml."""

    def test_load_main_config(self, config_file):
        data = load_main_config(config_file)
        assert data["collection"]["processes"] == ["nginx", "postgres"]
        assert data["server"]["port"] == 9100

    def test_missing_monitor_table(self, temp_dir):
        path = temp_dir / "empty.toml"
        path.write_text("[other]\nkey = 1\n")
        assert load_main_config(path) == {}

    def test_malformed_toml(self, temp_dir):
        path = temp_dir / "broken.toml"
        path.write_text("[monitor.collection\nprocesses = ")
        with pytest.raises(tomllib.TOMLDecodeError):
            load_main_config(path)


@pytest.mark.unit
class TestConfigSingleton:
    """Test cases for get_config and the config path."""

    def test_explicit_path(self, config_file):
        set_config_path(config_file)

        config = get_config()

        assert config.collection.processes == ["nginx", "postgres"]
        assert config.collection.metrics == ["rss", "minflt"]
        assert config.collection.interval_seconds == 2.0
        assert config.server.port == 9100
        assert config.server.host == "0.0.0.0"
        assert config.log_level == "DEBUG"

    def test_config_is_cached(self, config_file):
        set_config_path(config_file)
        first = get_config()
        assert get_config() is first

        clear_config_cache()
        assert manager._CONFIG is None
        assert get_config() is not first

    def test_explicit_missing_file_raises(self, temp_dir):
        set_config_path(temp_dir / "nope.toml")
        with pytest.raises(FileNotFoundError):
            get_config()

    def test_missing_default_file_uses_defaults(self, temp_dir, monkeypatch):
        monkeypatch.setattr(manager, "_CONFIG_FILE_PATH", temp_dir / "absent.toml")
        clear_config_cache()

        config = get_config()

        assert config.collection.processes == ["python3"]
        assert config.server.port == 8090

    def test_invalid_values_raise(self, temp_dir):
        path = temp_dir / "bad.toml"
        path.write_text("[monitor.server]\nport = 70000\n")
        set_config_path(path)
        with pytest.raises(ValidationError):
            get_config()

    def test_shipped_default_config_is_valid(self):
        path = manager.DEFAULT_CONFIG_FILE_PATH
        if not path.exists():
            pytest.skip("default config file not present")
        set_config_path(path)
        config = get_config()
        assert config.server.port == 8090
