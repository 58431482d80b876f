"""Tests for config module."""

from pathlib import Path
from unittest.mock import Mock

import yaml

from rtcsignal.config import Config, SignalingConfig, get_config_path, load_config


class TestConfigDefaults:
    """Test default configuration values."""

    def test_default_config_values(self):
        """Config has sensible defaults when no file exists."""
        config = Config()

        assert config.log_level == "INFO"
        assert config.log_file is None
        assert config.signaling == SignalingConfig(address=None, username="rtcsignal")
        assert config.ice_servers == []
        assert config.module_log_levels == {}


class TestGetConfigPath:
    """Test config path resolution."""

    def test_get_config_path_default(self):
        """Default config path is ~/.config/rtcsignal/config.yaml."""
        path = get_config_path()
        assert path == Path.home() / ".config" / "rtcsignal" / "config.yaml"

    def test_get_config_path_custom(self):
        """Can override config path."""
        custom = Path("/custom/config.yaml")
        assert get_config_path(custom) == custom


class TestLoadConfig:
    """Test config loading."""

    def test_load_config_no_file_returns_defaults(self, tmp_path):
        """Config returns defaults when no file exists."""
        config = load_config(tmp_path / "nonexistent.yaml")

        assert config == Config()

    def test_load_config_from_file(self, tmp_path):
        """Config loads values from YAML file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            yaml.dump(
                {
                    "log_level": "DEBUG",
                    "log_file": "/tmp/rtcsignal.log",
                    "signaling": {"address": "192.0.2.1", "username": "alice"},
                    "ice_servers": ["stun:stun.example.org:3478"],
                }
            )
        )

        config = load_config(config_file)

        assert config.log_level == "DEBUG"
        assert config.log_file == "/tmp/rtcsignal.log"
        assert config.signaling.address == "192.0.2.1"
        assert config.signaling.username == "alice"
        assert config.ice_servers == ["stun:stun.example.org:3478"]

    def test_partial_signaling_section_uses_defaults(self, tmp_path):
        """Missing keys in a section fall back to defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"signaling": {"address": "10.0.0.1"}}))

        config = load_config(config_file)

        assert config.signaling.address == "10.0.0.1"
        assert config.signaling.username == "rtcsignal"
        assert config.log_level == "INFO"

    def test_empty_file_returns_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("   \n")

        assert load_config(config_file) == Config()

    def test_invalid_yaml_returns_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("log_level: [unclosed")

        assert load_config(config_file) == Config()

    def test_non_mapping_yaml_returns_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- just\n- a list\n")

        assert load_config(config_file) == Config()

    def test_injected_file_reader(self):
        """Custom file reader is used instead of disk."""
        reader = Mock(return_value={"log_level": "WARNING"})

        config = load_config(Path("/nowhere.yaml"), file_reader=reader)

        reader.assert_called_once_with(Path("/nowhere.yaml"))
        assert config.log_level == "WARNING"

    def test_module_log_levels_loaded(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("module_log_levels:\n  sdp: DEBUG\n  signaling: WARNING\n")

        config = load_config(config_file)

        assert config.module_log_levels == {"sdp": "DEBUG", "signaling": "WARNING"}

    def test_non_mapping_module_log_levels_ignored(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("module_log_levels:\n  - sdp\n")

        assert load_config(config_file).module_log_levels == {}

    def test_username_with_spaces_is_loaded_as_written(self, tmp_path):
        """The origin builder, not the loader, decides how it is rendered."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("signaling:\n  username: Alice Smith\n")

        assert load_config(config_file).signaling.username == "Alice Smith"
