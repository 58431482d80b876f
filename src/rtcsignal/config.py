"""Configuration management for rtcsignal."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml


@dataclass
class SignalingConfig:
    """Origin settings for locally built session descriptions."""

    address: str | None = None  # None -> loopback
    username: str = "rtcsignal"


@dataclass
class Config:
    """Peer connection configuration."""

    log_level: str = "INFO"
    log_file: str | None = None
    module_log_levels: dict[str, str] = field(default_factory=dict)  # e.g. {"sdp": "DEBUG"}
    signaling: SignalingConfig = field(default_factory=SignalingConfig)
    ice_servers: list[str] = field(default_factory=list)  # passed through to the transport


def get_config_path(custom_path: Path | None = None) -> Path:
    """Get the configuration file path.

    Args:
        custom_path: Override path. If None, returns default.

    Returns:
        Path to config file.
    """
    if custom_path is not None:
        return custom_path
    return Path.home() / ".config" / "rtcsignal" / "config.yaml"


def _default_file_reader(path: Path) -> dict[str, Any] | None:
    """Default file reader that loads YAML from disk."""
    if not path.exists():
        return None
    try:
        content = path.read_text()
        if not content.strip():
            return None
        return yaml.safe_load(content)
    except yaml.YAMLError:
        return None


def _module_levels(data: Any) -> dict[str, str]:
    if not isinstance(data, dict):
        return {}
    return {str(module): str(level) for module, level in data.items()}


def load_config(
    path: Path | None = None,
    file_reader: Callable[[Path], dict[str, Any] | None] | None = None,
) -> Config:
    """Load configuration from file.

    Args:
        path: Path to config file. If None, uses default path.
        file_reader: Injectable file reader for testing.

    Returns:
        Config object with values from file or defaults.
    """
    config_path = get_config_path(path)
    reader = file_reader or _default_file_reader

    data = reader(config_path)

    if not isinstance(data, dict):
        return Config()

    signaling_data = data.get("signaling") or {}
    signaling_config = SignalingConfig(
        address=signaling_data.get("address", SignalingConfig.address),
        username=signaling_data.get("username", SignalingConfig.username),
    )

    return Config(
        log_level=data.get("log_level", Config.log_level),
        log_file=data.get("log_file", Config.log_file),
        module_log_levels=_module_levels(data.get("module_log_levels")),
        signaling=signaling_config,
        ice_servers=list(data.get("ice_servers") or []),
    )
