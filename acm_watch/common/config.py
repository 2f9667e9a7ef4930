"""
Configuration Dataclasses

Type-safe configuration structures for the watcher.
Loaded from a YAML file, with credentials overridable from the environment.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError

DEFAULT_GROUP = "DEFAULT_GROUP"

# Environment variables that override the YAML group section
ENV_OVERRIDES = {
    "NACOS_ACCESS_KEY": "access_key",
    "NACOS_SECRET_KEY": "secret_key",
    "NACOS_NAMESPACE": "namespace",
}


@dataclass(frozen=True)
class GroupIdentity:
    """Tenant/group whose entries are watched"""
    access_key: str
    secret_key: str = field(repr=False)
    namespace: str
    group: str = DEFAULT_GROUP


@dataclass
class WatchSettings:
    """Protocol tunables (defaults match the config server)"""
    server_port: int = 8080
    fetch_timeout_s: float = 5.0       # plain config GET
    poll_timeout_s: float = 40.0       # server holds the long-poll for 30s
    resolve_timeout_s: float = 5.0     # address server lookup


@dataclass
class WatchConfig:
    """Everything the CLI needs to start a watcher"""
    address_server: str
    identity: GroupIdentity
    data_ids: list[str] = field(default_factory=list)
    settings: WatchSettings = field(default_factory=WatchSettings)


def validate_config(data: dict) -> list[str]:
    """
    Validate a raw configuration mapping.

    Args:
        data: Parsed YAML document (after environment overrides)

    Returns:
        List of error messages, empty when the config is usable
    """
    errors = []

    if not data.get("address_server"):
        errors.append("Missing required key: address_server")

    group = data.get("group")
    if not isinstance(group, dict):
        errors.append("Missing required section: group")
    else:
        for key in ("access_key", "secret_key", "namespace"):
            if not group.get(key):
                errors.append(f"Missing group.{key}")

    data_ids = data.get("data_ids")
    if not isinstance(data_ids, list) or not data_ids:
        errors.append("data_ids must be a non-empty list")
    elif not all(isinstance(d, str) and d for d in data_ids):
        errors.append("data_ids entries must be non-empty strings")

    settings = data.get("settings", {})
    if not isinstance(settings, dict):
        errors.append("settings must be a mapping")
    else:
        for key in ("fetch_timeout_s", "poll_timeout_s", "resolve_timeout_s"):
            value = settings.get(key)
            if value is not None and (not isinstance(value, (int, float)) or value <= 0):
                errors.append(f"settings.{key} must be a positive number")

        port = settings.get("server_port")
        if port is not None and (
            not isinstance(port, int) or isinstance(port, bool) or not 1 <= port <= 65535
        ):
            errors.append("settings.server_port must be an integer between 1 and 65535")

    return errors


def apply_env_overrides(data: dict, environ: dict[str, str] | None = None) -> dict:
    """Overlay NACOS_* environment variables onto the group section"""
    environ = os.environ if environ is None else environ
    group = dict(data.get("group") or {})
    for env_key, config_key in ENV_OVERRIDES.items():
        if environ.get(env_key):
            group[config_key] = environ[env_key]
    return {**data, "group": group}


def load_watch_config_dict(data: dict[str, Any]) -> WatchConfig:
    """Build a WatchConfig from an already validated mapping"""
    group = data["group"]
    settings_data = data.get("settings", {})
    defaults = WatchSettings()

    return WatchConfig(
        address_server=data["address_server"],
        identity=GroupIdentity(
            access_key=group["access_key"],
            secret_key=group["secret_key"],
            namespace=group["namespace"],
            group=group.get("group") or DEFAULT_GROUP,
        ),
        data_ids=list(data["data_ids"]),
        settings=WatchSettings(
            server_port=settings_data.get("server_port", defaults.server_port),
            fetch_timeout_s=settings_data.get("fetch_timeout_s", defaults.fetch_timeout_s),
            poll_timeout_s=settings_data.get("poll_timeout_s", defaults.poll_timeout_s),
            resolve_timeout_s=settings_data.get("resolve_timeout_s", defaults.resolve_timeout_s),
        ),
    )


def load_watch_config(config_path: str | Path, environ: dict[str, str] | None = None) -> WatchConfig:
    """
    Load watcher configuration from a YAML file.

    Args:
        config_path: Path to configuration file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        WatchConfig instance

    Raises:
        ConfigError: file missing, not valid YAML, or failing validation
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping")

    data = apply_env_overrides(data, environ)

    errors = validate_config(data)
    if errors:
        raise ConfigError("; ".join(errors))

    return load_watch_config_dict(data)
