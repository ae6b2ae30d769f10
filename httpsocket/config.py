from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from httpsocket.log import get_logger

logger = get_logger(__name__)

# Handshake connect and read timeout, in seconds
CONNECT_TIMEOUT = 15.0

# Pool threads are started on demand, so a high cap behaves as unbounded
UNBOUNDED_MAX_WORKERS = 1024


@dataclass(frozen=True)
class ClientSettings:
    connect_timeout: float = CONNECT_TIMEOUT
    read_timeout: float = CONNECT_TIMEOUT
    max_workers: int = UNBOUNDED_MAX_WORKERS
    thread_name_prefix: str = "httpsocket-connect"
    user_agent: str = "httpsocket-client"

    def __post_init__(self) -> None:
        if self.connect_timeout <= 0:
            raise ValueError(f"connect_timeout must be positive: {self.connect_timeout}")
        if self.read_timeout <= 0:
            raise ValueError(f"read_timeout must be positive: {self.read_timeout}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1: {self.max_workers}")


# Environment overrides: variable -> (field, converter)
_ENV_OVERRIDES = {
    "HTTPSOCKET_CONNECT_TIMEOUT": ("connect_timeout", float),
    "HTTPSOCKET_READ_TIMEOUT": ("read_timeout", float),
    "HTTPSOCKET_MAX_WORKERS": ("max_workers", int),
}


def _config_path(path: Optional[Union[str, Path]]) -> Optional[Path]:
    """Return the explicit path, else HTTPSOCKET_CONFIG, else None."""
    if path is not None:
        return Path(path)
    env_path = os.getenv("HTTPSOCKET_CONFIG")
    return Path(env_path) if env_path else None


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load the `client:` mapping from a YAML file. Missing file -> {}."""
    if not path.exists():
        logger.info("No config file at %s; using defaults", path)
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    section = data.get("client", {}) or {}
    if not isinstance(section, dict):
        raise ValueError(f"{path}: 'client' must be a mapping")
    known = {f.name for f in fields(ClientSettings)}
    unknown = set(section) - known
    if unknown:
        raise ValueError(f"{path}: unknown client settings: {sorted(unknown)}")
    return section


def load_settings(path: Optional[Union[str, Path]] = None) -> ClientSettings:
    """
    Resolve client settings.

    Order: defaults, then the YAML file (explicit path or HTTPSOCKET_CONFIG),
    then HTTPSOCKET_* environment overrides.

    Raises:
        ValueError: on unknown keys or invalid values
        yaml.YAMLError: if the file is not valid YAML
    """
    settings = ClientSettings()

    config_path = _config_path(path)
    if config_path is not None:
        section = _load_yaml(config_path)
        if section:
            settings = replace(settings, **section)
            logger.debug("Loaded settings from %s", config_path)

    overrides = {}
    for var, (field_name, convert) in _ENV_OVERRIDES.items():
        raw = os.getenv(var)
        if raw is None or raw == "":
            continue
        try:
            overrides[field_name] = convert(raw)
        except ValueError as e:
            raise ValueError(f"{var}={raw!r} is not a valid {convert.__name__}") from e
    if overrides:
        settings = replace(settings, **overrides)

    return settings
