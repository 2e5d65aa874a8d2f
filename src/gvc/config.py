"""Optional YAML configuration.

A config file may replace the repository list, set the default for
``stable_only`` and tune the HTTP client::

    repositories:
      - name: Internal
        url: https://nexus.example.com/repository/maven-public
        group_filters: ["com\\.example\\..*"]
    stable_only: true
    http:
      timeout: 10
      max_response_bytes: 2097152
      retries: 3
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml

from gvc.constants import Constants
from gvc.errors import ConfigError
from gvc.registry.models import Repository

logger = logging.getLogger(__name__)


@dataclass
class HttpSettings:
    timeout: Optional[float] = None
    max_response_bytes: Optional[int] = None
    retries: Optional[int] = None


@dataclass
class GvcConfig:
    repositories: List[Repository] = field(default_factory=list)
    stable_only: Optional[bool] = None
    http: HttpSettings = field(default_factory=HttpSettings)
    source: Optional[Path] = None


def _positive_number(value: Any, key: str, kind: type) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'http.{key}' must be a number")
    if kind is int and not isinstance(value, int):
        raise ConfigError(f"'http.{key}' must be an integer")
    if value <= 0:
        raise ConfigError(f"'http.{key}' must be positive")
    return kind(value)


def _parse_repositories(raw: Any) -> List[Repository]:
    if not isinstance(raw, list):
        raise ConfigError("'repositories' must be a list")
    repositories = []
    for idx, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ConfigError(f"repositories[{idx}] must be a mapping")
        url = entry.get("url")
        if not isinstance(url, str) or not url.strip():
            raise ConfigError(f"repositories[{idx}].url must be a non-empty string")
        name = entry.get("name", url)
        if not isinstance(name, str):
            raise ConfigError(f"repositories[{idx}].name must be a string")
        filters = entry.get("group_filters", [])
        if not isinstance(filters, list) or not all(isinstance(f, str) for f in filters):
            raise ConfigError(f"repositories[{idx}].group_filters must be a list of strings")
        repositories.append(Repository(name=name, url=url.strip(), group_filters=list(filters)))
    return repositories


def _parse_http(raw: Any) -> HttpSettings:
    if not isinstance(raw, dict):
        raise ConfigError("'http' must be a mapping")
    settings = HttpSettings()
    if raw.get("timeout") is not None:
        settings.timeout = _positive_number(raw["timeout"], "timeout", float)
    if raw.get("max_response_bytes") is not None:
        settings.max_response_bytes = _positive_number(raw["max_response_bytes"], "max_response_bytes", int)
    if raw.get("retries") is not None:
        settings.retries = _positive_number(raw["retries"], "retries", int)
    return settings


def parse_config(data: Any, source: Optional[Path] = None) -> GvcConfig:
    """Validate a loaded YAML document.

    Raises:
        ConfigError: on a key with the wrong type.
    """
    if data is None:
        return GvcConfig(source=source)
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    config = GvcConfig(source=source)
    if data.get("repositories") is not None:
        config.repositories = _parse_repositories(data["repositories"])
    if data.get("stable_only") is not None:
        if not isinstance(data["stable_only"], bool):
            raise ConfigError("'stable_only' must be true or false")
        config.stable_only = data["stable_only"]
    if data.get("http") is not None:
        config.http = _parse_http(data["http"])

    unknown = set(data) - {"repositories", "stable_only", "http"}
    if unknown:
        logger.warning("Ignoring unknown configuration keys: %s", ", ".join(sorted(unknown)))
    return config


def _read_yaml(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed config file {path}: {exc}") from exc


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    project_path: Optional[Union[str, Path]] = None,
) -> GvcConfig:
    """Load the explicit config file, else the project's default one, else nothing.

    Raises:
        ConfigError: if an explicitly named file is missing or malformed, or
            if any loaded file has keys of the wrong type.
    """
    if config_path:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        logger.debug("Loading config from %s", path)
        return parse_config(_read_yaml(path), source=path)

    if project_path:
        for name in Constants.CONFIG_FILES:
            path = Path(project_path) / name
            if path.is_file():
                logger.debug("Loading config from %s", path)
                return parse_config(_read_yaml(path), source=path)
    return GvcConfig()


def apply_http_settings(settings: HttpSettings) -> None:
    """Push HTTP overrides onto Constants for the rest of the run."""
    if settings.timeout is not None:
        setattr(Constants, "REQUEST_TIMEOUT", settings.timeout)
    if settings.max_response_bytes is not None:
        setattr(Constants, "MAX_RESPONSE_BYTES", settings.max_response_bytes)
    if settings.retries is not None:
        setattr(Constants, "HTTP_RETRY_MAX", settings.retries)
