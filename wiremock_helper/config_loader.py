"""Config Loader - Loads client configuration and stub mapping files.

Handles loading the YAML client config with environment variable
substitution, and loading JSON stub mapping files from disk.
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from wiremock_helper.models import ClientConfig, StubMapping


class ConfigError(Exception):
    """Raised when configuration or mapping file loading fails."""


_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def load_client_config(config_path: Path) -> ClientConfig:
    """Load client configuration from YAML with ${ENV_VAR} substitution."""
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}") from e

    # An empty file means "all defaults"
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ConfigError("Config file must be a YAML mapping")

    raw_config = _substitute_env_vars(raw_config)

    try:
        return ClientConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid config structure: {e}") from e


def load_mapping_file(mapping_path: Path) -> dict[str, Any]:
    """Load one stub mapping document from JSON.

    The document is checked for the request/response structure and returned
    as-is, so fields this package does not model are kept.
    """
    if not mapping_path.exists():
        raise ConfigError(f"Mapping file not found: {mapping_path}")

    try:
        with open(mapping_path, "r", encoding="utf-8") as f:
            raw_mapping = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in mapping file {mapping_path}: {e}") from e

    if not isinstance(raw_mapping, dict):
        raise ConfigError(f"Mapping file must contain a JSON object: {mapping_path}")

    try:
        StubMapping.model_validate(raw_mapping)
    except ValidationError as e:
        raise ConfigError(f"Invalid mapping structure in {mapping_path}: {e}") from e

    return raw_mapping


def _substitute_env_vars(data: Any) -> Any:
    """Recursively substitute ${ENV_VAR} patterns in strings within data."""
    if isinstance(data, str):
        return _substitute_string(data)
    elif isinstance(data, dict):
        return {k: _substitute_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_substitute_env_vars(item) for item in data]
    return data


def _substitute_string(s: str) -> str:
    """Substitute ${ENV_VAR} patterns. Raises ConfigError if env var is not set."""

    def replacer(match: re.Match) -> str:
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(f"Environment variable '{var_name}' is not set")
        return value

    return _ENV_VAR_PATTERN.sub(replacer, s)
