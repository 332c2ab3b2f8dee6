"""
Configuration loader for agdex.

Loads project configuration from the first source found:
1. .agdexrc.json
2. .agdexrc.yaml / .agdexrc.yml
3. "agdex" field in package.json
4. [tool.agdex] in pyproject.toml

then applies environment variables (AGDEX_*).
"""

import json
import logging
import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from agdex.config.merger import deep_merge, set_nested_value
from agdex.config.schema import AgdexConfig
from agdex.exceptions import AgdexError

logger = logging.getLogger(__name__)

ENV_PREFIX = "AGDEX_"
FALLBACK_OUTPUT = "AGENTS.md"

# Environment variables that are not config keys.
_RESERVED_ENV = {"AGDEX_HOME"}


class ConfigurationError(AgdexError):
    """Raised when configuration validation fails."""

    pass


class _SkipSource(Exception):
    pass


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed configuration dictionary.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
            return content if content else {}
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e


def _read_rc_json(path: Path) -> dict[str, Any]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise _SkipSource(str(e)) from e


def _read_rc_yaml(path: Path) -> dict[str, Any]:
    try:
        return load_yaml_file(path)
    except ConfigurationError as e:
        raise _SkipSource(str(e)) from e


def _read_package_json(path: Path) -> dict[str, Any]:
    package = _read_rc_json(path)
    section = package.get("agdex") if isinstance(package, dict) else None
    if not isinstance(section, dict):
        raise _SkipSource("no agdex field")
    return section


def _read_pyproject(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            pyproject = tomllib.load(f)
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise _SkipSource(str(e)) from e
    section = pyproject.get("tool", {}).get("agdex")
    if not isinstance(section, dict):
        raise _SkipSource("no [tool.agdex] table")
    return section


CONFIG_SOURCES: list[tuple[str, Callable[[Path], dict[str, Any]]]] = [
    (".agdexrc.json", _read_rc_json),
    (".agdexrc.yaml", _read_rc_yaml),
    (".agdexrc.yml", _read_rc_yaml),
    ("package.json", _read_package_json),
    ("pyproject.toml", _read_pyproject),
]


def find_project_config(cwd: Path) -> tuple[Path, dict[str, Any]] | None:
    """
    Find the first usable configuration source in a project.

    Args:
        cwd: Project root.

    Returns:
        The source path and its configuration, or None.
    """
    for filename, reader in CONFIG_SOURCES:
        path = cwd / filename
        if not path.exists():
            continue
        try:
            data = reader(path)
        except _SkipSource as e:
            if filename.startswith(".agdexrc"):
                logger.warning("Ignoring %s: %s", path, e)
            else:
                logger.debug("No agdex config in %s: %s", path, e)
            continue
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a mapping", path)
            continue
        return path, data
    return None


def apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Environment variables follow the pattern:
    AGDEX_<KEY>=<value>
    AGDEX_<SECTION>__<KEY>=<value>

    Args:
        config: Configuration dictionary to modify.

    Returns:
        Configuration with environment overrides applied.
    """
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX) or key in _RESERVED_ENV:
            continue

        # AGDEX_SKILLS__INCLUDE_USER -> skills.include_user
        key_path = key[len(ENV_PREFIX) :].lower().split("__")
        config = set_nested_value(config, key_path, _parse_env_value(value))

    return config


def _parse_env_value(value: str) -> Any:
    """
    Parse an environment variable value to the appropriate type.

    Args:
        value: String value from environment.

    Returns:
        Parsed value (bool, int, list, or string).
    """
    if value.lower() in ("true", "yes", "1", "on"):
        return True
    if value.lower() in ("false", "no", "0", "off"):
        return False

    if re.match(r"^-?\d+$", value):
        return int(value)

    # List (comma-separated)
    if "," in value:
        return [item.strip() for item in value.split(",")]

    return value


def load_config(cwd: Path | None = None, skip_env: bool = False) -> AgdexConfig:
    """
    Load the project configuration.

    Args:
        cwd: Project root. Defaults to the current directory.
        skip_env: Skip environment variable overrides.

    Returns:
        Validated AgdexConfig.

    Raises:
        ConfigurationError: If configuration values are invalid.
    """
    cwd = cwd or Path.cwd()
    config_dict = AgdexConfig().model_dump()

    found = find_project_config(cwd)
    if found:
        path, data = found
        logger.debug("Loaded configuration from %s", path)
        config_dict = deep_merge(config_dict, data)

    if not skip_env:
        config_dict = apply_env_overrides(config_dict)

    try:
        return AgdexConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e


def get_default_output(cwd: Path | None = None) -> str:
    """Host file name to use when none is given on the command line."""
    return load_config(cwd).output or FALLBACK_OUTPUT
