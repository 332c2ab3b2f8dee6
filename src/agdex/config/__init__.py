"""Configuration for agdex."""

from agdex.config.loader import (
    ConfigurationError,
    apply_env_overrides,
    find_project_config,
    get_default_output,
    load_config,
    load_yaml_file,
)
from agdex.config.merger import deep_merge, set_nested_value
from agdex.config.schema import AgdexConfig, SkillsConfig

__all__ = [
    "AgdexConfig",
    "ConfigurationError",
    "SkillsConfig",
    "apply_env_overrides",
    "deep_merge",
    "find_project_config",
    "get_default_output",
    "load_config",
    "load_yaml_file",
    "set_nested_value",
]
