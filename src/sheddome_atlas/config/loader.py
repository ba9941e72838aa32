"""Load AtlasConfig from YAML, with per-run overrides from CLI flags."""

from pathlib import Path
from typing import Any, Mapping

import pydantic_yaml

from .schema import AtlasConfig


def load_config(config_path: Path | str) -> AtlasConfig:
    """
    Load and validate configuration from a YAML file.

    Sections missing from the file (or an empty file) take model defaults.

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If config is invalid
    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    yaml_content = config_path.read_text(encoding="utf-8")
    if not yaml_content.strip():
        return AtlasConfig()
    return pydantic_yaml.parse_yaml_raw_as(AtlasConfig, yaml_content)


def _set_option(config_dict: dict[str, Any], key: str, value: Any) -> None:
    section, _, option = key.partition(".")
    if not option:
        raise ValueError(f"Override key must be 'section.option', got '{key}'")
    if section not in config_dict or not isinstance(config_dict[section], dict):
        raise ValueError(f"Unknown config section in override '{key}'")
    config_dict[section][option] = value


def load_config_with_overrides(
    config_path: Path | str | None,
    overrides: Mapping[str, Any],
) -> AtlasConfig:
    """
    Load config (or defaults when config_path is None) and apply overrides.

    Args:
        config_path: YAML file given with --config, or None
        overrides: "section.option" keys set by CLI flags, e.g.
            {"ai_service.generate_on_miss": True}

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If an override key does not name a config section
        pydantic.ValidationError: If the final config is invalid
    """
    base = AtlasConfig() if config_path is None else load_config(config_path)
    if not overrides:
        return base

    config_dict = base.model_dump()
    for key, value in overrides.items():
        _set_option(config_dict, key, value)
    return AtlasConfig.model_validate(config_dict)
