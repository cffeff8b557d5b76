import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from auto_props.core.renderer import DOC_MODES

# Default configuration values
DEFAULT_CONFIG_PATH = "autoprops.config.yaml"
DEFAULT_HIDE_WARNINGS = False
DEFAULT_INCLUDE_DOCS = None
DEFAULT_FACTORY_NAMES = ["defineComponent"]
DEFAULT_FUNCTIONAL_TYPE_NAMES = ["FunctionalComponent"]
DEFAULT_INCLUDE_EXTENSIONS = [".ts", ".tsx"]
DEFAULT_IGNORED_PATTERNS = ["node_modules", ".git", "dist"]


class AutoPropsConfig(BaseModel):
    """
    Central configuration model for auto_props.
    """
    hide_warnings: bool = DEFAULT_HIDE_WARNINGS
    include_docs: Optional[str] = DEFAULT_INCLUDE_DOCS
    factory_names: List[str] = Field(default_factory=lambda: list(DEFAULT_FACTORY_NAMES))
    functional_type_names: List[str] = Field(default_factory=lambda: list(DEFAULT_FUNCTIONAL_TYPE_NAMES))
    include_extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_INCLUDE_EXTENSIONS))
    ignored_patterns: List[str] = Field(default_factory=lambda: list(DEFAULT_IGNORED_PATTERNS))

    # Allow extra fields for flexibility
    class Config:
        extra = "allow"

    @field_validator("include_docs", mode="before")
    @classmethod
    def _normalize_include_docs(cls, value: Any) -> Optional[str]:
        # `include_docs: false` in YAML means "omit"
        if value is None or value is False:
            return None
        if value not in DOC_MODES:
            raise ValueError(f"include_docs must be false, {' or '.join(DOC_MODES)}")
        return value


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logging.warning(f"Ignoring config file {path}: {e}")
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logging.warning(f"Ignoring config file {path}: expected a mapping, got {type(data).__name__}")
        return {}
    logging.info(f"Loaded configuration from {path}")
    return data


def load_config(
    config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None
) -> AutoPropsConfig:
    """
    Build the configuration: defaults, then the YAML file, then CLI overrides.

    Args:
        config_path: Explicit YAML file. Without it, ``autoprops.config.yaml``
            in the working directory is used when present.
        cli_args: Overrides; entries whose value is None are ignored.
    """
    explicit = config_path is not None
    path = Path(config_path if explicit else DEFAULT_CONFIG_PATH)

    values: Dict[str, Any] = {}
    if path.is_file():
        values.update(_read_config_file(path))
    elif explicit:
        logging.warning(f"Config file not found: {config_path}")
    else:
        logging.debug(f"No {DEFAULT_CONFIG_PATH} in {Path.cwd()}, using defaults")

    values.update({key: value for key, value in (cli_args or {}).items() if value is not None})
    return AutoPropsConfig(**values)
