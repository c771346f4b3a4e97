"""
Configuration loader for ctorlike.

Loads analyzer settings from a ctorlike.json file with fallback to environment
variables.
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_ANNOTATION = "io.github.spacedvoid.constructorlike.ConstructorLike"
DEFAULT_INVOKE_NAME = "invoke"
DEFAULT_UNIT_TYPE = "kotlin.Unit"
DEFAULT_NOTHING_TYPE = "kotlin.Nothing"

CONFIG_FILE = "ctorlike.json"
USER_CONFIG_DIR = ".ctorlike"


def _parse_bool(raw_value: Optional[str], default: bool) -> bool:
    if raw_value is None:
        return default
    return raw_value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class AnalyzerConfig:
    """Settings for one analysis run.

    Attributes:
        annotation: Qualified name of the annotation marking candidates.
        invoke_name: Reserved operator name for constructor-style invocation.
        unit_type: Qualified name of the no-value type.
        nothing_type: Qualified name of the no-return type.
        log_rejections: Whether each rejected candidate is logged as a warning.
    """

    annotation: str = DEFAULT_ANNOTATION
    invoke_name: str = DEFAULT_INVOKE_NAME
    unit_type: str = DEFAULT_UNIT_TYPE
    nothing_type: str = DEFAULT_NOTHING_TYPE
    log_rejections: bool = True

    @property
    def annotation_simple_name(self) -> str:
        return self.annotation.rsplit(".", 1)[-1]

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalyzerConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_env(cls) -> "AnalyzerConfig":
        return cls(
            annotation=os.getenv("CTORLIKE_ANNOTATION", DEFAULT_ANNOTATION),
            invoke_name=os.getenv("CTORLIKE_INVOKE_NAME", DEFAULT_INVOKE_NAME),
            unit_type=os.getenv("CTORLIKE_UNIT_TYPE", DEFAULT_UNIT_TYPE),
            nothing_type=os.getenv("CTORLIKE_NOTHING_TYPE", DEFAULT_NOTHING_TYPE),
            log_rejections=_parse_bool(os.getenv("CTORLIKE_LOG_REJECTIONS"), True),
        )


def _load_from_file(path: Path) -> AnalyzerConfig:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError(str(path), "expected a JSON object")
    logger.info("Loaded configuration from %s", path)
    return AnalyzerConfig.from_dict(data)


def load_config(config_path: Optional[Path] = None) -> AnalyzerConfig:
    """
    Load analyzer configuration.

    Args:
        config_path: Path to a JSON config file. If None, searches in:
            1. ./ctorlike.json (current directory)
            2. ~/.ctorlike/config.json
            3. Falls back to environment variables

    Raises:
        ConfigError: If a config file exists but cannot be parsed.
    """
    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            return _load_from_file(config_path)
        logger.info(
            "Config path %s does not exist, using environment variables", config_path
        )
        return AnalyzerConfig.from_env()

    local_config = Path(CONFIG_FILE)
    if local_config.exists():
        return _load_from_file(local_config)

    user_config = Path.home() / USER_CONFIG_DIR / "config.json"
    if user_config.exists():
        return _load_from_file(user_config)

    logger.info("No %s found, using environment variables", CONFIG_FILE)
    return AnalyzerConfig.from_env()
