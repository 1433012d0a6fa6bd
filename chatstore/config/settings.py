# chatstore/config/settings.py
"""
Typed, hierarchical configuration for the migration layer.

* Loads defaults from `chatstore.config.defaults.DEFAULT_CONFIG`
* Overrides with values read from the project-root `config.yaml`
* Overrides with `CHATSTORE_*` environment variables (`.env` is loaded first)
* Allows optional in-memory overrides (useful for tests and CLI flags)
* Exposes values through a frozen Pydantic model called `AppConfig`
* Provides a global singleton `settings`
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from chatstore.config.base_paths import PROJECT_ROOT
from chatstore.config.defaults import DEFAULT_CONFIG
from chatstore.utils.exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv(PROJECT_ROOT / ".env")

# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #

_CONFIG_FILE = PROJECT_ROOT / "config.yaml"
_ENV_PREFIX = "CHATSTORE_"


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML file; return an empty dict if the file is missing/empty."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")
    return data


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge *override* into *base* (override wins)."""
    result: Dict[str, Any] = {**base}
    for k, v in override.items():
        if (
            k in result
            and isinstance(result[k], dict)
            and isinstance(v, dict)
        ):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _lower_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Field names are lowercase; config sources may use either case."""
    return {str(k).lower(): v for k, v in data.items()}


def _env_to_dict() -> Dict[str, Any]:
    """Collect ``CHATSTORE_*`` environment variables with the prefix stripped."""
    return {
        k[len(_ENV_PREFIX):]: v
        for k, v in os.environ.items()
        if k.startswith(_ENV_PREFIX) and len(k) > len(_ENV_PREFIX)
    }


# --------------------------------------------------------------------------- #
# Pydantic model                                                              #
# --------------------------------------------------------------------------- #


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    # ---- conversation defaults ------------------------------------------ #
    default_system_purpose_id: str = Field(
        default=DEFAULT_CONFIG["DEFAULT_SYSTEM_PURPOSE_ID"],
        description="Purpose id for conversations recreated without one",
    )
    # ---- export formatting ---------------------------------------------- #
    export_indent: Optional[int] = Field(default=DEFAULT_CONFIG["EXPORT_INDENT"])
    # ---- messages ------------------------------------------------------- #
    default_language: str = Field(default=DEFAULT_CONFIG["DEFAULT_LANGUAGE"])
    supported_languages: List[str] = Field(
        default_factory=lambda: list(DEFAULT_CONFIG["SUPPORTED_LANGUAGES"])
    )
    # ---- logging -------------------------------------------------------- #
    log_level: str = Field(default=DEFAULT_CONFIG["LOG_LEVEL"])
    log_to_file: bool = Field(default=DEFAULT_CONFIG["LOG_TO_FILE"])
    log_dir: str = Field(default=DEFAULT_CONFIG["LOG_DIR"])

    # ---- dict-like helpers ---------------------------------------------- #
    # settings["export_indent"] and settings.get("export_indent", 2) both work
    def __getitem__(self, item: str) -> Any:  # noqa: Dunder
        return getattr(self, item.lower())

    def get(self, item: str, default: Optional[Any] = None) -> Any:  # noqa: A003
        return getattr(self, item.lower(), default)

    def __contains__(self, item: object) -> bool:  # noqa: Dunder
        return str(item).lower() in type(self).model_fields


# --------------------------------------------------------------------------- #
# Public loader                                                               #
# --------------------------------------------------------------------------- #


def load_settings(
    overrides: Optional[Dict[str, Any]] = None,
    config_file: Optional[Path] = None,
) -> AppConfig:
    """
    Build an ``AppConfig`` by merging:

    1.  ``DEFAULT_CONFIG``                         (hard-coded defaults)
    2.  Values from ``config.yaml``                (project-wide overrides)
    3.  ``CHATSTORE_*`` environment variables      (.env, shell)
    4.  *overrides* dict passed in programmatically (tests / cli flags)

    Later items win on conflict.
    """
    yaml_cfg = _load_yaml(config_file or _CONFIG_FILE)
    merged = _deep_merge(_lower_keys(DEFAULT_CONFIG), _lower_keys(yaml_cfg))
    merged = _deep_merge(merged, _lower_keys(_env_to_dict()))
    if overrides:
        merged = _deep_merge(merged, _lower_keys(overrides))
    try:
        return AppConfig(**merged)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


# --------------------------------------------------------------------------- #
# Global singleton, initialized immediately                                   #
# --------------------------------------------------------------------------- #

settings: AppConfig = load_settings()
