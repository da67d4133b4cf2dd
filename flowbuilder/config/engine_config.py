"""Engine configuration for the flow transformation engine.

Provides the document version and the defaults the formatter and assembler
fall back on. Environment variables take precedence over YAML config.

Usage:
    from flowbuilder.config.engine_config import get_engine_config

    config = get_engine_config()
    config.document_version  # "7.3"

Environment overrides:
    FLOWBUILDER_DOCUMENT_VERSION   - external document version
    FLOWBUILDER_DEFAULT_FORM_NAME  - name of the synthesized Form node
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

_CONFIG_PATH = Path(__file__).parent / "engine.yaml"
_cached_config: Optional["EngineConfig"] = None

ENV_DOCUMENT_VERSION = "FLOWBUILDER_DOCUMENT_VERSION"
ENV_DEFAULT_FORM_NAME = "FLOWBUILDER_DEFAULT_FORM_NAME"


@dataclass(frozen=True)
class EngineConfig:
    """Resolved engine settings.

    Resolution order: environment > engine.yaml > built-in defaults.
    """
    document_version: str = "7.3"
    default_form_name: str = "flow_form"
    default_input_type: str = "text"
    pattern_input_types: Tuple[str, ...] = ("text", "password", "passcode", "number")
    default_navigation_action: str = "navigate"
    default_footer_action: str = "complete"


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load the YAML config file, returning {} when missing or invalid."""
    if not path.exists():
        logger.warning("Engine config not found at %s, using defaults", path)
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Failed to load engine config %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Engine config %s is not a mapping, using defaults", path)
        return {}
    return data


def engine_config_from_dict(data: Dict[str, Any]) -> EngineConfig:
    """Build an EngineConfig from parsed YAML, applying env overrides."""
    defaults = EngineConfig()

    document = data.get("document") or {}
    form = data.get("form") or {}
    inputs = data.get("inputs") or {}
    actions = data.get("actions") or {}

    version = os.environ.get(ENV_DOCUMENT_VERSION) or document.get("version", defaults.document_version)
    form_name = os.environ.get(ENV_DEFAULT_FORM_NAME) or form.get("default_name", defaults.default_form_name)

    return EngineConfig(
        document_version=str(version),
        default_form_name=str(form_name),
        default_input_type=inputs.get("default_input_type", defaults.default_input_type),
        pattern_input_types=tuple(inputs.get("pattern_input_types", defaults.pattern_input_types)),
        default_navigation_action=actions.get(
            "default_navigation_action", defaults.default_navigation_action
        ),
        default_footer_action=actions.get("default_footer_action", defaults.default_footer_action),
    )


def load_engine_config(path: Optional[Path] = None) -> EngineConfig:
    """Load engine config from a YAML file (defaults to engine.yaml)."""
    return engine_config_from_dict(_load_yaml(path or _CONFIG_PATH))


def get_engine_config() -> EngineConfig:
    """Get the cached engine config, loading it on first use."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_engine_config()
    return _cached_config


def reload_engine_config() -> EngineConfig:
    """Force reload of the engine config (picks up env changes)."""
    global _cached_config
    _cached_config = None
    return get_engine_config()
