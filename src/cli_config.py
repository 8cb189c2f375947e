"""Configuration file loading.

A config file mirrors the command line options using snake_case keys, for
example::

    unity_version: ["2022.3.x", "6000"]
    modules: [android, ios]
    install_path: /opt/unity
    max_retries: 3

Values given on the command line take precedence.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import yaml

from common.errors import ParseError

logger = logging.getLogger(__name__)

KNOWN_KEYS = (
    "unity_version",
    "modules",
    "build_targets",
    "architecture",
    "install_path",
    "version_file",
    "hub_path",
    "max_retries",
    "hub_timeout",
    "legacy_installer",
)


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML or JSON configuration file.

    Args:
        config_path: Path to YAML/JSON config file.

    Returns:
        Configuration dict; empty when no path is given or the file is missing.

    Raises:
        ParseError: If the file exists but cannot be parsed into a mapping.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.lower().endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ParseError(f"Failed to load config {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError(f"Config {config_path} must contain a mapping")

    # Accept kebab-case keys as used by workflow inputs
    config = {str(key).replace("-", "_"): value for key, value in data.items()}
    unknown = sorted(set(config) - set(KNOWN_KEYS))
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
    return {key: value for key, value in config.items() if key in KNOWN_KEYS}
