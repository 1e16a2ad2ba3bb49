"""Constants used in the project."""

import logging
import os
from enum import Enum
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    RESOLUTION_ERROR = 1
    CONFIG_ERROR = 2


class ContextKind(Enum):
    """Kind of package a specifier is resolved on behalf of.

    Args:
        Enum (string): Context kinds.
    """

    ROOT = "root"
    DEPENDENCY = "dependency"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    SPM_MODULES_DIR = "spm_modules"
    PACKAGE_JSON_FILE = "package.json"
    MANIFEST_BLOCK = "spm"
    DEFAULT_ENTRY = "index.js"
    ANY_RANGE = "*"
    SHIM_MARKERS = ["node-libs-browser"]
    SHIM_MODULES_DIR = "node_modules"
    RESOLVE_EXTENSIONS = [".js"]
    MANIFEST_CACHE_ENABLED = True
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "SPMRESOLVE_LOG_LEVEL"
    ENV_CONFIG = "SPMRESOLVE_CONFIG"
    DEFAULT_CONFIG_FILE = "spmresolve.yml"


# YAML key -> (Constants attribute, expected type)
_CONFIG_KEYS: Dict[str, tuple] = {
    "modules_dir": ("SPM_MODULES_DIR", str),
    "default_entry": ("DEFAULT_ENTRY", str),
    "shim_markers": ("SHIM_MARKERS", list),
    "extensions": ("RESOLVE_EXTENSIONS", list),
    "manifest_cache": ("MANIFEST_CACHE_ENABLED", bool),
}


def _find_config_path(path: Optional[str] = None) -> Optional[str]:
    """Return the first existing config path: explicit, env, then cwd default."""
    candidates = [path, os.environ.get(Constants.ENV_CONFIG), Constants.DEFAULT_CONFIG_FILE]
    for candidate in candidates:
        if candidate and os.path.isfile(candidate):
            return candidate
    return None


def _apply_resolver_section(section: Dict[str, Any]) -> None:
    for key, value in section.items():
        target = _CONFIG_KEYS.get(key)
        if target is None:
            logger.warning("Ignoring unknown resolver config key: %s", key)
            continue
        attr, expected = target
        if not isinstance(value, expected):
            logger.warning(
                "Ignoring resolver config key %s: expected %s, got %s",
                key,
                expected.__name__,
                type(value).__name__,
            )
            continue
        if expected is list:
            value = [str(v) for v in value]
        setattr(Constants, attr, value)


def _load_yaml_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load YAML configuration and apply the ``resolver`` section onto Constants.

    Lookup order: explicit ``path``, ``$SPMRESOLVE_CONFIG``, ``./spmresolve.yml``.
    A missing file is not an error. A malformed file is logged and ignored.

    Returns:
        The parsed configuration mapping (empty when nothing was loaded).
    """
    if path and not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
    config_path = _find_config_path(path)
    if config_path is None:
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load config %s: %s", config_path, e)
        return {}

    if not isinstance(data, dict):
        logger.error("Config %s must be a mapping, got %s", config_path, type(data).__name__)
        return {}

    section = data.get("resolver") or {}
    if not isinstance(section, dict):
        logger.error("Config %s: 'resolver' must be a mapping", config_path)
        return data
    _apply_resolver_section(section)
    logger.debug("Loaded resolver config from %s", config_path)
    return data
