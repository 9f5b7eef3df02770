"""
Scanner configuration loading.

Configuration is a nested dict. Defaults come from default_config.yaml
next to this file (or a hard-coded copy if that file is unavailable);
a user file only needs the keys it changes.
"""

import copy
import logging
import os
from typing import Optional

import yaml

from .exceptions import ScannerConfigurationError


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "default_config.yaml")

ROW_ORDERS = ("strip", "full", "redundant")


def _get_default_config() -> dict:
    """
    Get hardcoded default configuration.

    Returns:
        Default configuration dictionary
    """
    return {
        "exact": {
            "strip_search_rows": 8,
            "max_payload_bits": None,
            "max_rows": None,
            "hierarchy_row_order": "full",
        },
        "perceptual": {
            "tile_size": 64,
            "intensity": 0.15,
            "baseline": 245,
            "threshold": 0.7,
            "step_fraction": 0.5,
            "max_tiles": None,
        },
        "noise": {
            "tile_size": 16,
            "intensity": 0.04,
            "step_tiles": 2,
        },
        "system": {
            "verbose": False,
        },
    }


def _deep_merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_defaults() -> dict:
    if not os.path.exists(DEFAULT_CONFIG_PATH):
        return _get_default_config()
    try:
        with open(DEFAULT_CONFIG_PATH, 'r') as f:
            loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        logger.warning("Default config unreadable, using built-in defaults")
        return _get_default_config()
    return _deep_merge(_get_default_config(), loaded or {})


def load_config(config_path: Optional[str] = None, overrides: Optional[dict] = None) -> dict:
    """
    Load scanner configuration.

    Args:
        config_path: Optional user YAML file merged over the defaults
        overrides: Optional dict merged last (e.g. from CLI flags)

    Returns:
        Validated configuration dictionary

    Raises:
        ScannerConfigurationError: If the user file is missing/unparsable
                                   or a value is out of range
    """
    config = _load_defaults()

    if config_path is not None:
        if not os.path.exists(config_path):
            raise ScannerConfigurationError(f"Config file not found: {config_path}")
        try:
            with open(config_path, 'r') as f:
                user = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ScannerConfigurationError(f"Unable to parse config {config_path}: {e}") from e
        if not isinstance(user, dict):
            raise ScannerConfigurationError(f"Config {config_path} must be a mapping")
        config = _deep_merge(config, user)

    if overrides:
        config = _deep_merge(config, overrides)

    validate_config(config)
    return config


def validate_config(config: dict) -> None:
    """
    Check ranges of every scanner parameter.

    Raises:
        ScannerConfigurationError: On the first invalid value
    """
    exact = config.get('exact', {})
    perceptual = config.get('perceptual', {})
    noise = config.get('noise', {})

    _positive_int(exact.get('strip_search_rows'), 'exact.strip_search_rows')
    _optional_positive_int(exact.get('max_payload_bits'), 'exact.max_payload_bits')
    _optional_positive_int(exact.get('max_rows'), 'exact.max_rows')

    order = exact.get('hierarchy_row_order')
    if order not in ROW_ORDERS:
        raise ScannerConfigurationError(
            f"Unknown row order '{order}'. Options: {', '.join(ROW_ORDERS)}"
        )

    _positive_int(perceptual.get('tile_size'), 'perceptual.tile_size')
    _optional_positive_int(perceptual.get('max_tiles'), 'perceptual.max_tiles')

    threshold = perceptual.get('threshold')
    if not isinstance(threshold, (int, float)) or threshold < -1 or threshold > 1:
        raise ScannerConfigurationError(
            f"perceptual.threshold must be in [-1, 1], got {threshold!r}"
        )

    fraction = perceptual.get('step_fraction')
    if not isinstance(fraction, (int, float)) or fraction <= 0 or fraction > 1:
        raise ScannerConfigurationError(
            f"perceptual.step_fraction must be in (0, 1], got {fraction!r}"
        )

    intensity = perceptual.get('intensity')
    if not isinstance(intensity, (int, float)) or intensity <= 0:
        raise ScannerConfigurationError(
            f"perceptual.intensity must be positive, got {intensity!r}"
        )

    _positive_int(noise.get('tile_size'), 'noise.tile_size')
    _positive_int(noise.get('step_tiles'), 'noise.step_tiles')


def _positive_int(value, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ScannerConfigurationError(f"{name} must be a positive integer, got {value!r}")


def _optional_positive_int(value, name: str) -> None:
    if value is not None:
        _positive_int(value, name)
