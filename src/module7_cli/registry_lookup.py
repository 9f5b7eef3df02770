"""
View-id registry: maps a decoded view id back to its source.

The registry is a JSON object keyed by view id, e.g.

    {
      "BILLING_02": {
        "route": "/settings/billing",
        "entry": "src/pages/billing/Settings.tsx",
        "owners": ["@payments"],
        "tests": ["billing.spec.ts"],
        "storybook": "billing--settings"
      }
    }
"""

import json
import logging
import os
from typing import Dict, Optional

from src.module5_correlation import RegistryError


logger = logging.getLogger(__name__)


ViewRegistry = Dict[str, dict]


def load_registry(path: str) -> Optional[ViewRegistry]:
    """
    Load a view-id registry file.

    Args:
        path: Path to the registry JSON

    Returns:
        The registry mapping, or None if the file does not exist

    Raises:
        RegistryError: If the file is not valid JSON or not an object
    """
    if not os.path.exists(path):
        logger.warning(f"Registry not found: {path}")
        return None

    try:
        with open(path, 'r', encoding='utf-8') as f:
            registry = json.load(f)
    except json.JSONDecodeError as e:
        raise RegistryError(f"Invalid registry JSON in {path}: {e}") from e

    if not isinstance(registry, dict):
        raise RegistryError(f"Registry {path} must be a JSON object keyed by view id")

    logger.info(f"Loaded {len(registry)} registry entries from {path}")
    return registry


def lookup(registry: Optional[ViewRegistry], view_id: str) -> Optional[dict]:
    """Registry entry for ``view_id`` (None when unknown or no registry)."""
    if not registry:
        return None
    return registry.get(view_id)
