"""
Pattern registry: the expected components of a decode run.

A registry is built once from a list of components and then only read.
Entries are frozen and their reference arrays are marked read-only so a
scan can never alter them.
"""

import logging
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

import numpy as np
import yaml

from src.module4_pattern_synthesis import PatternSynthesizer, seed_key, PAGE_GRAIN

from .errors import RegistryError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Component:
    """An expected component: hierarchical path, type and depth."""
    path: str
    type: str = "component"
    depth: int = 1

    @property
    def key(self) -> str:
        return seed_key(self.path, self.type, self.depth)


@dataclass(frozen=True, eq=False)
class RegistryEntry:
    """A component plus its reference pattern or reference hash."""
    path: str
    type: str
    depth: int
    pattern: Optional[np.ndarray] = None
    reference_hash: Optional[str] = None


Registry = Tuple[RegistryEntry, ...]
ComponentLike = Union[Component, dict]


def as_component(item: ComponentLike) -> Component:
    """
    Coerce a mapping (``{"path", "type", "depth"}``) or Component.

    Raises:
        RegistryError: If ``path`` is missing or fields have the wrong type
    """
    if isinstance(item, Component):
        return item
    if not isinstance(item, dict):
        raise RegistryError(f"Component must be a mapping, got {type(item).__name__}")
    if not item.get('path'):
        raise RegistryError(f"Component is missing 'path': {item!r}")

    depth = item.get('depth', 1)
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise RegistryError(f"Component depth must be an integer: {item!r}")

    return Component(path=str(item['path']), type=str(item.get('type', 'component')), depth=depth)


def build_registry(
    components: Iterable[ComponentLike],
    tile_size: int = 64,
    intensity: float = 0.15,
    baseline: int = PAGE_GRAIN
) -> Registry:
    """
    Build a perceptual registry.

    Args:
        components: Expected components
        tile_size: Reference tile edge
        intensity: Must match the intensity the patterns were rendered with
        baseline: Gray baseline of the rendered patterns

    Returns:
        registry: tuple of RegistryEntry with reference patterns
    """
    synth = PatternSynthesizer()
    entries = []

    for component in (as_component(c) for c in components):
        pattern = synth.tile(component.key, tile_size, intensity, baseline)
        pattern.setflags(write=False)
        entries.append(RegistryEntry(
            path=component.path,
            type=component.type,
            depth=component.depth,
            pattern=pattern,
        ))

    logger.debug("Built perceptual registry with %d patterns", len(entries))
    return tuple(entries)


def build_hash_registry(
    components: Iterable[ComponentLike],
    tile_size: int = 16,
    intensity: float = 0.04
) -> Registry:
    """Build a hashed-noise registry (exact tile hash per component)."""
    synth = PatternSynthesizer()
    entries = tuple(
        RegistryEntry(
            path=component.path,
            type=component.type,
            depth=component.depth,
            reference_hash=synth.noise_hash(component.key, tile_size, intensity),
        )
        for component in (as_component(c) for c in components)
    )
    logger.debug("Built hash registry with %d entries", len(entries))
    return entries


def load_components(path: str) -> List[Component]:
    """
    Load a component list from a YAML or JSON file.

    The file holds either a list of components or a mapping with a
    ``components`` list.

    Raises:
        RegistryError: If the file is missing, unparsable or malformed
    """
    if not os.path.exists(path):
        raise RegistryError(f"Component file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RegistryError(f"Unable to parse component file {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get('components')

    if not isinstance(data, list) or len(data) == 0:
        raise RegistryError(f"Component file {path} must contain a non-empty list of components")

    return [as_component(item) for item in data]

