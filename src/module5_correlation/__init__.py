"""
Module 5: Correlation Matching

Recovers component identities from perceptual patterns by Pearson
correlation against a registry of recomputed reference tiles.

Public API:
    - score(tile_a, tile_b) -> float in [-1, 1]
    - build_registry(components, tile_size, intensity) -> Registry
    - build_hash_registry(components, tile_size, intensity) -> Registry
    - CorrelationMatcher.match(tile, registry, threshold) -> List[TileMatch]
    - MatchAccumulator.ranked() -> List[ComponentMatch]
"""

from .pearson import score
from .registry import (
    Component,
    RegistryEntry,
    Registry,
    as_component,
    build_registry,
    build_hash_registry,
    load_components,
)
from .matcher import CorrelationMatcher, MatchAccumulator, TileMatch, ComponentMatch
from .errors import CorrelationError, RegistryError

__version__ = "1.0.0"

__all__ = [
    "score",
    "Component",
    "RegistryEntry",
    "Registry",
    "as_component",
    "build_registry",
    "build_hash_registry",
    "load_components",
    "CorrelationMatcher",
    "MatchAccumulator",
    "TileMatch",
    "ComponentMatch",
    "CorrelationError",
    "RegistryError",
]
