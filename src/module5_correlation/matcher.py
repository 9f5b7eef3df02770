"""
CorrelationMatcher: scores extracted tiles against a registry.

A single tile may exceed the threshold for several entries; that is a
valid (ambiguous) outcome and every qualifying entry is kept. Across the
tiles of an image, hits are aggregated per path into (count, max score)
and ranked by count first: many tiles matching is a stronger signal than
one very strong match.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import numpy as np

from .pearson import score as pearson_score
from .registry import Registry, RegistryEntry


@dataclass(frozen=True)
class TileMatch:
    """One registry entry exceeding the threshold for one tile."""
    path: str
    type: str
    depth: int
    score: float


@dataclass(frozen=True)
class ComponentMatch:
    """Aggregated hits for one registry path across a scan."""
    path: str
    type: str
    depth: int
    count: int
    max_score: float

    @property
    def coverage(self) -> str:
        """Coarse coverage label used in reports."""
        if self.count > 20:
            return "high"
        if self.count > 10:
            return "medium"
        return "low"

    def to_dict(self) -> dict:
        return {
            'path': self.path,
            'type': self.type,
            'depth': self.depth,
            'count': self.count,
            'max_score': self.max_score,
            'coverage': self.coverage,
        }


class MatchAccumulator:
    """Per-path (count, max score) aggregation."""

    def __init__(self):
        self._hits: Dict[str, dict] = {}

    def add(self, match: TileMatch) -> None:
        hit = self._hits.get(match.path)
        if hit is None:
            self._hits[match.path] = {
                'type': match.type,
                'depth': match.depth,
                'count': 1,
                'max_score': match.score,
            }
        else:
            hit['count'] += 1
            hit['max_score'] = max(hit['max_score'], match.score)

    def extend(self, matches: Iterable[TileMatch]) -> None:
        for match in matches:
            self.add(match)

    def __len__(self) -> int:
        return len(self._hits)

    def ranked(self) -> List[ComponentMatch]:
        """Aggregated matches, count descending then max score descending."""
        results = [
            ComponentMatch(
                path=path,
                type=hit['type'],
                depth=hit['depth'],
                count=hit['count'],
                max_score=hit['max_score'],
            )
            for path, hit in self._hits.items()
        ]
        results.sort(key=lambda m: (-m.count, -m.max_score))
        return results


class CorrelationMatcher:
    """
    Threshold matcher over a read-only registry.

    Args:
        threshold: Minimum Pearson score (exclusive) to count as a hit
    """

    def __init__(self, threshold: float = 0.7):
        self.threshold = threshold

    def score(self, tile_a: np.ndarray, tile_b: np.ndarray) -> float:
        return pearson_score(tile_a, tile_b)

    def match(
        self,
        tile: np.ndarray,
        registry: Registry,
        threshold: Optional[float] = None
    ) -> List[TileMatch]:
        """
        Score ``tile`` against every entry with a reference pattern.

        Args:
            tile: Extracted gray tile
            registry: Entries built by build_registry
            threshold: Override of the matcher threshold

        Returns:
            matches: every entry scoring above the threshold, best first
        """
        threshold = self.threshold if threshold is None else threshold
        matches = []

        for entry in registry:
            if entry.pattern is None:
                continue
            value = pearson_score(tile, entry.pattern)
            if value > threshold:
                matches.append(TileMatch(entry.path, entry.type, entry.depth, value))

        matches.sort(key=lambda m: -m.score)
        return matches

    def best(self, tile: np.ndarray, registry: Registry) -> Optional[TileMatch]:
        """Highest-scoring entry regardless of threshold (None for an empty registry)."""
        best = None
        for entry in registry:
            if entry.pattern is None:
                continue
            value = pearson_score(tile, entry.pattern)
            if best is None or value > best.score:
                best = TileMatch(entry.path, entry.type, entry.depth, value)
        return best

    def match_hash(self, tile_hash: str, registry: Registry) -> Optional[RegistryEntry]:
        """First entry whose reference hash equals ``tile_hash``."""
        for entry in registry:
            if entry.reference_hash is not None and entry.reference_hash == tile_hash:
                return entry
        return None

    def aggregate(self, tiles: Iterable[np.ndarray], registry: Registry) -> List[ComponentMatch]:
        """Match every tile and return ranked per-path aggregates."""
        accumulator = MatchAccumulator()
        for tile in tiles:
            accumulator.extend(self.match(tile, registry))
        return accumulator.ranked()
