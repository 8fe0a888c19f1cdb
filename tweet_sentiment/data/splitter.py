"""Random partitioning of a collection into weighted, disjoint subsets."""
from __future__ import annotations

from bisect import bisect_right
from itertools import accumulate
from typing import Any, Callable, List, Optional, Sequence, TypeVar

import numpy as np
from sklearn.utils import murmurhash3_32

T = TypeVar("T")


def normalize_ratios(ratios: Sequence[float]) -> List[float]:
    """Validate ``ratios`` and rescale them to sum to one."""

    ratios = [float(ratio) for ratio in ratios]
    if not ratios:
        raise ValueError("At least one split ratio is required")
    if any(not np.isfinite(ratio) or ratio <= 0 for ratio in ratios):
        raise ValueError(f"Split ratios must be positive, got {ratios}")
    total = sum(ratios)
    return [ratio / total for ratio in ratios]


class DatasetSplitter:
    """Assign each element to a bucket independently of every other element.

    The bucket of an element depends only on the splitter seed and the
    element's key, so elements can be assigned by any number of workers
    without coordination. Bucket sizes are therefore only approximately
    proportional to the ratios.
    """

    def __init__(self, seed: Optional[int] = None):
        if seed is not None and seed < 0:
            raise ValueError("seed must be non-negative")
        self.seed = seed

    def _draw(self, seed: int, key: Any) -> float:
        key_hash = murmurhash3_32(str(key), seed=0, positive=True)
        return float(np.random.default_rng([seed, key_hash]).random())

    def assign(self, key: Any, ratios: Sequence[float], seed: Optional[int] = None) -> int:
        """Return the bucket index for the element identified by ``key``."""

        seed = self.seed if seed is None else seed
        if seed is None:
            raise ValueError("assign() needs a seed; configure the splitter with one")
        boundaries = list(accumulate(normalize_ratios(ratios)))
        return self._bucket(self._draw(seed, key), boundaries)

    @staticmethod
    def _bucket(draw: float, boundaries: Sequence[float]) -> int:
        # Floating point sums may leave the last boundary slightly below 1.0.
        return min(bisect_right(boundaries, draw), len(boundaries) - 1)

    def split(
        self,
        items: Sequence[T],
        ratios: Sequence[float],
        key: Optional[Callable[[T], Any]] = None,
    ) -> List[List[T]]:
        """Partition ``items`` into ``len(ratios)`` disjoint lists.

        Args:
            items: Elements to partition.
            ratios: Positive weights, one per output bucket.
            key: Maps an element to a stable identifier. Defaults to the
                element's position, which is only stable for a fixed input
                order.

        Returns:
            One list per ratio, each preserving input order.
        """

        boundaries = list(accumulate(normalize_ratios(ratios)))
        seed = self.seed
        if seed is None:
            seed = int(np.random.SeedSequence().entropy)

        buckets: List[List[T]] = [[] for _ in boundaries]
        for position, item in enumerate(items):
            identifier = key(item) if key is not None else position
            buckets[self._bucket(self._draw(seed, identifier), boundaries)].append(item)

        return buckets


__all__ = ["DatasetSplitter", "normalize_ratios"]
