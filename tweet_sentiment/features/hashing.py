"""Bag-of-words feature hashing.

Each token is hashed with 32-bit MurmurHash3 and folded into a fixed number
of slots, so the vocabulary never has to be materialized. Distinct tokens
may land in the same slot; their counts are summed. With a small number of
slots relative to the vocabulary this loses some information, but keeps
the representation bounded no matter how many new words show up.
"""
from __future__ import annotations

from collections import Counter
from typing import Callable, Iterable, List, Sequence

from sklearn.utils import murmurhash3_32

from tweet_sentiment.schemas import FeatureVector

DEFAULT_NUM_FEATURES = 2000
HASH_SEED = 42


class FeatureHasher:
    """Map token sequences to ``FeatureVector`` instances of a fixed dimension."""

    def __init__(self, num_features: int = DEFAULT_NUM_FEATURES, seed: int = HASH_SEED):
        if isinstance(num_features, bool) or not isinstance(num_features, int) or num_features < 1:
            raise ValueError(f"num_features must be a positive integer, got {num_features!r}")
        self.num_features = num_features
        self.seed = seed

    def index_of(self, token: str) -> int:
        """Return the slot for ``token`` in ``[0, num_features)``."""

        # Python's modulo with a positive divisor is already non-negative.
        return murmurhash3_32(str(token), seed=self.seed, positive=False) % self.num_features

    def transform(self, tokens: Iterable[str]) -> FeatureVector:
        counts = Counter(self.index_of(token) for token in tokens)
        return FeatureVector(
            dimension=self.num_features,
            counts={index: float(count) for index, count in counts.items()},
        )

    def transform_text(self, text: str, text_filter: Callable[[str], Sequence[str]]) -> FeatureVector:
        return self.transform(text_filter(text))

    def transform_many(self, documents: Iterable[Iterable[str]]) -> List[FeatureVector]:
        return [self.transform(tokens) for tokens in documents]

    def __repr__(self) -> str:
        return f"FeatureHasher(num_features={self.num_features}, seed={self.seed})"


__all__ = ["DEFAULT_NUM_FEATURES", "HASH_SEED", "FeatureHasher"]
