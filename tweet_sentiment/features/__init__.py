"""Text filtering and feature hashing for tweet texts."""

from tweet_sentiment.features.hashing import DEFAULT_NUM_FEATURES, FeatureHasher
from tweet_sentiment.features.text_filter import filter_tweet

__all__ = ["DEFAULT_NUM_FEATURES", "FeatureHasher", "filter_tweet"]
