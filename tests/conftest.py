from __future__ import annotations

import threading
from typing import Dict, List, Tuple

import pytest

from tweet_sentiment.labels import Label
from tweet_sentiment.schemas import LabeledText


@pytest.fixture
def validation_set() -> List[LabeledText]:
    return [
        LabeledText(Label.HAPPY, "I love this"),
        LabeledText(Label.SAD, "I hate this"),
        LabeledText(Label.HAPPY, "great day"),
        LabeledText(Label.SAD, "bad day"),
    ]


class KeywordClassifier:
    """Stand-in for the model service: HAPPY unless a sad keyword appears."""

    SAD_WORDS = ("hate", "bad", "awful")

    def __init__(self, failing: Tuple[str, ...] = (), error: Exception = None):
        self.failing = set(failing)
        self.error = error
        self.calls: List[Tuple[str, str]] = []
        self._lock = threading.Lock()

    def __call__(self, model_name: str, text: str) -> Label:
        with self._lock:
            self.calls.append((model_name, text))
        if text in self.failing:
            raise self.error
        if any(word in text.lower() for word in self.SAD_WORDS):
            return Label.SAD
        return Label.HAPPY


@pytest.fixture
def keyword_classifier() -> KeywordClassifier:
    return KeywordClassifier()


@pytest.fixture
def raw_tweets() -> List[Dict[str, object]]:
    happy = [{"label": 1.0, "msg": f"what a lovely day number {i} :)"} for i in range(60)]
    sad = [{"label": 0, "msg": f"worst commute ever, day {i} :("} for i in range(40)]
    return happy + sad
