"""Default text filter turning a raw tweet into bag-of-words tokens."""
from __future__ import annotations

import re
from typing import List

URL_RE = re.compile(
    r"(https?://\S+|www\.\S+)",
    flags=re.IGNORECASE,
)

USER_RE = re.compile(
    r"@\w+",
    flags=re.UNICODE,
)

RETWEET_RE = re.compile(r"\brt\b")

# Keep word characters, apostrophes inside words and hashtags.
NON_WORD_RE = re.compile(r"[^\w#'\s]+", flags=re.UNICODE)


def filter_tweet(text: str) -> List[str]:
    """Lowercase, strip URLs/mentions/retweet markers and split on whitespace."""

    if not isinstance(text, str):
        text = str(text)

    text = text.lower()
    text = URL_RE.sub(" ", text)
    text = USER_RE.sub(" ", text)
    text = RETWEET_RE.sub(" ", text)
    text = NON_WORD_RE.sub(" ", text)

    return [token.strip("'") for token in text.split() if token.strip("'")]


__all__ = ["filter_tweet"]
