"""Stopword filtering.

Stopwords only keep tokens out of the vocabulary. Records are encoded from
the unfiltered token sequence, so a stopword in a record simply becomes the
unknown id (or its own id, when a user vocabulary contains it).
"""

from __future__ import annotations
import logging
import os
from typing import FrozenSet, Iterable, List

from ..errors import MissingResourceError

log = logging.getLogger("fast_record.text.stopwords")


class StopwordFilter:
    def __init__(self, words: Iterable[str] = ()):
        self.words: FrozenSet[str] = frozenset(words)

    def __len__(self) -> int:
        return len(self.words)

    def __contains__(self, token: str) -> bool:
        return token in self.words

    def filter(self, tokens: Iterable[str]) -> List[str]:
        if not self.words:
            return list(tokens)
        return [t for t in tokens if t not in self.words]


def load_stopwords(path: str) -> StopwordFilter:
    """Read one stopword per line; blank lines are ignored."""
    if not os.path.isfile(path):
        raise MissingResourceError(f"stopwords file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        words = [line.rstrip("\r\n") for line in f]
    sw = StopwordFilter(w for w in words if w)
    log.info(f"Loaded {len(sw)} stopwords from {path}")
    return sw
