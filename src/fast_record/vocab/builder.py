"""Vocabulary construction (pass one) and loading.

Build mode:
- count every token of the vocabulary corpus (stopwords, empty tokens and the
  reserved padding/unknown literals are never counted)
- rank by descending frequency; ties keep first-seen order
- keep the top `max_size` tokens
- ids: padding -> 0, unknown -> 1, ranked tokens -> 2, 3, ...

Load mode reads one token per line (line order = id order) and ignores
`max_size` and stopwords.

Counting can be sharded: `merge_counts` sums per-chunk Counters in chunk
order, which preserves first-seen order and therefore the tie-break.
"""

from __future__ import annotations
import logging
import os
from collections import Counter
from typing import Iterable, List, Optional, Sequence

from ..errors import ConfigurationError, MissingResourceError
from ..text.stopwords import StopwordFilter
from .vocabulary import Vocabulary

log = logging.getLogger("fast_record.vocab.builder")


def count_tokens(
    token_lists: Iterable[Sequence[str]],
    stopwords: Optional[StopwordFilter] = None,
    reserved: Iterable[str] = (),
) -> Counter:
    skip = set(reserved)
    skip.add("")
    counts: Counter = Counter()
    for tokens in token_lists:
        if stopwords is not None:
            tokens = stopwords.filter(tokens)
        for tok in tokens:
            if tok not in skip:
                counts[tok] += 1
    return counts


def merge_counts(partials: Iterable[Counter]) -> Counter:
    merged: Counter = Counter()
    for part in partials:
        for tok, n in part.items():
            merged[tok] += n
    return merged


def rank_tokens(counts: Counter, limit: Optional[int] = None) -> List[str]:
    # sorted() is stable, so equal counts keep insertion (first-seen) order
    ranked = [tok for tok, _ in sorted(counts.items(), key=lambda kv: -kv[1])]
    return ranked if limit is None else ranked[:limit]


def build_vocabulary(counts: Counter, max_size: int, padding: str, unknown: str) -> Vocabulary:
    if max_size <= 0:
        raise ConfigurationError(f"max-vocab-size must be positive, got {max_size}")
    if padding == unknown:
        raise ConfigurationError(f"padding and unknown tokens must differ, both are {padding!r}")
    ranked = rank_tokens(Counter({t: n for t, n in counts.items() if t not in (padding, unknown)}), max_size)
    vocab = Vocabulary.from_tokens([padding, unknown, *ranked], padding=padding, unknown=unknown)
    log.info(f"Built vocabulary: {len(vocab)} entries ({len(counts)} distinct tokens seen, max_size={max_size})")
    return vocab


def _read_lines(path: str, what: str) -> List[str]:
    if not os.path.isfile(path):
        raise MissingResourceError(f"{what} file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        lines = [line.rstrip("\r\n") for line in f]
    entries: List[str] = []
    seen = set()
    for line in lines:
        if not line or line in seen:
            continue
        seen.add(line)
        entries.append(line)
    if not entries:
        raise MissingResourceError(f"{what} file is empty: {path}")
    return entries


def load_vocabulary(path: str, padding: str, unknown: str) -> Vocabulary:
    """Load a user vocabulary; missing reserved tokens are prepended (padding first)."""
    tokens = _read_lines(path, "vocabulary")
    missing = [t for t in (padding, unknown) if t not in tokens]
    if missing:
        log.warning(f"Vocabulary {path} lacks {missing}; prepending them, file ids shift by {len(missing)}")
    vocab = Vocabulary.from_tokens([*missing, *tokens], padding=padding, unknown=unknown)
    log.info(f"Loaded vocabulary: {len(vocab)} entries from {path}")
    return vocab


def build_label_vocabulary(
    labels: Iterable[str],
    padding: Optional[str] = None,
    unknown: Optional[str] = None,
) -> Vocabulary:
    """Closed label set: same ranking as words, no truncation, optional reserved padding at id 0."""
    counts = Counter(l for l in labels if l != padding)
    tokens = rank_tokens(counts)
    if padding is not None:
        tokens = [padding, *tokens]
    return Vocabulary.from_tokens(tokens, padding=padding, unknown=unknown)


def load_label_vocabulary(
    path: str,
    padding: Optional[str] = None,
    unknown: Optional[str] = None,
) -> Vocabulary:
    """Labels from a file (line order = id order); a missing padding label is prepended."""
    labels = _read_lines(path, "label")
    if padding is not None and padding not in labels:
        labels = [padding, *labels]
    return Vocabulary.from_tokens(labels, padding=padding, unknown=unknown)
