"""Vocabulary building and loading."""

from .vocabulary import Vocabulary
from .builder import (
    build_label_vocabulary,
    build_vocabulary,
    count_tokens,
    load_label_vocabulary,
    load_vocabulary,
    merge_counts,
    rank_tokens,
)

__all__ = [
    "Vocabulary",
    "build_label_vocabulary",
    "build_vocabulary",
    "count_tokens",
    "load_label_vocabulary",
    "load_vocabulary",
    "merge_counts",
    "rank_tokens",
]
