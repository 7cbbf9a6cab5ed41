"""Fixed-length sequence encoding.

Every encoded sequence has exactly `length` ids:
- tokens missing from the vocabulary (including empty tokens) -> unknown id
- shorter sequences are right-padded with the padding id
- longer sequences keep their first `length` tokens

Encoding never fails; the unknown-id substitution is the only fallback.
"""

from __future__ import annotations
from typing import List, Sequence

from .vocab.vocabulary import Vocabulary


class SequenceEncoder:
    def __init__(self, vocab: Vocabulary, length: int):
        if vocab.padding is None or vocab.unknown is None:
            raise ValueError("SequenceEncoder needs a vocabulary with padding and unknown tokens")
        if length <= 0:
            raise ValueError(f"length must be positive, got {length}")
        self.vocab = vocab
        self.length = length
        self.pad_id = vocab.pad_id
        self.unk_id = vocab.unk_id

    def encode(self, tokens: Sequence[str]) -> List[int]:
        index = self.vocab.index
        ids = [index.get(t, self.unk_id) for t in tokens[: self.length]]
        return pad_ids(ids, self.length, self.pad_id)


def pad_ids(ids: List[int], length: int, pad_id: int) -> List[int]:
    """Right-pad or truncate (keep the head) to exactly `length` ids."""
    if len(ids) >= length:
        return ids[:length]
    return ids + [pad_id] * (length - len(ids))
