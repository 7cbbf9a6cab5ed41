"""Frozen token <-> id mapping.

A Vocabulary is built once (pass one) and then only read. Ids are the
positions in `tokens`, so they are dense and start at 0.

The same type serves three roles:
- word vocabulary: padding and unknown reserved (ids 0 and 1 when built)
- tag vocabulary: padding tag reserved, unknown only when configured
- label vocabulary: no reserved entries
"""

from __future__ import annotations
from dataclasses import dataclass, field
import hashlib
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Vocabulary:
    tokens: Tuple[str, ...]
    padding: Optional[str] = None
    unknown: Optional[str] = None
    index: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index = {}
        for i, tok in enumerate(self.tokens):
            if tok in index:
                raise ValueError(f"duplicate vocabulary entry {tok!r} at ids {index[tok]} and {i}")
            index[tok] = i
        for reserved in (self.padding, self.unknown):
            if reserved is not None and reserved not in index:
                raise ValueError(f"reserved token {reserved!r} missing from vocabulary")
        object.__setattr__(self, "index", MappingProxyType(index))

    @classmethod
    def from_tokens(cls, tokens: Iterable[str], padding: Optional[str] = None, unknown: Optional[str] = None) -> "Vocabulary":
        return cls(tuple(tokens), padding=padding, unknown=unknown)

    def __len__(self) -> int:
        return len(self.tokens)

    def __contains__(self, token: str) -> bool:
        return token in self.index

    def __iter__(self) -> Iterator[str]:
        return iter(self.tokens)

    @property
    def pad_id(self) -> Optional[int]:
        return None if self.padding is None else self.index[self.padding]

    @property
    def unk_id(self) -> Optional[int]:
        return None if self.unknown is None else self.index[self.unknown]

    @property
    def fingerprint(self) -> str:
        """sha256 over the tokens in id order, one per line; reserved entries included."""
        h = hashlib.sha256()
        for tok in self.tokens:
            h.update(tok.encode("utf-8"))
            h.update(b"\n")
        return h.hexdigest()

    def get(self, token: str) -> Optional[int]:
        return self.index.get(token)

    def lookup(self, token: str) -> int:
        """Id of `token`, falling back to the unknown id. KeyError if there is no fallback."""
        idx = self.index.get(token)
        if idx is not None:
            return idx
        if self.unknown is None:
            raise KeyError(token)
        return self.index[self.unknown]
