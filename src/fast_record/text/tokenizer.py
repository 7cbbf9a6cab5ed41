"""Separator-based tokenization.

Splitting is literal (`str.split`), never regex. Empty pieces produced by
repeated separators are kept as empty-string tokens; the vocabulary builder
never counts them and the encoder maps them to the unknown id.
"""

from __future__ import annotations
from typing import List


def split_tokens(text: str, separator: str) -> List[str]:
    """Split on every occurrence of `separator`. Empty text has no tokens."""
    if not text:
        return []
    return text.split(separator)


def split_fields(line: str, separator: str, maxsplit: int = -1) -> List[str]:
    """Split a raw record line into fields; the trailing newline is not a field."""
    return line.rstrip("\r\n").split(separator, maxsplit)


class Tokenizer:
    """Word-level (split on `separator`) or char-level (one token per character)."""

    def __init__(self, separator: str = " ", level: str = "word"):
        self.separator = separator
        self.level = level

    def tokenize(self, text: str) -> List[str]:
        if self.level == "char":
            return list(text)
        return split_tokens(text, self.separator)

    def __call__(self, text: str) -> List[str]:
        return self.tokenize(text)

    def __repr__(self) -> str:
        return f"Tokenizer(separator={self.separator!r}, level={self.level!r})"
