"""Text splitting and stopword filtering."""

from .tokenizer import Tokenizer, split_fields, split_tokens
from .stopwords import StopwordFilter, load_stopwords

__all__ = [
    "Tokenizer",
    "split_fields",
    "split_tokens",
    "StopwordFilter",
    "load_stopwords",
]
