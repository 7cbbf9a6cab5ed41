"""Record builder interface.

A builder owns one task's line format and column layout. It is used twice:

pass one (vocabulary):
    parsed = builder.parse(sample)
    builder.vocab_tokens(parsed)   -> token lists to count
    builder.label_values(parsed)   -> raw labels/tags for the label vocabulary

pass two (encoding, vocabularies frozen):
    record = builder.encode(parsed, encoders)

`parse` raises MalformedRecordError; `encode` only raises it for labels that
cannot be resolved (unseen class, unknown tag without a padding tag).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional, Sequence

import numpy as np
import pyarrow as pa

from ..config import TaskConfig
from ..encoder import SequenceEncoder
from ..pipeline.context import Sample
from ..text.tokenizer import Tokenizer
from ..vocab.vocabulary import Vocabulary


@dataclass(frozen=True)
class Encoders:
    words: SequenceEncoder
    labels: Optional[Vocabulary] = None

    @property
    def length(self) -> int:
        return self.words.length


class RecordBuilder(ABC):
    task: str = "task"
    # label vocabulary file name in the data/output directory; None = no label vocabulary
    label_file: Optional[str] = None

    def __init__(self, config: TaskConfig):
        self.config = config
        self.tokenizer = Tokenizer(separator=config.word_sep, level=config.token_level)

    # ---- sample framing -------------------------------------------------

    def iter_samples(self, lines: Iterable[str]) -> Iterator[Sample]:
        """One sample per non-blank line."""
        for line_no, line in enumerate(lines, start=1):
            line = line.rstrip("\r\n")
            if line.strip():
                yield Sample(line_no, (line,))

    # ---- pass one -------------------------------------------------------

    @abstractmethod
    def parse(self, sample: Sample) -> Any:
        ...

    @abstractmethod
    def vocab_tokens(self, parsed: Any) -> List[Sequence[str]]:
        ...

    def label_values(self, parsed: Any) -> List[str]:
        return []

    @property
    def uses_label_vocab(self) -> bool:
        return self.label_file is not None

    def make_label_vocab(self, labels: Iterable[str]) -> Vocabulary:
        raise NotImplementedError

    def load_label_vocab(self, path: str) -> Vocabulary:
        raise NotImplementedError

    # ---- pass two -------------------------------------------------------

    @abstractmethod
    def encode(self, parsed: Any, encoders: Encoders) -> Any:
        ...

    # ---- columns --------------------------------------------------------

    @abstractmethod
    def schema(self, length: int) -> pa.Schema:
        ...

    @abstractmethod
    def columns(self, records: Sequence[Any], length: int) -> List[pa.Array]:
        ...


def id_columns(rows: Sequence[Sequence[int]], length: int) -> List[pa.Array]:
    """Turn n rows of `length` ids into `length` uint32 columns."""
    mat = np.asarray(rows, dtype=np.uint32).reshape(len(rows), length)
    cols = np.ascontiguousarray(mat.T)
    return [pa.array(cols[k], type=pa.uint32()) for k in range(length)]


def id_fields(prefix: str, length: int) -> List[pa.Field]:
    return [pa.field(f"{prefix}_{k}", pa.uint32(), nullable=False) for k in range(length)]
