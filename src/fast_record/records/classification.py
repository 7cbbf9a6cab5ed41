"""Text classification records.

Line format: `<sentence><separator><label>`, exactly two fields.
Columns: word_0..word_{L-1} (uint32), class (int32).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Union

import pyarrow as pa

from ..errors import MalformedRecordError
from ..pipeline.context import Sample
from ..text.tokenizer import split_fields
from ..vocab.builder import build_label_vocabulary, load_label_vocabulary
from ..vocab.vocabulary import Vocabulary
from .base import Encoders, RecordBuilder, id_columns, id_fields


@dataclass(frozen=True)
class ParsedClassification:
    line_no: int
    tokens: List[str]
    label: Union[str, int]


@dataclass(frozen=True)
class ClassificationRecord:
    word_ids: List[int]
    label: int


_MAX_LABEL_ID = 2**31 - 1


def parse_label_id(raw: str, line_no: int) -> int:
    """Integer label id that fits the int32 label column."""
    try:
        value = int(raw.strip())
    except ValueError:
        raise MalformedRecordError(f"label {raw!r} is not an integer id", line_no) from None
    if not 0 <= value <= _MAX_LABEL_ID:
        raise MalformedRecordError(f"label id {value} outside 0..{_MAX_LABEL_ID}", line_no)
    return value


def resolve_label(label: Union[str, int], labels: Vocabulary, line_no: int) -> int:
    if isinstance(label, int):
        return label
    idx = labels.get(label)
    if idx is None:
        raise MalformedRecordError(f"unknown label {label!r}", line_no)
    return idx


class ClassificationRecordBuilder(RecordBuilder):
    task = "classifier"

    def __init__(self, config):
        super().__init__(config)
        self.label_file = None if config.with_label_id else "class.txt"

    def parse(self, sample: Sample) -> ParsedClassification:
        parts = split_fields(sample.text, self.config.separator)
        if len(parts) != 2:
            raise MalformedRecordError(f"expected 2 fields (sentence, label), got {len(parts)}", sample.line_no)
        sentence, label = parts
        if self.config.with_label_id:
            label = parse_label_id(label, sample.line_no)
        return ParsedClassification(sample.line_no, self.tokenizer(sentence), label)

    def vocab_tokens(self, parsed: ParsedClassification) -> List[Sequence[str]]:
        return [parsed.tokens]

    def label_values(self, parsed: ParsedClassification) -> List[str]:
        return [] if isinstance(parsed.label, int) else [parsed.label]

    def make_label_vocab(self, labels: Iterable[str]) -> Vocabulary:
        return build_label_vocabulary(labels)

    def load_label_vocab(self, path: str) -> Vocabulary:
        return load_label_vocabulary(path)

    def encode(self, parsed: ParsedClassification, encoders: Encoders) -> ClassificationRecord:
        return ClassificationRecord(
            word_ids=encoders.words.encode(parsed.tokens),
            label=resolve_label(parsed.label, encoders.labels, parsed.line_no),
        )

    def schema(self, length: int) -> pa.Schema:
        return pa.schema(
            id_fields("word", length) + [pa.field("class", pa.int32(), nullable=False)],
            metadata={"task": self.task, "sequence_length": str(length)},
        )

    def columns(self, records: Sequence[ClassificationRecord], length: int) -> List[pa.Array]:
        cols = id_columns([r.word_ids for r in records], length)
        cols.append(pa.array([r.label for r in records], type=pa.int32()))
        return cols
