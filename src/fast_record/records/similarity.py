"""Sentence-pair similarity records.

Line format: `<text_a><sent_sep><text_b><label_sep><label>`. The first split
happens once on `sent_sep`; the remainder must split on `label_sep` into
exactly (text_b, label).

Columns: text_a_0.., text_b_0.. (uint32), label (bool with `with_bool`,
int32 otherwise).
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
from .classification import parse_label_id, resolve_label

_TRUE = {"1", "true", "yes"}
_FALSE = {"0", "false", "no"}


@dataclass(frozen=True)
class ParsedSimilarity:
    line_no: int
    text_a: List[str]
    text_b: List[str]
    label: Union[str, int, bool]


@dataclass(frozen=True)
class SimilarityRecord:
    text_a_ids: List[int]
    text_b_ids: List[int]
    label: Union[int, bool]


def parse_bool(raw: str, line_no: int) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise MalformedRecordError(f"label {raw!r} is not a boolean", line_no)


class SimilarityRecordBuilder(RecordBuilder):
    task = "similarity"

    def __init__(self, config):
        super().__init__(config)
        categorical = not (config.with_bool or config.with_label_id)
        self.label_file = "class.txt" if categorical else None

    def parse(self, sample: Sample) -> ParsedSimilarity:
        head = split_fields(sample.text, self.config.sent_sep, 1)
        if len(head) != 2:
            raise MalformedRecordError("expected text_a and text_b separated by sent-sep", sample.line_no)
        tail = head[1].split(self.config.label_sep)
        if len(tail) != 2:
            raise MalformedRecordError(f"expected 2 fields (text_b, label), got {len(tail)}", sample.line_no)
        text_b, label = tail
        if self.config.with_bool:
            label = parse_bool(label, sample.line_no)
        elif self.config.with_label_id:
            label = parse_label_id(label, sample.line_no)
        return ParsedSimilarity(sample.line_no, self.tokenizer(head[0]), self.tokenizer(text_b), label)

    def vocab_tokens(self, parsed: ParsedSimilarity) -> List[Sequence[str]]:
        return [parsed.text_a, parsed.text_b]

    def label_values(self, parsed: ParsedSimilarity) -> List[str]:
        return [parsed.label] if isinstance(parsed.label, str) else []

    def make_label_vocab(self, labels: Iterable[str]) -> Vocabulary:
        return build_label_vocabulary(labels)

    def load_label_vocab(self, path: str) -> Vocabulary:
        return load_label_vocabulary(path)

    def encode(self, parsed: ParsedSimilarity, encoders: Encoders) -> SimilarityRecord:
        label = parsed.label
        if isinstance(label, str):
            label = resolve_label(label, encoders.labels, parsed.line_no)
        return SimilarityRecord(
            text_a_ids=encoders.words.encode(parsed.text_a),
            text_b_ids=encoders.words.encode(parsed.text_b),
            label=label,
        )

    def _label_type(self) -> pa.DataType:
        return pa.bool_() if self.config.with_bool else pa.int32()

    def schema(self, length: int) -> pa.Schema:
        fields = id_fields("text_a", length) + id_fields("text_b", length)
        fields.append(pa.field("label", self._label_type(), nullable=False))
        return pa.schema(fields, metadata={"task": self.task, "sequence_length": str(length)})

    def columns(self, records: Sequence[SimilarityRecord], length: int) -> List[pa.Array]:
        cols = id_columns([r.text_a_ids for r in records], length)
        cols += id_columns([r.text_b_ids for r in records], length)
        cols.append(pa.array([r.label for r in records], type=self._label_type()))
        return cols
