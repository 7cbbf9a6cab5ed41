"""Sequence tagging records.

Input is one `<word><separator><tag>` pair per line; a blank line ends a
sentence. Words and tags stay positionally aligned: both are truncated to
the first L tokens, words are padded with the padding id and tags with the
padding-tag id. A line that is not exactly (word, tag) makes the whole
sentence malformed; it is never padded to match.

Columns: word_0..word_{L-1}, tag_0..tag_{L-1} (uint32).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence

import pyarrow as pa

from ..encoder import pad_ids
from ..errors import MalformedRecordError
from ..pipeline.context import Sample
from ..text.tokenizer import split_fields
from ..vocab.builder import build_label_vocabulary, load_label_vocabulary
from ..vocab.vocabulary import Vocabulary
from .base import Encoders, RecordBuilder, id_columns, id_fields


@dataclass(frozen=True)
class ParsedSentence:
    line_no: int
    words: List[str]
    tags: List[str]


@dataclass(frozen=True)
class TaggingRecord:
    word_ids: List[int]
    tag_ids: List[int]


class TaggingRecordBuilder(RecordBuilder):
    task = "tagging"
    label_file = "tags.txt"

    @property
    def padding_tag(self) -> str:
        return self.config.padding_tag or self.config.padding

    @property
    def unknown_tag(self):
        # unseen tags fall back to the padding tag only when one is configured
        return self.config.padding_tag

    def iter_samples(self, lines: Iterable[str]) -> Iterator[Sample]:
        """One sample per blank-line-delimited block."""
        block: List[str] = []
        start = 0
        for line_no, line in enumerate(lines, start=1):
            line = line.rstrip("\r\n")
            if line.strip():
                if not block:
                    start = line_no
                block.append(line)
            elif block:
                yield Sample(start, tuple(block))
                block = []
        if block:
            yield Sample(start, tuple(block))

    def parse(self, sample: Sample) -> ParsedSentence:
        words: List[str] = []
        tags: List[str] = []
        for line_no, line in sample.numbered():
            parts = split_fields(line, self.config.separator)
            if len(parts) != 2:
                raise MalformedRecordError(f"expected 2 fields (word, tag), got {len(parts)}", line_no)
            word, tag = parts
            if not word or not tag:
                raise MalformedRecordError("word/tag count mismatch: empty word or tag", line_no)
            words.append(word)
            tags.append(tag)
        return ParsedSentence(sample.line_no, words, tags)

    def vocab_tokens(self, parsed: ParsedSentence) -> List[Sequence[str]]:
        return [parsed.words]

    def label_values(self, parsed: ParsedSentence) -> List[str]:
        return parsed.tags

    def make_label_vocab(self, labels: Iterable[str]) -> Vocabulary:
        return build_label_vocabulary(labels, padding=self.padding_tag, unknown=self.unknown_tag)

    def load_label_vocab(self, path: str) -> Vocabulary:
        return load_label_vocabulary(path, padding=self.padding_tag, unknown=self.unknown_tag)

    def encode(self, parsed: ParsedSentence, encoders: Encoders) -> TaggingRecord:
        tag_vocab = encoders.labels
        length = encoders.length
        tag_ids = []
        for i, tag in enumerate(parsed.tags[:length]):
            try:
                tag_ids.append(tag_vocab.lookup(tag))
            except KeyError:
                raise MalformedRecordError(f"unknown tag {tag!r}", parsed.line_no + i) from None
        return TaggingRecord(
            word_ids=encoders.words.encode(parsed.words),
            tag_ids=pad_ids(tag_ids, length, tag_vocab.pad_id),
        )

    def schema(self, length: int) -> pa.Schema:
        return pa.schema(
            id_fields("word", length) + id_fields("tag", length),
            metadata={"task": self.task, "sequence_length": str(length)},
        )

    def columns(self, records: Sequence[TaggingRecord], length: int) -> List[pa.Array]:
        return id_columns([r.word_ids for r in records], length) + id_columns([r.tag_ids for r in records], length)
