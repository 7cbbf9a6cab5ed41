"""Record writers.

A RecordWriter serializes one split's records as a single columnar file.
The table schema comes from the task's RecordBuilder and is fixed before the
first row is added; writing goes through `atomic_output`.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Sequence
import os
import pyarrow as pa

from ..records.base import RecordBuilder


def build_table(builder: RecordBuilder, records: Sequence[Any], length: int) -> pa.Table:
    return pa.Table.from_arrays(builder.columns(records, length), schema=builder.schema(length))


class RecordWriter(ABC):
    name: str
    suffix: str

    def output_path(self, out_dir: str, split: str) -> str:
        return os.path.join(out_dir, f"{split}.records.{self.suffix}")

    @abstractmethod
    def write_table(self, table: pa.Table, path: str) -> None:
        """Write `table` to `path` atomically."""
        raise NotImplementedError

    @abstractmethod
    def read_table(self, path: str) -> pa.Table:
        raise NotImplementedError

    def write_records(self, builder: RecordBuilder, records: Sequence[Any], *, length: int, out_dir: str, split: str) -> str:
        path = self.output_path(out_dir, split)
        self.write_table(build_table(builder, records, length), path)
        return path
