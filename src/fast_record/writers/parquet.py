from __future__ import annotations
import pyarrow as pa
import pyarrow.parquet as pq

from .base import RecordWriter
from ..storage.writer import atomic_output


class ParquetRecordWriter(RecordWriter):
    name = "parquet"
    suffix = "parquet"

    def __init__(self, compression: str = "zstd"):
        self.compression = compression

    def write_table(self, table: pa.Table, path: str) -> None:
        with atomic_output(path) as tmp:
            pq.write_table(table, tmp, compression=self.compression)

    def read_table(self, path: str) -> pa.Table:
        return pq.read_table(path)
