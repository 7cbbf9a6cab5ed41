from __future__ import annotations
import pyarrow as pa

from .base import RecordWriter
from ..storage.writer import atomic_output


class IPCRecordWriter(RecordWriter):
    """Arrow IPC file format, written in record batches of `batch_rows`."""
    name = "ipc"
    suffix = "ipc"

    def __init__(self, batch_rows: int = 100):
        self.batch_rows = batch_rows

    def write_table(self, table: pa.Table, path: str) -> None:
        with atomic_output(path) as tmp:
            with pa.OSFile(tmp, "wb") as sink:
                with pa.ipc.new_file(sink, table.schema) as writer:
                    for batch in table.to_batches(max_chunksize=self.batch_rows):
                        writer.write_batch(batch)

    def read_table(self, path: str) -> pa.Table:
        with pa.OSFile(path, "rb") as source:
            return pa.ipc.open_file(source).read_all()
