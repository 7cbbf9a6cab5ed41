"""Writer registry.

Add new output formats without changing pipeline code by registering them here.
"""

from __future__ import annotations
from typing import Dict, List

from ..errors import ConfigurationError
from .base import RecordWriter
from .ipc import IPCRecordWriter
from .parquet import ParquetRecordWriter

_WRITERS: Dict[str, RecordWriter] = {
    "ipc": IPCRecordWriter(),
    "parquet": ParquetRecordWriter(),
}


def register_record_writer(name: str, writer: RecordWriter) -> None:
    if name in _WRITERS:
        raise ValueError(f"Record writer '{name}' already registered")
    _WRITERS[name] = writer


def list_record_writers() -> List[str]:
    return list(_WRITERS.keys())


def get_record_writer(name: str) -> RecordWriter:
    if name not in _WRITERS:
        raise ConfigurationError(
            f"Unknown record format: {name}. "
            f"Available: {list(_WRITERS)}. "
            f"Register with register_record_writer()"
        )
    return _WRITERS[name]


def read_records(path: str):
    """Read a record file back into a pyarrow Table, picking the reader by suffix."""
    for writer in _WRITERS.values():
        if path.endswith(f".{writer.suffix}"):
            return writer.read_table(path)
    raise ConfigurationError(f"Unrecognized record file suffix: {path}")
