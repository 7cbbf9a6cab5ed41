"""Columnar record writers (Arrow IPC, Parquet)."""

from .base import RecordWriter, build_table
from .registry import get_record_writer, list_record_writers, read_records, register_record_writer

__all__ = [
    "RecordWriter",
    "build_table",
    "get_record_writer",
    "list_record_writers",
    "read_records",
    "register_record_writer",
]
