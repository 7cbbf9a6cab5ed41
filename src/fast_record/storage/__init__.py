"""Atomic file output helpers."""

from .writer import atomic_output, write_jsonl, write_lines, write_manifest

__all__ = ["atomic_output", "write_jsonl", "write_lines", "write_manifest"]
