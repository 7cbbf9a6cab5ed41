"""fast_record

Turn labeled text datasets into fixed-width, integer-encoded columnar records.

Public API surface:
- fast_record.cli.main : CLI entrypoint
- fast_record.pipeline.build.build_records : run the two-pass pipeline
- fast_record.vocab : build/load vocabularies
- fast_record.records : per-task record builders (classifier, similarity, tagging)
- fast_record.writers : Arrow IPC / Parquet record writers
"""
__all__ = ["__version__"]
__version__ = "0.1.0"
