"""Per-task record builders."""

from .base import Encoders, RecordBuilder
from .classification import ClassificationRecord, ClassificationRecordBuilder
from .similarity import SimilarityRecord, SimilarityRecordBuilder
from .tagging import TaggingRecord, TaggingRecordBuilder
from .registry import make_record_builder, register_record_builder, list_tasks

__all__ = [
    "Encoders",
    "RecordBuilder",
    "ClassificationRecord",
    "ClassificationRecordBuilder",
    "SimilarityRecord",
    "SimilarityRecordBuilder",
    "TaggingRecord",
    "TaggingRecordBuilder",
    "make_record_builder",
    "register_record_builder",
    "list_tasks",
]
