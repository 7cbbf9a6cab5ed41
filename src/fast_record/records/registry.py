"""Record builder registry.

Tasks are selected by name (`TaskConfig.task`) when the pipeline starts;
builders are never chosen by inspecting record types at runtime.
"""

from __future__ import annotations
from typing import Callable, Dict, List

from ..config import TaskConfig
from ..errors import ConfigurationError
from .base import RecordBuilder
from .classification import ClassificationRecordBuilder
from .similarity import SimilarityRecordBuilder
from .tagging import TaggingRecordBuilder

_BUILDERS: Dict[str, Callable[[TaskConfig], RecordBuilder]] = {
    "classifier": ClassificationRecordBuilder,
    "similarity": SimilarityRecordBuilder,
    "tagging": TaggingRecordBuilder,
}


def register_record_builder(task: str, factory: Callable[[TaskConfig], RecordBuilder]) -> None:
    if task in _BUILDERS:
        raise ValueError(f"Record builder for task '{task}' already registered")
    _BUILDERS[task] = factory


def list_tasks() -> List[str]:
    return list(_BUILDERS)


def make_record_builder(config: TaskConfig) -> RecordBuilder:
    if config.task not in _BUILDERS:
        raise ConfigurationError(
            f"Unknown task: {config.task}. "
            f"Available: {list(_BUILDERS)}. "
            f"Register with register_record_builder()"
        )
    return _BUILDERS[config.task](config)
