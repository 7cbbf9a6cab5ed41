"""Run ID resolution: explicit or auto-generated.

Auto-generated ids look like `<task>_<input name>_<YYYYMMDDHHMMSS>`, where the
input name is the input directory name or the input file's stem.
"""

from __future__ import annotations
import os
import re
from datetime import datetime, timezone
from typing import Optional

from .config import TaskConfig


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")


def input_name(path: str) -> str:
    """Short, run_id-safe name for the input path."""
    normalized = os.path.normpath(path)
    if os.path.isdir(normalized):
        name = os.path.basename(os.path.abspath(normalized))
    else:
        name = os.path.splitext(os.path.basename(normalized))[0]
    name = re.sub(r"[^\w\-]", "_", name)
    return name or "input"


def generate_run_id(config: TaskConfig, timestamp: Optional[str] = None) -> str:
    return "_".join([config.task, input_name(config.path), timestamp or _timestamp()])


def resolve_run_id(config: TaskConfig) -> str:
    """Return config.run_id when set, otherwise an auto-generated id."""
    explicit = config.run_id
    if explicit is not None and str(explicit).strip():
        return str(explicit).strip()
    return generate_run_id(config)
