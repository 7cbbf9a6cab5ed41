"""Core pipeline data model.

Sample is the raw unit a record is built from: one line for the classifier
and similarity tasks, one blank-line-delimited block for tagging. Line
numbers are 1-based positions in the split file.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Sample:
    line_no: int
    lines: Tuple[str, ...]

    @property
    def text(self) -> str:
        return self.lines[0]

    def numbered(self) -> List[Tuple[int, str]]:
        return [(self.line_no + i, line) for i, line in enumerate(self.lines)]


@dataclass(frozen=True)
class Rejection:
    split: str
    line_no: Optional[int]
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {"split": self.split, "line_no": self.line_no, "reason": self.reason}


@dataclass
class SplitResult:
    name: str
    source_file: str
    records: List[Any] = field(default_factory=list)
    rejections: List[Rejection] = field(default_factory=list)
    samples: int = 0
    output_file: Optional[str] = None

    @property
    def skipped(self) -> int:
        return len(self.rejections)
