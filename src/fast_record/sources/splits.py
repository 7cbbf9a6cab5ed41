"""Dataset split resolution.

Supported input layouts:
- Directory: `train.txt` (required, vocabulary corpus), `dev.txt`, `test.txt`
  (optional, skipped with a warning when absent)
- Single file: one split named after the file stem, also the vocabulary corpus
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List

from ..errors import MissingResourceError

log = logging.getLogger("fast_record.sources.splits")

SPLIT_NAMES = ("train", "dev", "test")


@dataclass(frozen=True)
class SplitSource:
    name: str
    path: str
    builds_vocab: bool = False

    def lines(self) -> Iterator[str]:
        with open(self.path, "r", encoding="utf-8") as f:
            yield from f

    def metadata(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "size_bytes": os.path.getsize(self.path),
            "builds_vocab": self.builds_vocab,
        }


def resolve_splits(path: str) -> List[SplitSource]:
    if os.path.isdir(path):
        splits = []
        for name in SPLIT_NAMES:
            file_path = os.path.join(path, f"{name}.txt")
            if os.path.isfile(file_path):
                splits.append(SplitSource(name, file_path, builds_vocab=(name == "train")))
            elif name == "train":
                raise MissingResourceError(f"input directory has no train.txt: {path}")
            else:
                log.warning(f"Split {name} not found at {file_path}, skipping")
        return splits
    if os.path.isfile(path):
        return [SplitSource(Path(path).stem, path, builds_vocab=True)]
    raise MissingResourceError(f"input path not found: {path}")
