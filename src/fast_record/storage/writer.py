"""Atomic writers.

Every artifact is written to a temp file in its destination directory and
moved into place with `os.replace`, so a reader sees either the complete
file or no file. On failure the temp file is removed and RecordWriteError
is raised.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator
import json
import logging
import os
import tempfile

from ..errors import RecordWriteError

log = logging.getLogger("fast_record.storage.writer")


@contextmanager
def atomic_output(path: str) -> Iterator[str]:
    """Yield a temp path next to `path`; it replaces `path` only if the block succeeds."""
    dirpath = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(dirpath, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{os.path.basename(path)}.", suffix=".tmp", dir=dirpath)
        os.close(fd)
    except OSError as e:
        raise RecordWriteError(f"cannot write {path}: {e}") from e
    try:
        yield tmp
        os.replace(tmp, path)
    except OSError as e:
        _discard(tmp)
        if isinstance(e, RecordWriteError):
            raise
        raise RecordWriteError(f"cannot write {path}: {e}") from e
    except BaseException:
        _discard(tmp)
        raise


def _discard(tmp: str) -> None:
    try:
        os.remove(tmp)
    except FileNotFoundError:
        pass
    except OSError as e:
        log.warning(f"Could not remove temp file {tmp}: {e}")


def write_lines(path: str, lines: Iterable[str]) -> None:
    with atomic_output(path) as tmp:
        with open(tmp, "w", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")


def write_jsonl(path: str, rows: Iterable[Dict[str, Any]]) -> None:
    with atomic_output(path) as tmp:
        with open(tmp, "w", encoding="utf-8") as f:
            for r in rows:
                f.write(json.dumps(r, ensure_ascii=False) + "\n")


def write_manifest(path: str, manifest: Dict[str, Any]) -> None:
    with atomic_output(path) as tmp:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(manifest, f, indent=2, ensure_ascii=False)
