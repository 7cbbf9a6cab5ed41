"""Logging utilities.

We use Python's standard `logging` module with a plain structured format.

- Logs go to: `<log_dir>/<run_id>.log`
- Also prints the same lines to the console.
"""

from __future__ import annotations
import logging
import os


def setup_logging(log_dir: str, run_id: str, level: int = logging.INFO) -> str:
    """Attach file + console handlers to the root logger; returns the log file path."""
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, f"{run_id}.log")

    root = logging.getLogger()
    root.setLevel(level)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    # File
    fh = logging.FileHandler(log_path, encoding="utf-8")
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Console
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    root.addHandler(ch)
    return log_path
