"""Error taxonomy.

- ConfigurationError: invalid option values (fatal, raised before any I/O)
- MissingResourceError: input path, vocabulary, stopwords or label file absent
- MalformedRecordError: a line/sentence block does not have the expected fields
- RecordWriteError: an output artifact could not be written (an OSError)
"""

from __future__ import annotations
from typing import Optional


class FastRecordError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(FastRecordError):
    pass


class MissingResourceError(FastRecordError):
    pass


class MalformedRecordError(FastRecordError):
    def __init__(self, reason: str, line_no: Optional[int] = None):
        self.reason = reason
        self.line_no = line_no
        where = f"line {line_no}: " if line_no is not None else ""
        super().__init__(f"{where}{reason}")


class RecordWriteError(FastRecordError, OSError):
    pass
