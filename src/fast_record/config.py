"""Task configuration.

A TaskConfig can come from CLI flags (one subcommand per task) or from a
YAML file. YAML keeps runs reviewable and versionable:

    task: classifier
    path: data/sentiment
    sequence-length: 64
    max-vocab-size: 20000
    stopwords-file: data/stopwords.txt

Both entry points call `validate()` before the first input file is opened.
"""

from __future__ import annotations
import os
from dataclasses import dataclass, fields, asdict
from typing import Any, Dict, Optional
import yaml

from .errors import ConfigurationError, MissingResourceError

TASKS = ("classifier", "similarity", "tagging")
TOKEN_LEVELS = ("word", "char")
FORMATS = ("ipc", "parquet")


@dataclass
class TaskConfig:
    task: str
    path: str
    output_path: Optional[str] = None

    # field separators
    separator: str = "\t"       # sentence/label (classifier), word/tag (tagging)
    sent_sep: str = "\t"        # text_a / rest (similarity)
    label_sep: str = "\t"       # text_b / label (similarity)
    word_sep: str = " "
    token_level: str = "word"
    with_lang_en: bool = False

    # vocabulary
    with_vocab: bool = False
    vocab_file: Optional[str] = None
    max_vocab_size: int = 10000
    stopwords_file: Optional[str] = None
    padding: str = "<PAD>"
    unknown: str = "<UNK>"
    padding_tag: Optional[str] = None

    # encoding
    sequence_length: int = 32
    with_label_id: bool = False
    with_bool: bool = False

    # run
    format: str = "ipc"
    num_workers: int = 4
    chunk_size: int = 1000
    strict: bool = False
    run_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.with_lang_en:
            self.token_level = "word"

    @property
    def input_is_dir(self) -> bool:
        return os.path.isdir(self.path)

    @property
    def data_dir(self) -> str:
        """Directory holding the splits and optional label files."""
        return self.path if self.input_is_dir else os.path.dirname(os.path.abspath(self.path))

    @property
    def out_dir(self) -> str:
        return self.output_path or self.data_dir

    @property
    def resolved_vocab_file(self) -> str:
        return self.vocab_file or os.path.join(self.data_dir, "vocab.txt")

    def validate(self) -> "TaskConfig":
        """Fail fast on bad values and absent resources; returns self."""
        if self.task not in TASKS:
            raise ConfigurationError(f"unknown task {self.task!r}, expected one of {TASKS}")
        if self.token_level not in TOKEN_LEVELS:
            raise ConfigurationError(f"unknown token-level {self.token_level!r}, expected one of {TOKEN_LEVELS}")
        if self.format not in FORMATS:
            raise ConfigurationError(f"unknown format {self.format!r}, expected one of {FORMATS}")
        for name in ("sequence_length", "num_workers", "chunk_size"):
            if int(getattr(self, name)) <= 0:
                raise ConfigurationError(f"{name.replace('_', '-')} must be positive, got {getattr(self, name)}")
        if not self.with_vocab and self.max_vocab_size <= 0:
            raise ConfigurationError(f"max-vocab-size must be positive, got {self.max_vocab_size}")
        for name in ("separator", "sent_sep", "label_sep", "word_sep"):
            if not getattr(self, name):
                raise ConfigurationError(f"{name.replace('_', '-')} must not be empty")
        if not self.padding or not self.unknown:
            raise ConfigurationError("padding and unknown tokens must not be empty")
        if self.padding == self.unknown:
            raise ConfigurationError(f"padding and unknown tokens must differ, both are {self.padding!r}")
        if self.padding_tag == "":
            raise ConfigurationError("padding-tag must not be empty")

        if not os.path.exists(self.path):
            raise MissingResourceError(f"input path not found: {self.path}")
        if self.input_is_dir and not os.path.isfile(os.path.join(self.path, "train.txt")):
            raise MissingResourceError(f"input directory has no train.txt: {self.path}")
        if self.with_vocab and not os.path.isfile(self.resolved_vocab_file):
            raise MissingResourceError(f"vocabulary file not found: {self.resolved_vocab_file}")
        if self.stopwords_file and not os.path.isfile(self.stopwords_file):
            raise MissingResourceError(f"stopwords file not found: {self.stopwords_file}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_FIELD_NAMES = {f.name for f in fields(TaskConfig)}


def load_yaml(path: str) -> Dict[str, Any]:
    if not os.path.isfile(path):
        raise MissingResourceError(f"config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def config_from_dict(raw: Dict[str, Any]) -> TaskConfig:
    """Build a TaskConfig from a mapping whose keys may use '-' or '_'."""
    kwargs: Dict[str, Any] = {}
    for key, value in raw.items():
        name = str(key).replace("-", "_")
        if name not in _FIELD_NAMES:
            raise ConfigurationError(f"unknown config key: {key}")
        kwargs[name] = value
    for required in ("task", "path"):
        if required not in kwargs:
            raise ConfigurationError(f"missing required config key: {required}")
    try:
        return TaskConfig(**kwargs)
    except TypeError as e:
        raise ConfigurationError(str(e)) from e


def load_config(path: str) -> TaskConfig:
    return config_from_dict(load_yaml(path))
