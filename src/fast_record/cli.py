"""CLI entrypoint.

Commands:
- `fast-record classifier --path data/cls [options]`
- `fast-record similarity --path data/pairs --with-bool [options]`
- `fast-record tagging --path data/ner --padding-tag O [options]`
- `fast-record build --config configs/classifier.yaml`
- `fast-record inspect data/cls/train.records.ipc --rows 5`

Exit status is 1 when the run fails with a configuration, resource,
malformed-record (strict mode) or write error.
"""

from __future__ import annotations
import argparse
import logging
import os
from typing import Any, Dict, List, Optional

from .config import TaskConfig, config_from_dict, load_config
from .errors import FastRecordError
from .logging_ import setup_logging
from .pipeline.build import build_records
from .run_id import resolve_run_id

log = logging.getLogger("fast_record.cli")

_NON_CONFIG_ARGS = {"cmd", "verbose", "char_level"}


def _separator(value: str) -> str:
    """Accept a literal `\\t` on the command line as a tab."""
    return value.replace("\\t", "\t")


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--path", "-p", "--input", dest="path", required=True, help="dataset directory (train/dev/test.txt) or single file")
    p.add_argument("--output-path", "-o", "--output", dest="output_path", help="output directory (default: input directory)")
    p.add_argument("--with-vocab", action="store_true", help="use a user vocabulary instead of building one")
    p.add_argument("--vocab-file", help="user vocabulary file (default: <path>/vocab.txt)")
    p.add_argument("--max-vocab-size", type=int, default=10000, help="only effective when --with-vocab is not set")
    p.add_argument("--sequence-length", type=int, default=32)
    p.add_argument("--stopwords-file", "--stopwords", dest="stopwords_file", help="only effective when --with-vocab is not set")
    p.add_argument("--unknown", "--unk-token", dest="unknown", default="<UNK>")
    p.add_argument("--padding", "--pad-token", dest="padding", default="<PAD>")
    p.add_argument("--word-sep", type=_separator, default=" ", help="word separator inside a sentence")
    p.add_argument("--char-level", action="store_true", help="one token per character")
    p.add_argument("--with-lang-en", action="store_true", help="word-level tokens split on --word-sep")
    p.add_argument("--format", choices=["ipc", "parquet"], default="ipc")
    p.add_argument("--num-workers", type=int, default=4)
    p.add_argument("--chunk-size", type=int, default=1000)
    p.add_argument("--strict", action="store_true", help="abort on the first malformed line")
    p.add_argument("--run-id")
    p.add_argument("--verbose", "-v", action="store_true")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="fast-record", description="Record builder for NLP tasks")
    sub = p.add_subparsers(dest="cmd", required=True)

    pc = sub.add_parser("classifier", help="text classification dataset")
    _add_common(pc)
    pc.add_argument("--separator", "-s", "--delimiter", dest="separator", type=_separator, default="\t",
                    help="separator between sentence and label")
    pc.add_argument("--with-label-id", action="store_true", help="labels are already integer ids")

    ps = sub.add_parser("similarity", help="text-pair similarity dataset")
    _add_common(ps)
    ps.add_argument("--sent-sep", "--s1", dest="sent_sep", type=_separator, default="\t",
                    help="separator between text_a and text_b")
    ps.add_argument("--label-sep", "--s2", dest="label_sep", type=_separator, default="\t",
                    help="separator between text_b and label")
    ps.add_argument("--with-bool", action="store_true", help="labels are booleans")
    ps.add_argument("--with-label-id", action="store_true", help="labels are already integer ids")

    pt = sub.add_parser("tagging", help="sequence tagging dataset")
    _add_common(pt)
    pt.add_argument("--separator", "-s", "--delimiter", dest="separator", type=_separator, default="\t",
                    help="separator between word and tag")
    pt.add_argument("--padding-tag", help="tag used for padded positions and unseen tags")

    pb = sub.add_parser("build", help="run from a YAML config")
    pb.add_argument("--config", required=True)
    pb.add_argument("--verbose", "-v", action="store_true")

    pi = sub.add_parser("inspect", help="show schema and first rows of a record file")
    pi.add_argument("file")
    pi.add_argument("--rows", "-n", type=int, default=5)
    return p


def config_from_args(args: argparse.Namespace) -> TaskConfig:
    raw: Dict[str, Any] = {k: v for k, v in vars(args).items() if k not in _NON_CONFIG_ARGS}
    raw["task"] = args.cmd
    if args.char_level:
        raw["token_level"] = "char"
    return config_from_dict(raw)


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.cmd == "inspect":
        from .tools.inspect_records import inspect_records
        try:
            inspect_records(args.file, rows=args.rows)
        except (FastRecordError, OSError) as e:
            log.error(f"Cannot inspect {args.file}: {e}")
            return 1
        return 0

    try:
        config = load_config(args.config) if args.cmd == "build" else config_from_args(args)
        config.validate()
        run_id = resolve_run_id(config)
        setup_logging(os.path.join(config.out_dir, "logs"), run_id,
                      level=logging.DEBUG if args.verbose else logging.INFO)
        build_records(config, run_id=run_id)
    except FastRecordError as e:
        log.error(f"{type(e).__name__}: {e}")
        return 1
    return 0
