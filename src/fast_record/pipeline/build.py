"""Two-pass record build.

Pass one (vocabulary):
- parse every split (per-line work fanned out over a thread pool)
- count tokens of the vocabulary split per chunk, merge counts in chunk order
- build or load the word vocabulary and the label/tag vocabulary; both are
  frozen before pass two starts

Pass two (encoding):
- encode every parsed sample with the frozen vocabularies; chunk results come
  back in submission order, so records keep input order

Malformed samples are skipped and counted (logged, written to
rejections.jsonl). With `strict`, the first one aborts the run before any
artifact is written.

Outputs (under the output directory):
- <split>.records.<ipc|parquet>, vocab.txt, class.txt / tags.txt
- rejections.jsonl, manifest.json, reports/<run_id>_summary.txt
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar
import logging
import os
import time

from tqdm import tqdm

from .. import __version__
from ..config import TaskConfig
from ..encoder import SequenceEncoder
from ..errors import MalformedRecordError
from ..records.base import Encoders, RecordBuilder
from ..records.registry import make_record_builder
from ..run_id import resolve_run_id
from ..sources.splits import SplitSource, resolve_splits
from ..storage.writer import write_jsonl, write_lines, write_manifest
from ..text.stopwords import StopwordFilter, load_stopwords
from ..vocab.builder import build_vocabulary, count_tokens, load_vocabulary, merge_counts
from ..vocab.vocabulary import Vocabulary
from ..writers.registry import get_record_writer
from .context import Rejection, Sample, SplitResult

log = logging.getLogger("fast_record.build")

T = TypeVar("T")
R = TypeVar("R")


def fan_out(items: Sequence[T], fn: Callable[[Sequence[T]], R], *, workers: int, chunk_size: int, desc: str) -> List[R]:
    """Apply `fn` to consecutive chunks of `items` on a thread pool; results keep chunk order."""
    chunks = [items[i:i + chunk_size] for i in range(0, len(items), chunk_size)]
    if not chunks:
        return []
    with ThreadPoolExecutor(max_workers=workers) as ex:
        return list(tqdm(ex.map(fn, chunks), total=len(chunks), desc=desc, unit="chunk", leave=False))


def build_records(config: TaskConfig, run_id: Optional[str] = None) -> Dict[str, Any]:
    config.validate()
    run_id = run_id or resolve_run_id(config)
    out_dir = config.out_dir
    start_time_ms = int(time.time() * 1000)

    builder = make_record_builder(config)
    writer = get_record_writer(config.format)
    splits = resolve_splits(config.path)
    stopwords = None
    if config.stopwords_file and not config.with_vocab:
        stopwords = load_stopwords(config.stopwords_file)

    log.info(f"Starting run_id={run_id} task={config.task} input={config.path} out_dir={out_dir} "
             f"splits={[s.name for s in splits]}")

    # ---- pass one -------------------------------------------------------
    parsed: Dict[str, List[Any]] = {}
    results: Dict[str, SplitResult] = {}
    for split in splits:
        result, items = _parse_split(builder, split, config)
        results[split.name] = result
        parsed[split.name] = items

    vocab_split = next(s for s in splits if s.builds_vocab)
    vocab = _word_vocabulary(builder, parsed[vocab_split.name], config, stopwords)
    label_vocab, label_source = _label_vocabulary(builder, parsed[vocab_split.name], config)
    encoders = Encoders(SequenceEncoder(vocab, config.sequence_length), label_vocab)

    # ---- pass two -------------------------------------------------------
    for split in splits:
        _encode_split(builder, results[split.name], parsed.pop(split.name), encoders, config)

    # ---- write ----------------------------------------------------------
    for split in splits:
        res = results[split.name]
        res.output_file = writer.write_records(
            builder, res.records, length=config.sequence_length, out_dir=out_dir, split=split.name
        )
        log.info(f"Split {split.name}: samples={res.samples} written={len(res.records)} "
                 f"skipped={res.skipped} -> {res.output_file}")

    outputs: Dict[str, Any] = {s: r.output_file for s, r in results.items()}
    outputs["vocab"] = _save_vocab(os.path.join(out_dir, "vocab.txt"), vocab,
                                   source=config.resolved_vocab_file if config.with_vocab else None)
    if label_vocab is not None:
        outputs["labels"] = _save_vocab(os.path.join(out_dir, builder.label_file), label_vocab,
                                        source=label_source)

    rejections = [r.to_dict() for res in results.values() for r in res.rejections]
    rejections_path = os.path.join(out_dir, "rejections.jsonl")
    write_jsonl(rejections_path, rejections)
    outputs["rejections"] = rejections_path
    total_skipped = len(rejections)
    if total_skipped:
        log.warning(f"Skipped {total_skipped} malformed item(s); see {rejections_path}")

    manifest = {
        "run_id": run_id,
        "version": __version__,
        "task": config.task,
        "start_time_ms": start_time_ms,
        "end_time_ms": int(time.time() * 1000),
        "sequence_length": config.sequence_length,
        "vocab_size": len(vocab),
        "vocab_fingerprint": vocab.fingerprint,
        "label_count": len(label_vocab) if label_vocab is not None else None,
        "total_written_records": sum(len(r.records) for r in results.values()),
        "total_skipped": total_skipped,
        "splits": {
            split.name: {
                **split.metadata(),
                "samples": results[split.name].samples,
                "written": len(results[split.name].records),
                "skipped": results[split.name].skipped,
            }
            for split in splits
        },
        "config": config.to_dict(),
        "outputs": outputs,
    }
    manifest_path = os.path.join(out_dir, "manifest.json")
    write_manifest(manifest_path, manifest)

    from ..tools.summary_report import generate_summary_report
    report_path = generate_summary_report(out_dir, run_id, manifest)
    log.info(f"Summary report: {report_path}")
    log.info(f"Build complete. manifest={manifest_path}")
    return manifest


def _parse_split(builder: RecordBuilder, split: SplitSource, config: TaskConfig):
    samples: List[Sample] = list(builder.iter_samples(split.lines()))
    result = SplitResult(name=split.name, source_file=split.path, samples=len(samples))
    log.info(f"Split {split.name}: {len(samples)} sample(s) from {split.path}")

    def parse_chunk(chunk: Sequence[Sample]) -> List[Any]:
        out: List[Any] = []
        for sample in chunk:
            try:
                out.append(builder.parse(sample))
            except MalformedRecordError as e:
                out.append(Rejection(split.name, e.line_no if e.line_no is not None else sample.line_no, e.reason))
        return out

    items: List[Any] = []
    for chunk_out in fan_out(samples, parse_chunk, workers=config.num_workers,
                             chunk_size=config.chunk_size, desc=f"parse {split.name}"):
        for item in chunk_out:
            if isinstance(item, Rejection):
                _reject(result, item, config)
            else:
                items.append(item)
    return result, items


def _encode_split(builder: RecordBuilder, result: SplitResult, items: List[Any], encoders: Encoders, config: TaskConfig) -> None:
    def encode_chunk(chunk: Sequence[Any]) -> List[Any]:
        out: List[Any] = []
        for item in chunk:
            try:
                out.append(builder.encode(item, encoders))
            except MalformedRecordError as e:
                out.append(Rejection(result.name, e.line_no, e.reason))
        return out

    for chunk_out in fan_out(items, encode_chunk, workers=config.num_workers,
                             chunk_size=config.chunk_size, desc=f"encode {result.name}"):
        for item in chunk_out:
            if isinstance(item, Rejection):
                _reject(result, item, config)
            else:
                result.records.append(item)


def _reject(result: SplitResult, rejection: Rejection, config: TaskConfig) -> None:
    if config.strict:
        raise MalformedRecordError(f"[{rejection.split}] {rejection.reason}", rejection.line_no)
    log.debug(f"Skipped split={rejection.split} line={rejection.line_no}: {rejection.reason}")
    result.rejections.append(rejection)


def _word_vocabulary(builder: RecordBuilder, items: List[Any], config: TaskConfig,
                     stopwords: Optional[StopwordFilter]) -> Vocabulary:
    if config.with_vocab:
        return load_vocabulary(config.resolved_vocab_file, config.padding, config.unknown)
    reserved = (config.padding, config.unknown)

    def count_chunk(chunk: Sequence[Any]):
        return count_tokens((toks for item in chunk for toks in builder.vocab_tokens(item)),
                            stopwords=stopwords, reserved=reserved)

    partials = fan_out(items, count_chunk, workers=config.num_workers,
                       chunk_size=config.chunk_size, desc="count tokens")
    return build_vocabulary(merge_counts(partials), config.max_vocab_size, config.padding, config.unknown)


def _label_vocabulary(builder: RecordBuilder, items: List[Any], config: TaskConfig) -> Tuple[Optional[Vocabulary], Optional[str]]:
    """Label vocabulary plus the file it was loaded from (None when built)."""
    if not builder.uses_label_vocab:
        return None, None
    label_path = os.path.join(config.data_dir, builder.label_file)
    if os.path.isfile(label_path):
        labels = builder.load_label_vocab(label_path)
        log.info(f"Loaded {len(labels)} label(s) from {label_path}")
        return labels, label_path
    labels = builder.make_label_vocab(v for item in items for v in builder.label_values(item))
    log.info(f"Built {len(labels)} label(s) from training data")
    return labels, None


def _save_vocab(path: str, vocab: Vocabulary, source: Optional[str] = None) -> str:
    """Write `vocab` one token per line in id order.

    A file the vocabulary was loaded from is only left alone when its lines
    already are the ids used; otherwise it is rewritten (reserved entries
    added, blanks and duplicates dropped) so it matches the records.
    """
    if source and os.path.abspath(source) == os.path.abspath(path):
        with open(path, "r", encoding="utf-8") as f:
            if [line.rstrip("\r\n") for line in f] == list(vocab.tokens):
                return path
        log.warning(f"Rewriting {path} with the {len(vocab)} entries used for encoding")
    write_lines(path, vocab.tokens)
    return path
