"""Generate summary report after a record build.

Called at the end of build_records() with the run manifest.
"""

from __future__ import annotations
import os
from datetime import datetime
from typing import Any, Dict


def generate_summary_report(out_dir: str, run_id: str, manifest: Dict[str, Any]) -> str:
    """Write reports/<run_id>_summary.txt and return its path."""
    report_path = os.path.join(out_dir, "reports", f"{run_id}_summary.txt")
    os.makedirs(os.path.dirname(report_path), exist_ok=True)
    config = manifest.get("config", {})

    lines = []
    lines.append("=" * 70)
    lines.append("FAST RECORD - RUN SUMMARY REPORT")
    lines.append("=" * 70)
    lines.append("")
    lines.append(f"Run ID: {run_id}")
    lines.append(f"Task: {manifest.get('task', 'N/A')}")
    lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append("")

    lines.append("=" * 70)
    lines.append("VOCABULARY")
    lines.append("=" * 70)
    lines.append("")
    mode = "loaded from " + str(config.get("vocab_file") or "vocab.txt") if config.get("with_vocab") else "built from training split"
    lines.append(f"Mode: {mode}")
    lines.append(f"Size: {manifest.get('vocab_size', 0):,} (max_vocab_size={config.get('max_vocab_size')})")
    lines.append(f"Reserved: padding={config.get('padding')!r} unknown={config.get('unknown')!r}")
    lines.append(f"Fingerprint: {manifest.get('vocab_fingerprint', 'N/A')}")
    if manifest.get("label_count") is not None:
        lines.append(f"Labels: {manifest['label_count']}")
    lines.append(f"Sequence Length: {manifest.get('sequence_length')}")
    lines.append("")

    lines.append("=" * 70)
    lines.append("SPLITS")
    lines.append("=" * 70)
    lines.append("")
    for name, info in manifest.get("splits", {}).items():
        samples = info.get("samples", 0)
        written = info.get("written", 0)
        lines.append(f"Split: {name}")
        lines.append(f"  Input: {info.get('path')} ({info.get('size_bytes', 0):,} bytes)")
        lines.append(f"  Samples: {samples:,}")
        lines.append(f"  Written: {written:,}")
        lines.append(f"  Skipped: {info.get('skipped', 0):,}")
        if samples:
            lines.append(f"  Success Rate: {written / samples * 100:.1f}%")
        else:
            lines.append("  WARNING: no samples read from this split")
        lines.append("")

    total_skipped = manifest.get("total_skipped", 0)
    if total_skipped:
        lines.append(f"Malformed items skipped: {total_skipped:,} (see rejections.jsonl)")
        lines.append("")

    lines.append("=" * 70)
    lines.append("OUTPUT LOCATIONS")
    lines.append("=" * 70)
    lines.append("")
    for key, path in manifest.get("outputs", {}).items():
        lines.append(f"{key}: {path}")
    lines.append("")

    with open(report_path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))

    return report_path
