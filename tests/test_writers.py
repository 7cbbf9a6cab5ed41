import os

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from fast_record.config import TaskConfig
from fast_record.errors import ConfigurationError, RecordWriteError
from fast_record.records import ClassificationRecord, make_record_builder
from fast_record.storage import atomic_output, write_lines
from fast_record.writers import get_record_writer, read_records


def _records(n):
    return [ClassificationRecord(word_ids=[i + 2, 1, 0], label=i % 2) for i in range(n)]


@pytest.mark.parametrize("fmt", ["ipc", "parquet"])
def test_write_and_read_back(tmp_path, fmt):
    builder = make_record_builder(TaskConfig(task="classifier", path=".", sequence_length=3))
    writer = get_record_writer(fmt)
    path = writer.write_records(builder, _records(250), length=3, out_dir=str(tmp_path), split="train")
    assert path == os.path.join(str(tmp_path), f"train.records.{fmt}")

    table = read_records(path)
    assert table.num_rows == 250
    assert table.schema.field("word_0").type == pa.uint32()
    assert table.schema.field("class").type == pa.int32()
    assert table.column("word_0").to_pylist()[:3] == [2, 3, 4]
    assert table.column("class").to_pylist()[:3] == [0, 1, 0]
    assert table.schema.metadata[b"task"] == b"classifier"


def test_ipc_writes_batches_of_100(tmp_path):
    builder = make_record_builder(TaskConfig(task="classifier", path=".", sequence_length=3))
    path = get_record_writer("ipc").write_records(builder, _records(250), length=3, out_dir=str(tmp_path), split="dev")
    with pa.OSFile(path, "rb") as source:
        assert pa.ipc.open_file(source).num_record_batches == 3


def test_failed_write_leaves_no_artifact(tmp_path, monkeypatch):
    def boom(table, where, **kwargs):
        with open(where, "wb") as f:
            f.write(b"partial")
        raise OSError("disk full")

    monkeypatch.setattr(pq, "write_table", boom)
    builder = make_record_builder(TaskConfig(task="classifier", path=".", sequence_length=3))
    with pytest.raises(RecordWriteError):
        get_record_writer("parquet").write_records(builder, _records(5), length=3, out_dir=str(tmp_path), split="train")
    assert os.listdir(tmp_path) == []


def test_atomic_output_keeps_old_file_on_error(tmp_path):
    target = tmp_path / "vocab.txt"
    target.write_text("old\n", encoding="utf-8")
    with pytest.raises(RuntimeError):
        with atomic_output(str(target)) as tmp:
            with open(tmp, "w", encoding="utf-8") as f:
                f.write("new\n")
            raise RuntimeError("interrupted")
    assert target.read_text(encoding="utf-8") == "old\n"
    assert os.listdir(tmp_path) == ["vocab.txt"]


def test_invalid_output_directory(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(RecordWriteError):
        write_lines(str(blocker / "vocab.txt"), ["a"])


def test_unknown_format():
    with pytest.raises(ConfigurationError):
        get_record_writer("csv")
    with pytest.raises(ConfigurationError):
        read_records("records.csv")
