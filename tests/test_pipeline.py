import json
import os

import pytest

from fast_record.config import TaskConfig
from fast_record.errors import ConfigurationError, MalformedRecordError, MissingResourceError
from fast_record.pipeline.build import build_records, fan_out
from fast_record.writers import read_records


def _write(path, lines):
    path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")


@pytest.fixture
def cls_dir(tmp_path):
    data = tmp_path / "cls"
    data.mkdir()
    _write(data / "train.txt", ["the cat sat\tpos", "the dog ran\tneg", "", "a bad line", "the cat ran\tpos"])
    _write(data / "dev.txt", ["the bird sat\tneg", "the fox\tneutral"])
    _write(data / "test.txt", ["cat cat cat cat cat\tpos"])
    return data


def test_classifier_end_to_end(cls_dir, tmp_path):
    out = tmp_path / "out"
    cfg = TaskConfig(task="classifier", path=str(cls_dir), output_path=str(out), sequence_length=4,
                     num_workers=2, chunk_size=1, run_id="t1")
    manifest = build_records(cfg)

    vocab = (out / "vocab.txt").read_text(encoding="utf-8").splitlines()
    # ran and cat tie at 2; cat was seen first
    assert vocab == ["<PAD>", "<UNK>", "the", "cat", "ran", "sat", "dog"]
    assert (out / "class.txt").read_text(encoding="utf-8").splitlines() == ["pos", "neg"]

    train = read_records(str(out / "train.records.ipc"))
    assert train.num_rows == 3
    assert [train.column(f"word_{k}").to_pylist()[0] for k in range(4)] == [2, 3, 5, 0]
    assert train.column("class").to_pylist() == [0, 1, 0]

    dev = read_records(str(out / "dev.records.ipc"))
    assert dev.num_rows == 1
    assert [dev.column(f"word_{k}").to_pylist()[0] for k in range(4)] == [2, 1, 5, 0]

    test = read_records(str(out / "test.records.ipc"))
    assert [test.column(f"word_{k}").to_pylist()[0] for k in range(4)] == [3, 3, 3, 3]

    assert manifest["splits"]["train"]["skipped"] == 1
    assert manifest["splits"]["dev"]["skipped"] == 1
    assert manifest["total_skipped"] == 2
    rejections = [json.loads(l) for l in (out / "rejections.jsonl").read_text(encoding="utf-8").splitlines()]
    assert {(r["split"], r["line_no"]) for r in rejections} == {("train", 4), ("dev", 2)}
    assert os.path.isfile(out / "manifest.json")
    assert os.path.isfile(out / "reports" / "t1_summary.txt")


def test_rerun_is_reproducible(cls_dir, tmp_path):
    a = build_records(TaskConfig(task="classifier", path=str(cls_dir), output_path=str(tmp_path / "a"), num_workers=3, chunk_size=1))
    b = build_records(TaskConfig(task="classifier", path=str(cls_dir), output_path=str(tmp_path / "b"), num_workers=1))
    assert a["vocab_fingerprint"] == b["vocab_fingerprint"]


def test_strict_aborts_without_output(cls_dir, tmp_path):
    out = tmp_path / "out"
    cfg = TaskConfig(task="classifier", path=str(cls_dir), output_path=str(out), strict=True)
    with pytest.raises(MalformedRecordError):
        build_records(cfg)
    assert not out.exists()


def test_user_vocabulary_and_stopwords(cls_dir, tmp_path):
    vocab_file = tmp_path / "my_vocab.txt"
    _write(vocab_file, ["cat", "dog"])
    stop = tmp_path / "stop.txt"
    _write(stop, ["cat"])
    out = tmp_path / "out"
    cfg = TaskConfig(task="classifier", path=str(cls_dir), output_path=str(out), sequence_length=2,
                     with_vocab=True, vocab_file=str(vocab_file), stopwords_file=str(stop))
    manifest = build_records(cfg)
    assert manifest["vocab_size"] == 4
    train = read_records(str(out / "train.records.ipc"))
    # stopwords are ignored in load mode: "cat" keeps its user id
    assert train.column("word_1").to_pylist()[0] == 2


def test_stopwords_only_affect_vocabulary(cls_dir, tmp_path):
    stop = tmp_path / "stop.txt"
    _write(stop, ["the"])
    out = tmp_path / "out"
    build_records(TaskConfig(task="classifier", path=str(cls_dir), output_path=str(out),
                             sequence_length=3, stopwords_file=str(stop)))
    vocab = (out / "vocab.txt").read_text(encoding="utf-8").splitlines()
    assert "the" not in vocab
    train = read_records(str(out / "train.records.ipc"))
    assert train.column("word_0").to_pylist()[0] == 1


def test_class_file_sets_label_ids(cls_dir, tmp_path):
    _write(cls_dir / "class.txt", ["neutral", "neg", "pos"])
    out = tmp_path / "out"
    manifest = build_records(TaskConfig(task="classifier", path=str(cls_dir), output_path=str(out)))
    assert read_records(str(out / "train.records.ipc")).column("class").to_pylist() == [2, 1, 2]
    assert manifest["splits"]["dev"]["skipped"] == 0


def test_single_file_input(tmp_path):
    data = tmp_path / "pairs.txt"
    _write(data, ["how are you\thow old are you\t0", "hi\thello\t1"])
    manifest = build_records(TaskConfig(task="similarity", path=str(data), with_bool=True,
                                        sequence_length=3, format="parquet"))
    assert list(manifest["splits"]) == ["pairs"]
    table = read_records(str(tmp_path / "pairs.records.parquet"))
    assert table.column("label").to_pylist() == [False, True]
    assert table.num_columns == 7


def test_tagging_end_to_end(tmp_path):
    data = tmp_path / "ner"
    data.mkdir()
    _write(data / "train.txt", ["北\tB-LOC", "京\tI-LOC", "", "我\tO", "在\tO", "", "坏", "行\tO"])
    _write(data / "test.txt", ["上\tB-LOC", "海\tI-LOC"])
    out = tmp_path / "out"
    manifest = build_records(TaskConfig(task="tagging", path=str(data), output_path=str(out),
                                        sequence_length=4, padding_tag="O"))
    assert (out / "tags.txt").read_text(encoding="utf-8").splitlines() == ["O", "B-LOC", "I-LOC"]
    train = read_records(str(out / "train.records.ipc"))
    assert train.num_rows == 2
    row = train.slice(0, 1).to_pylist()[0]
    assert [row[f"tag_{k}"] for k in range(4)] == [1, 2, 0, 0]
    assert [row[f"word_{k}"] for k in range(4)][2:] == [0, 0]
    assert manifest["splits"]["train"]["skipped"] == 1
    test = read_records(str(out / "test.records.ipc")).slice(0, 1).to_pylist()[0]
    assert [test[f"word_{k}"] for k in range(2)] == [1, 1]


def test_fail_fast_on_bad_config(tmp_path):
    with pytest.raises(MissingResourceError):
        build_records(TaskConfig(task="classifier", path=str(tmp_path / "missing")))
    (tmp_path / "train.txt").write_text("a\tb\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        build_records(TaskConfig(task="classifier", path=str(tmp_path), max_vocab_size=0))
    with pytest.raises(MissingResourceError):
        build_records(TaskConfig(task="classifier", path=str(tmp_path), with_vocab=True))
    assert sorted(os.listdir(tmp_path)) == ["train.txt"]


def test_fan_out_preserves_order():
    out = fan_out(list(range(10)), lambda chunk: [x * 2 for x in chunk], workers=4, chunk_size=3, desc="t")
    assert [x for chunk in out for x in chunk] == [x * 2 for x in range(10)]
    assert fan_out([], len, workers=2, chunk_size=3, desc="t") == []


def test_tag_file_loaded_in_place_is_rewritten_with_padding_tag(tmp_path):
    data = tmp_path / "ner"
    data.mkdir()
    _write(data / "train.txt", ["北\tB-LOC", "京\tI-LOC"])
    _write(data / "tags.txt", ["B-LOC", "I-LOC"])
    build_records(TaskConfig(task="tagging", path=str(data), sequence_length=4, padding_tag="O"))

    tags = (data / "tags.txt").read_text(encoding="utf-8").splitlines()
    assert tags == ["O", "B-LOC", "I-LOC"]
    row = read_records(str(data / "train.records.ipc")).to_pylist()[0]
    assert [tags[row[f"tag_{k}"]] for k in range(4)] == ["B-LOC", "I-LOC", "O", "O"]


def test_user_vocab_loaded_in_place_matches_record_ids(tmp_path):
    data = tmp_path / "cls"
    data.mkdir()
    _write(data / "train.txt", ["good film\tpos"])
    _write(data / "vocab.txt", ["good", "film", "", "good"])
    manifest = build_records(TaskConfig(task="classifier", path=str(data), sequence_length=3, with_vocab=True))

    vocab = (data / "vocab.txt").read_text(encoding="utf-8").splitlines()
    assert vocab == ["<PAD>", "<UNK>", "good", "film"]
    assert manifest["vocab_size"] == len(vocab)
    row = read_records(str(data / "train.records.ipc")).to_pylist()[0]
    assert [vocab[row[f"word_{k}"]] for k in range(3)] == ["good", "film", "<PAD>"]


def test_matching_vocab_file_is_left_untouched(tmp_path):
    data = tmp_path / "cls"
    data.mkdir()
    _write(data / "train.txt", ["good film\tpos"])
    _write(data / "vocab.txt", ["<PAD>", "<UNK>", "good", "film"])
    before = os.stat(data / "vocab.txt").st_mtime_ns
    build_records(TaskConfig(task="classifier", path=str(data), with_vocab=True))
    assert os.stat(data / "vocab.txt").st_mtime_ns == before


def test_out_of_range_label_id_is_skipped(tmp_path):
    data = tmp_path / "cls"
    data.mkdir()
    _write(data / "train.txt", ["bad film\t4294967296", "good film\t1", "odd film\t-1"])
    out = tmp_path / "out"
    manifest = build_records(TaskConfig(task="classifier", path=str(data), output_path=str(out), with_label_id=True))
    assert read_records(str(out / "train.records.ipc")).column("class").to_pylist() == [1]
    assert manifest["splits"]["train"]["skipped"] == 2
    rejections = [json.loads(l) for l in (out / "rejections.jsonl").read_text(encoding="utf-8").splitlines()]
    assert [r["line_no"] for r in rejections] == [1, 3]


def test_similarity_categorical_labels_use_class_file(tmp_path):
    data = tmp_path / "pairs"
    data.mkdir()
    _write(data / "train.txt", ["how are you\thow old are you\tsame", "hi\tbye\tdiff", "yes\tno\tother"])
    _write(data / "class.txt", ["diff", "same"])
    out = tmp_path / "out"
    manifest = build_records(TaskConfig(task="similarity", path=str(data), output_path=str(out), sequence_length=3))
    table = read_records(str(out / "train.records.ipc"))
    assert str(table.schema.field("label").type) == "int32"
    assert table.column("label").to_pylist() == [1, 0]
    assert manifest["splits"]["train"]["skipped"] == 1
    assert (out / "class.txt").read_text(encoding="utf-8").splitlines() == ["diff", "same"]
