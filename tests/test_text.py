import pytest

from fast_record.errors import MissingResourceError
from fast_record.text import StopwordFilter, Tokenizer, load_stopwords, split_fields, split_tokens


def test_split_tokens_keeps_empty_pieces():
    assert split_tokens("a  b", " ") == ["a", "", "b"]
    assert split_tokens(" a", " ") == ["", "a"]


def test_split_tokens_empty_text_has_no_tokens():
    assert split_tokens("", " ") == []


def test_split_tokens_is_literal_not_regex():
    assert split_tokens("a.b|c", ".") == ["a", "b|c"]
    assert split_tokens("a||b||c", "||") == ["a", "b", "c"]


def test_split_fields_ignores_line_ending():
    assert split_fields("hello world\tpos\n", "\t") == ["hello world", "pos"]
    assert split_fields("a\tb\tc", "\t", 1) == ["a", "b\tc"]


def test_tokenizer_word_and_char_levels():
    assert Tokenizer(" ", "word").tokenize("我 爱 中国") == ["我", "爱", "中国"]
    assert Tokenizer(" ", "char").tokenize("中国") == ["中", "国"]
    assert Tokenizer(",", "word")("x,y") == ["x", "y"]


def test_stopword_filter():
    sw = StopwordFilter(["the", "a"])
    assert sw.filter(["the", "cat", "a", "dog"]) == ["cat", "dog"]
    assert "the" in sw
    assert StopwordFilter().filter(["the"]) == ["the"]


def test_load_stopwords(tmp_path):
    path = tmp_path / "stop.txt"
    path.write_text("the\n\nof\r\n", encoding="utf-8")
    sw = load_stopwords(str(path))
    assert len(sw) == 2
    assert "of" in sw


def test_load_stopwords_missing(tmp_path):
    with pytest.raises(MissingResourceError):
        load_stopwords(str(tmp_path / "nope.txt"))
