from taskmatch.nlp.tokenize import (
    collapse_whitespace,
    normalize_text,
    tokenize,
    tokenize_and_normalize,
)


def test_tokenize_and_normalize_stems_and_strips_punctuation():
    assert tokenize_and_normalize("Running, Tests!") == ["run", "test"]


def test_tokenize_and_normalize_drops_short_tokens():
    assert tokenize_and_normalize("a to fix it") == ["fix"]


def test_tokenize_and_normalize_deduplicates_in_order():
    assert tokenize_and_normalize("tests testing test") == ["test"]


def test_tokenize_and_normalize_without_stemming():
    assert tokenize_and_normalize("Running Tests", stem=False) == ["running", "tests"]


def test_tokenize_and_normalize_non_string_input():
    assert tokenize_and_normalize(None) == []
    assert tokenize_and_normalize(42) == []
    assert tokenize_and_normalize("") == []


def test_tokenize_keeps_short_tokens():
    assert tokenize("Hi, a b") == ["hi", "a", "b"]
    assert tokenize(None) == []


def test_normalize_text():
    assert normalize_text("Fix: login-bug!!  now") == "fix login bug now"
    assert normalize_text(None) == ""


def test_collapse_whitespace():
    assert collapse_whitespace("  a \t b\n") == "a b"
    assert collapse_whitespace(None) == ""
