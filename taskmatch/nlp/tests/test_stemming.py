import pytest

from taskmatch.nlp.stemming import is_consonant, stem_tokens, stem_word


@pytest.mark.parametrize(
    ("word", "expected"),
    [
        ("tasks", "task"),
        ("stories", "story"),
        ("boxes", "box"),
        ("class", "class"),
        ("running", "run"),
        ("testing", "test"),
        ("stopped", "stop"),
        ("fixed", "fix"),
        ("quickly", "quick"),
        ("Fixed", "fix"),
        ("go", "go"),
    ],
)
def test_stem_word(word, expected):
    assert stem_word(word) == expected


def test_stem_word_non_string():
    assert stem_word(None) == ""
    assert stem_word(5) == "5"


def test_is_consonant():
    assert is_consonant("b")
    assert not is_consonant("A")


def test_stem_tokens():
    assert stem_tokens(["bugs", "fixing"]) == ["bug", "fix"]
    assert stem_tokens("bugs") == []
