"""Rule-based suffix stripping for English task vocabulary."""

from typing import Any

_VOWELS = "aeiou"


def is_consonant(char: str) -> bool:
    """Return True when the character is not an English vowel."""
    return char.lower() not in _VOWELS


def stem_word(word: Any) -> str:
    """Reduce a word to an approximate root form.

    Handles plurals (-ies, -es, -s), verb forms (-ing, -ed) with doubled
    final consonants ("running" -> "run", "stopped" -> "stop") and -ly
    adverbs. No dictionary lookups are performed.

    Returns:
        The stemmed word, "" for None.
    """
    if word is None:
        return ""
    if not isinstance(word, str):
        return str(word)

    word = word.lower()

    if word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith("es"):
        return word[:-2]
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]

    if word.endswith("ing"):
        if len(word) > 4 and word[-4] == word[-5] and is_consonant(word[-4]):
            return word[:-4]
        return word[:-3]

    if word.endswith("ed"):
        if len(word) > 3 and word[-3] == word[-4] and is_consonant(word[-3]):
            return word[:-3]
        return word[:-2]

    if word.endswith("ly"):
        return word[:-2]

    return word


def stem_tokens(tokens: Any) -> list[str]:
    """Stem every token, keeping order."""
    if not isinstance(tokens, (list, tuple)):
        return []
    return [stem_word(token) for token in tokens]
