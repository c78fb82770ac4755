"""Static task vocabulary synonyms and query expansion."""

from typing import Any

from .tokenize import tokenize_and_normalize

SYNONYM_MAP: dict[str, tuple[str, ...]] = {
    # status
    "todo": ("pending", "new", "backlog", "later", "upcoming"),
    "in-progress": ("doing", "working", "ongoing", "active", "current", "wip"),
    "done": ("completed", "finished", "resolved", "closed"),
    # readiness
    "draft": ("planning", "idea", "concept", "proposed"),
    "ready": ("actionable", "prepared", "available", "good-to-go"),
    "blocked": ("stuck", "waiting", "dependent", "halted"),
    # actions
    "create": ("make", "build", "develop", "implement", "add"),
    "update": ("modify", "change", "edit", "revise", "improve"),
    "remove": ("delete", "eliminate", "destroy", "drop", "uninstall"),
    "fix": ("repair", "resolve", "correct", "debug"),
    "review": ("examine", "analyze", "check", "inspect", "audit"),
}


def get_synonyms(word: Any) -> list[str]:
    """Return synonyms for a canonical term or for one of its synonyms."""
    if not isinstance(word, str):
        return []

    word = word.lower()
    if word in SYNONYM_MAP:
        return list(SYNONYM_MAP[word])

    for key, synonyms in SYNONYM_MAP.items():
        if word in synonyms:
            return [key, *(s for s in synonyms if s != word)]
    return []


def expand_with_synonyms(query: Any) -> list[str]:
    """Expand query terms with every related canonical term and synonym."""
    if not isinstance(query, str):
        return []

    tokens = tokenize_and_normalize(query, stem=False)
    expanded = list(tokens)
    for token in tokens:
        for key, synonyms in SYNONYM_MAP.items():
            if token == key or token in synonyms:
                expanded.append(key)
                expanded.extend(synonyms)

    return list(dict.fromkeys(expanded))
