"""Text normalization, similarity scoring and query understanding for tasks."""

from .cache import NlpCache, TTLCache, pair_key
from .classifier import (
    EmbeddingClassifier,
    KeywordClassifier,
    NullClassifier,
    create_classifier,
)
from .config import DEFAULT_MATCH_CONFIG, MatchConfig, load_config
from .distance import fuzzy_score, jaccard_similarity, levenshtein_distance
from .service import MatchService
from .stemming import stem_word
from .synonyms import expand_with_synonyms, get_synonyms
from .tokenize import normalize_text, tokenize, tokenize_and_normalize
from .types import ExtractedSearchFilters, ProcessedQuery, SimilarTask

__all__ = [
    "DEFAULT_MATCH_CONFIG",
    "EmbeddingClassifier",
    "ExtractedSearchFilters",
    "KeywordClassifier",
    "MatchConfig",
    "MatchService",
    "NlpCache",
    "NullClassifier",
    "ProcessedQuery",
    "SimilarTask",
    "TTLCache",
    "create_classifier",
    "expand_with_synonyms",
    "fuzzy_score",
    "get_synonyms",
    "jaccard_similarity",
    "levenshtein_distance",
    "load_config",
    "normalize_text",
    "pair_key",
    "stem_word",
    "tokenize",
    "tokenize_and_normalize",
]
