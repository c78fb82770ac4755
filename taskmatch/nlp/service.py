"""Cached matching service used by search, similar-task and dedup workflows."""

from collections.abc import Sequence
import logging
from typing import Any

from ..dedup.clusterer import DuplicateGroup, find_duplicate_groups
from ..tasks import task_id, task_search_text, task_title
from .bulk import bulk_calculate_similarity, length_ratio
from .cache import NlpCache
from .classifier import Classifier, QueryEmbedder, create_classifier
from .config import DEFAULT_MATCH_CONFIG, MatchConfig
from .distance import jaccard_similarity
from .fuzzy import combine_search_results, fuzzy_search
from .processor import (
    RuleStemmer,
    RuleTokenizer,
    Stemmer,
    Tokenizer,
    calculate_similarity,
    extract_search_filters,
    process_query,
)
from .profiler import Profiler
from .tokenize import fold_text
from .types import ExtractedSearchFilters, ProcessedQuery, SimilarTask

log = logging.getLogger(__name__)


class MatchService:
    """Similarity, query understanding and duplicate detection over tasks.

    Owns its caches and profiler; nothing is shared between instances.
    """

    def __init__(
        self,
        config: MatchConfig = DEFAULT_MATCH_CONFIG,
        *,
        classifier: Classifier | None = None,
        embedder: QueryEmbedder | None = None,
        cache: NlpCache | None = None,
        profiler: Profiler | None = None,
        tokenizer: Tokenizer | None = None,
        stemmer: Stemmer | None = None,
    ):
        self.config = config.validate()
        self.classifier = classifier or create_classifier(
            config.classifier, embedder=embedder, model=config.embedding_model
        )
        self.cache = cache or NlpCache(
            config.cache_ttl,
            config.cache_capacity,
            eviction_fraction=config.eviction_fraction,
        )
        self.profiler = profiler or Profiler(enabled=config.profiling)
        self.tokenizer = tokenizer or RuleTokenizer()
        self.stemmer = stemmer or RuleStemmer()
        log.debug(f"MatchService ready with {type(self.classifier).__name__}")

    async def process_query(self, query: str) -> ProcessedQuery:
        """Normalize and classify a query, reusing cached results."""
        cached = self.cache.get_processed_query(query)
        if cached is not None:
            return cached

        with self.profiler.profile("processQuery"):
            processed = await process_query(
                query,
                self.classifier,
                self.tokenizer,
                self.stemmer,
                locale=self.config.locale,
                timeout=self.config.classifier_timeout,
            )
        self.cache.set_processed_query(query, processed)
        return processed

    async def get_similarity(self, text1: str, text2: str) -> float:
        """Similarity of two texts in [0, 1], symmetric and cached."""
        cached = self.cache.get_similarity(text1, text2)
        if cached is not None:
            return cached

        norm1 = fold_text(text1)
        norm2 = fold_text(text2)
        if not norm1 or not norm2:
            return 0.0
        if norm1 == norm2:
            return 1.0

        config = self.config
        ratio = length_ratio(norm1, norm2)
        if ratio < config.length_ratio_gate:
            score = ratio * config.length_ratio_penalty
            self.cache.set_similarity(text1, text2, score)
            return score

        if len(norm1) < config.short_text_length and len(norm2) < config.short_text_length:
            with self.profiler.profile("tokenJaccard"):
                token_score = jaccard_similarity(
                    self.tokenizer.tokenize(norm1), self.tokenizer.tokenize(norm2)
                )
            if token_score < config.min_token_jaccard:
                self.cache.set_similarity(text1, text2, token_score)
                return token_score

        with self.profiler.profile("fullSimilarityCalculation"):
            score = await calculate_similarity(
                norm1,
                norm2,
                self.tokenizer,
                self.stemmer,
                self.classifier,
                locale=config.locale,
                timeout=config.classifier_timeout,
                config=config,
            )
        self.cache.set_similarity(text1, text2, score)
        return score

    async def bulk_get_similarity(
        self,
        target: str,
        texts: Sequence[str],
        threshold: float = 0.3,
    ) -> list[tuple[int, float]]:
        """(index, score) pairs for texts at or above ``threshold``, best first."""
        with self.profiler.profile("bulkSimilarity"):
            return await bulk_calculate_similarity(
                target,
                texts,
                threshold,
                similarity=self.get_similarity,
                cache=self.cache,
                config=self.config,
            )

    async def find_similar_tasks(
        self,
        tasks: Sequence[Any],
        title: str,
        threshold: float | None = None,
        use_fuzzy: bool = True,
    ) -> list[SimilarTask]:
        """Tasks similar to ``title``, best first, one entry per task."""
        if not tasks:
            return []
        if threshold is None:
            threshold = self.config.similar_threshold

        texts = [task_search_text(task) for task in tasks]
        scored = await self.bulk_get_similarity(
            title, texts, threshold * self.config.prefilter_factor
        )
        nlp_results = [
            SimilarTask(id=task_id(tasks[index]), title=task_title(tasks[index]), similarity=score)
            for index, score in scored
            if score >= threshold
        ]
        if not use_fuzzy:
            return nlp_results

        with self.profiler.profile("fuzzySearch"):
            fuzzy_results = fuzzy_search(tasks, title, self.config.fuzzy_threshold(threshold))
        return combine_search_results(nlp_results, fuzzy_results, self.config.nlp_weight)

    async def extract_search_filters(self, query: str) -> ExtractedSearchFilters:
        """Structured filters for a natural-language search query, cached."""
        cached = self.cache.get_filters(query)
        if cached is not None:
            return cached

        with self.profiler.profile("extractSearchFilters"):
            filters = await extract_search_filters(
                query,
                self.classifier,
                self.tokenizer,
                self.stemmer,
                locale=self.config.locale,
                timeout=self.config.classifier_timeout,
            )
        self.cache.set_filters(query, filters)
        return filters

    async def find_duplicate_groups(
        self,
        tasks: Sequence[Any],
        threshold: float | None = None,
        strategy: str | None = None,
    ) -> list[DuplicateGroup]:
        """Partition tasks into groups of likely duplicates."""
        with self.profiler.profile("findDuplicateGroups"):
            return await find_duplicate_groups(
                tasks,
                self.get_similarity,
                self.config.duplicate_threshold if threshold is None else threshold,
                strategy=strategy or self.config.cluster_strategy,
            )

    def cache_stats(self) -> dict[str, int]:
        return self.cache.stats()

    def clear_cache(self, kind: str | None = None) -> None:
        self.cache.clear(kind)
