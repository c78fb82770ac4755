"""Configuration for similarity scoring, caching and classification."""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from ..errors import ConfigError

CLASSIFIER_KINDS = ("mock", "keyword", "embedding")
CLUSTER_STRATEGIES = ("greedy", "components")

DEFAULT_EMBEDDING_MODEL = "sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2"


@dataclass(frozen=True)
class MatchConfig:
    """Constants controlling similarity scoring and result caching."""

    locale: str = "en"
    classifier: str = "keyword"
    classifier_timeout: float | None = None
    embedding_model: str = DEFAULT_EMBEDDING_MODEL

    cache_ttl: float = 300.0
    cache_capacity: int = 1000
    eviction_fraction: float = 0.2

    length_ratio_gate: float = 0.3
    length_ratio_penalty: float = 0.5
    prefilter_factor: float = 0.7
    accept_first_pass: float = 0.8
    short_text_length: int = 100
    min_token_jaccard: float = 0.1

    intent_weight_with_intents: float = 0.5
    intent_weight_without_intents: float = 0.8

    similar_threshold: float = 0.3
    duplicate_threshold: float = 0.5
    fuzzy_threshold_boost: float = 0.2
    fuzzy_threshold_cap: float = 0.8
    nlp_weight: float = 0.7

    cluster_strategy: str = "greedy"
    profiling: bool = False

    def lexical_weight(self, both_have_intents: bool) -> float:
        """Weight of the lexical score in the blended similarity."""
        if both_have_intents:
            return self.intent_weight_with_intents
        return self.intent_weight_without_intents

    def fuzzy_threshold(self, threshold: float) -> float:
        """Stricter threshold used by the fuzzy pass of similar-task search."""
        return min(threshold + self.fuzzy_threshold_boost, self.fuzzy_threshold_cap)

    def validate(self) -> "MatchConfig":
        """Raise ConfigError if any value is out of range."""
        if self.classifier not in CLASSIFIER_KINDS:
            raise ConfigError(
                f"classifier must be one of {', '.join(CLASSIFIER_KINDS)}, got {self.classifier!r}"
            )
        if self.cluster_strategy not in CLUSTER_STRATEGIES:
            raise ConfigError(
                f"cluster_strategy must be one of {', '.join(CLUSTER_STRATEGIES)}, "
                f"got {self.cluster_strategy!r}"
            )
        if self.cache_ttl <= 0:
            raise ConfigError("cache_ttl must be positive")
        if self.cache_capacity < 1:
            raise ConfigError("cache_capacity must be at least 1")
        if self.classifier_timeout is not None and self.classifier_timeout <= 0:
            raise ConfigError("classifier_timeout must be positive when set")

        for name in (
            "eviction_fraction",
            "length_ratio_gate",
            "length_ratio_penalty",
            "prefilter_factor",
            "accept_first_pass",
            "min_token_jaccard",
            "intent_weight_with_intents",
            "intent_weight_without_intents",
            "similar_threshold",
            "duplicate_threshold",
            "fuzzy_threshold_cap",
            "nlp_weight",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1], got {value}")
        return self


DEFAULT_MATCH_CONFIG = MatchConfig()


def config_from_mapping(
    data: dict[str, Any],
    base: MatchConfig = DEFAULT_MATCH_CONFIG,
) -> MatchConfig:
    """Override known config keys from a mapping."""
    known = {f.name: f for f in fields(MatchConfig)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    overrides: dict[str, Any] = {}
    for key, value in data.items():
        default = getattr(base, key)
        try:
            if isinstance(default, str):
                overrides[key] = str(value)
            elif isinstance(default, bool):
                overrides[key] = bool(value)
            elif isinstance(default, int):
                overrides[key] = int(value)
            elif value is None:
                overrides[key] = None
            else:
                # floats and the optional classifier timeout
                overrides[key] = float(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid value for {key}: {value!r}") from exc

    return replace(base, **overrides).validate()


def load_config(path: Path | str) -> MatchConfig:
    """Load a YAML config file on top of the defaults."""
    config_path = Path(path)
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return config_from_mapping(data)
