"""Pluggable text similarity strategies.

Architecture
------------
* ``TextSimilarity``: structural protocol (one method).
* Built-in token-set strategies plus a MinHash estimator.
* A name → factory registry; ``create_similarity_strategy`` resolves the
  algorithm named in an attribute's distance settings.

Strategies return a *distance* (``1 - similarity``) so they plug directly
into attribute aggregation.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from datasketch import MinHash

from recdist.errors import ConfigurationError
from recdist.schema.models import AttributeDistance

__all__ = [
    "TextSimilarity",
    "StrategyFactory",
    "JaccardSimilarity",
    "DiceSimilarity",
    "CosineSimilarity",
    "MinHashSimilarity",
    "tokenize",
    "register_similarity_strategy",
    "available_strategies",
    "create_similarity_strategy",
]

MINHASH_NUM_PERM = 128
MINHASH_SEED = 1


@runtime_checkable
class TextSimilarity(Protocol):
    """Anything that can score the distance between two text values."""

    def distance(self, text_a: str, text_b: str) -> float:
        """Return a distance in [0, 1] (0 = identical)."""
        ...


StrategyFactory = Callable[[AttributeDistance], TextSimilarity]


def tokenize(text: str) -> list[str]:
    """Lower-case and split on whitespace."""
    return text.lower().split()


class JaccardSimilarity:
    """Token-set Jaccard distance.

    Two empty values are treated as identical.
    """

    def distance(self, text_a: str, text_b: str) -> float:
        set_a = set(tokenize(text_a))
        set_b = set(tokenize(text_b))
        if not set_a and not set_b:
            return 0.0
        return 1.0 - len(set_a & set_b) / len(set_a | set_b)


class DiceSimilarity:
    """Token-set Sørensen–Dice distance."""

    def distance(self, text_a: str, text_b: str) -> float:
        set_a = set(tokenize(text_a))
        set_b = set(tokenize(text_b))
        if not set_a and not set_b:
            return 0.0
        return 1.0 - 2 * len(set_a & set_b) / (len(set_a) + len(set_b))


class CosineSimilarity:
    """Cosine distance over token-frequency vectors."""

    def distance(self, text_a: str, text_b: str) -> float:
        vec_a = Counter(tokenize(text_a))
        vec_b = Counter(tokenize(text_b))
        if not vec_a and not vec_b:
            return 0.0
        if not vec_a or not vec_b:
            return 1.0

        dot = sum(count * vec_b[token] for token, count in vec_a.items())
        norm_a = math.sqrt(sum(c * c for c in vec_a.values()))
        norm_b = math.sqrt(sum(c * c for c in vec_b.values()))
        # Clamp rounding noise so identical vectors give exactly 0
        return max(0.0, 1.0 - dot / (norm_a * norm_b))


class MinHashSimilarity:
    """Jaccard distance estimated from MinHash signatures.

    Attributes
    ----------
    num_perm : int
        Number of MinHash permutations.
    seed : int
        Hash seed, fixed for reproducibility.
    """

    def __init__(self, num_perm: int = MINHASH_NUM_PERM, seed: int = MINHASH_SEED) -> None:
        if num_perm <= 0:
            raise ConfigurationError(f"num_perm must be positive, got {num_perm}")
        self.num_perm = num_perm
        self.seed = seed

    def _signature(self, tokens: set[str]) -> MinHash:
        mh = MinHash(num_perm=self.num_perm, seed=self.seed)
        for token in tokens:
            mh.update(token.encode("utf-8"))
        return mh

    def distance(self, text_a: str, text_b: str) -> float:
        set_a = set(tokenize(text_a))
        set_b = set(tokenize(text_b))
        if set_a == set_b:
            return 0.0
        if not set_a or not set_b:
            return 1.0
        return 1.0 - self._signature(set_a).jaccard(self._signature(set_b))


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


def _minhash_factory(attr_dist: AttributeDistance) -> TextSimilarity:
    return MinHashSimilarity(
        num_perm=int(attr_dist.params.get("num_perm", MINHASH_NUM_PERM)),
        seed=int(attr_dist.params.get("seed", MINHASH_SEED)),
    )


_STRATEGY_REGISTRY: dict[str, StrategyFactory] = {
    "jaccard": lambda _: JaccardSimilarity(),
    "dice": lambda _: DiceSimilarity(),
    "cosine": lambda _: CosineSimilarity(),
    "minhash": _minhash_factory,
}


def register_similarity_strategy(name: str, factory: StrategyFactory) -> None:
    """Register (or replace) a strategy factory under ``name``."""
    _STRATEGY_REGISTRY[name] = factory


def available_strategies() -> tuple[str, ...]:
    """Names of all registered strategies, sorted."""
    return tuple(sorted(_STRATEGY_REGISTRY))


def create_similarity_strategy(attr_dist: AttributeDistance) -> TextSimilarity:
    """Instantiate the strategy named by ``attr_dist.algorithm``.

    Parameters
    ----------
    attr_dist : AttributeDistance
        Distance settings of a text attribute.

    Returns
    -------
    TextSimilarity
        Newly constructed strategy.

    Raises
    ------
    ConfigurationError
        If no algorithm is set or the name is not registered.
    """
    name = attr_dist.algorithm
    if name is None:
        raise ConfigurationError(
            "Text attribute has no similarity algorithm", ordinal=attr_dist.ordinal
        )

    factory = _STRATEGY_REGISTRY.get(name)
    if factory is None:
        available = ", ".join(available_strategies())
        raise ConfigurationError(
            f"Unknown text similarity algorithm: {name}. Available: {available}",
            ordinal=attr_dist.ordinal,
        )
    return factory(attr_dist)
