"""Value objects shared by the miner, the rule generator and the recommender."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

Itemset = tuple[str, ...]


def canonical(items: Iterable[str]) -> Itemset:
    """Return the canonical (deduplicated, lexicographically sorted) form of *items*."""
    return tuple(sorted(set(items)))


@dataclass(frozen=True)
class FrequentItemset:
    """An itemset whose support met the run's ``min_support``.

    ``support == support_count / n_transactions`` for the run that created it.
    """

    items: Itemset
    support: float
    support_count: int

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": list(self.items),
            "support": self.support,
            "supportCount": self.support_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FrequentItemset:
        return cls(
            items=canonical(data["items"]),
            support=float(data["support"]),
            support_count=int(data["supportCount"]),
        )


@dataclass(frozen=True)
class AssociationRule:
    """A fully scored ``antecedent -> consequent`` rule.

    Antecedent and consequent are disjoint, non-empty canonical itemsets whose
    union is the frequent itemset the rule was derived from.  Every metric is
    computed eagerly when the rule is created.
    """

    antecedent: Itemset
    consequent: Itemset
    support: float
    confidence: float
    lift: float
    conviction: float
    leverage: float
    jaccard: float
    cosine: float
    kulczynski: float
    imbalance_ratio: float
    antecedent_support: float = field(default=0.0, compare=False)
    consequent_support: float = field(default=0.0, compare=False)

    @property
    def items(self) -> Itemset:
        """The source itemset (antecedent ∪ consequent)."""
        return canonical(self.antecedent + self.consequent)

    @property
    def quality(self) -> float:
        """Composite ranking score ``confidence * lift``."""
        return self.confidence * self.lift

    def to_dict(self) -> dict[str, Any]:
        return {
            "antecedent": list(self.antecedent),
            "consequent": list(self.consequent),
            "support": self.support,
            "confidence": self.confidence,
            "lift": self.lift,
            "conviction": self.conviction,
            "leverage": self.leverage,
            "jaccard": self.jaccard,
            "cosine": self.cosine,
            "kulczynski": self.kulczynski,
            "imbalanceRatio": self.imbalance_ratio,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AssociationRule:
        support = float(data["support"])
        confidence = float(data["confidence"])
        lift = float(data["lift"])
        # side supports are not serialized; recover them from the ratios
        return cls(
            antecedent=canonical(data["antecedent"]),
            consequent=canonical(data["consequent"]),
            support=support,
            confidence=confidence,
            lift=lift,
            conviction=float(data["conviction"]),
            leverage=float(data["leverage"]),
            jaccard=float(data["jaccard"]),
            cosine=float(data["cosine"]),
            kulczynski=float(data["kulczynski"]),
            imbalance_ratio=float(data["imbalanceRatio"]),
            antecedent_support=support / confidence if confidence else 0.0,
            consequent_support=confidence / lift if lift else 0.0,
        )

    def __str__(self) -> str:
        return (
            f"{' + '.join(self.antecedent)} => {' + '.join(self.consequent)} "
            f"(conf={self.confidence:.3f}, lift={self.lift:.2f}, supp={self.support:.3f})"
        )


@dataclass(frozen=True)
class Recommendation:
    """A candidate next item for a basket, with the rules that justify it."""

    item: str
    score: float
    reasons: tuple[Itemset, ...]
    rules: tuple[AssociationRule, ...]
    confidence: float
    support: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "item": self.item,
            "score": self.score,
            "reasons": [list(r) for r in self.reasons],
            "confidence": self.confidence,
            "support": self.support,
            "rules": [r.to_dict() for r in self.rules],
        }


@dataclass
class MiningStats:
    """Descriptive statistics of a transaction set and of the run that mined it."""

    total_transactions: int
    unique_items: int
    avg_basket_size: float
    min_basket_size: int
    max_basket_size: int
    total_itemsets: int = 0
    mining_time_ms: float = field(default=0.0, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalTransactions": self.total_transactions,
            "uniqueItems": self.unique_items,
            "avgBasketSize": self.avg_basket_size,
            "minBasketSize": self.min_basket_size,
            "maxBasketSize": self.max_basket_size,
            "totalItemsets": self.total_itemsets,
            "miningTimeMs": self.mining_time_ms,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MiningStats:
        return cls(
            total_transactions=int(data["totalTransactions"]),
            unique_items=int(data["uniqueItems"]),
            avg_basket_size=float(data["avgBasketSize"]),
            min_basket_size=int(data["minBasketSize"]),
            max_basket_size=int(data["maxBasketSize"]),
            total_itemsets=int(data["totalItemsets"]),
            mining_time_ms=float(data["miningTimeMs"]),
        )
