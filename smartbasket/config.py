from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ._validation import InvalidParameterError, check_min_confidence, check_min_lift, check_min_support

#: Apriori never grows itemsets beyond this size.
MAX_ITEMSET_SIZE = 5


@dataclass(frozen=True)
class ActionableRuleFilter:
    """Stricter post-hoc view over already-mined rules.

    Applied by :func:`smartbasket.filter_actionable_rules`; it never changes
    which rules the miner admits.
    """

    min_confidence: float = 0.5
    min_lift: float = 1.2
    min_leverage: float = 0.01
    max_imbalance_ratio: float = 0.8
    max_antecedent_size: int = 3
    max_consequent_size: int = 2

    def to_dict(self) -> dict[str, Any]:
        return {
            "min_confidence": self.min_confidence,
            "min_lift": self.min_lift,
            "min_leverage": self.min_leverage,
            "max_imbalance_ratio": self.max_imbalance_ratio,
            "max_antecedent_size": self.max_antecedent_size,
            "max_consequent_size": self.max_consequent_size,
        }


@dataclass(frozen=True)
class MiningConfig:
    """Thresholds for one end-to-end mining run.

    ``actionable_filter`` is ``None`` by default: the primary thresholds alone
    decide which rules are returned.  Pass an :class:`ActionableRuleFilter`
    to additionally narrow the returned rules.
    """

    min_support: float = 0.05
    min_confidence: float = 0.4
    min_lift: float = 1.0
    max_len: int = MAX_ITEMSET_SIZE
    actionable_filter: ActionableRuleFilter | None = None

    def validate(self) -> MiningConfig:
        check_min_support(self.min_support)
        check_min_confidence(self.min_confidence)
        check_min_lift(self.min_lift)
        if isinstance(self.max_len, bool) or not isinstance(self.max_len, int) or not 1 <= self.max_len <= MAX_ITEMSET_SIZE:
            raise InvalidParameterError("max_len", self.max_len, f"an integer within `[1, {MAX_ITEMSET_SIZE}]`")
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "min_support": self.min_support,
            "min_confidence": self.min_confidence,
            "min_lift": self.min_lift,
            "max_len": self.max_len,
            "actionable_filter": self.actionable_filter.to_dict() if self.actionable_filter else None,
        }
