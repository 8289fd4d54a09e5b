"""Dataset statistics and rule post-processing for reporting."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from ._types import AssociationRule, MiningStats
from ._validation import valid_transactions
from .config import ActionableRuleFilter


def dataset_stats(transactions: Sequence[Iterable[str]]) -> MiningStats:
    """Descriptive statistics of a transaction set.

    Basket sizes count distinct items.  ``total_itemsets`` and
    ``mining_time_ms`` are left at zero; :func:`smartbasket.run_apriori`
    fills them in.

    Raises
    ------
    EmptyTransactionsError
        If *transactions* is empty (the average would be undefined).
    """
    frozen = valid_transactions(transactions)
    sizes = np.fromiter((len(txn) for txn in frozen), dtype=np.int64, count=len(frozen))
    unique_items = set().union(*frozen)

    return MiningStats(
        total_transactions=len(frozen),
        unique_items=len(unique_items),
        avg_basket_size=float(sizes.mean()),
        min_basket_size=int(sizes.min()),
        max_basket_size=int(sizes.max()),
    )


def filter_actionable_rules(
    rules: Iterable[AssociationRule],
    config: ActionableRuleFilter | None = None,
) -> list[AssociationRule]:
    """Keep only rules strong and compact enough to act on.

    A post-hoc view over mined rules; order is preserved.

    Args:
        rules: Rules from :func:`smartbasket.association_rules`.
        config: Thresholds; defaults to :class:`ActionableRuleFilter()`
                (confidence >= 0.5, lift >= 1.2, leverage >= 0.01,
                imbalance ratio <= 0.8, at most 3 antecedent and 2
                consequent items).
    """
    cfg = config if config is not None else ActionableRuleFilter()
    return [
        rule
        for rule in rules
        if rule.confidence >= cfg.min_confidence
        and rule.lift >= cfg.min_lift
        and rule.leverage >= cfg.min_leverage
        and rule.imbalance_ratio <= cfg.max_imbalance_ratio
        and len(rule.antecedent) <= cfg.max_antecedent_size
        and len(rule.consequent) <= cfg.max_consequent_size
    ]


def find_substitutes(rules: Iterable[AssociationRule], max_lift: float = 0.8) -> list[AssociationRule]:
    """Finds substitute or cannibalizing products using negatively correlated rules.

    If Item A and Item B have high individual support but low co-occurrence
    (lift < 1.0), they likely cannibalize each other.  The rules must have
    been mined with ``min_lift=0`` for such pairs to exist.

    Args:
        rules: Rules from :func:`smartbasket.association_rules`.
        max_lift: Upper bound for lift to be considered a substitute pair.

    Returns:
        Single-item rules sorted by most severe cannibalization (lowest lift).
    """
    substitutes = [
        rule
        for rule in rules
        if len(rule.antecedent) == 1 and len(rule.consequent) == 1 and rule.lift < max_lift
    ]
    return sorted(substitutes, key=lambda r: (r.lift, r.confidence))
