from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from itertools import combinations
from typing import TYPE_CHECKING, Any

from ._types import AssociationRule, FrequentItemset, Itemset, canonical
from ._validation import (
    InvalidParameterError,
    InvariantViolationError,
    check_min_confidence,
    check_min_lift,
    valid_transactions,
)
from .support import SupportCounter

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)

#: Stand-in for the infinite conviction of a rule with confidence exactly 1.
CONVICTION_CAP = 999.0

_ALL_METRICS = [
    "antecedent support",
    "consequent support",
    "support",
    "confidence",
    "lift",
    "conviction",
    "leverage",
    "jaccard",
    "cosine",
    "kulczynski",
    "imbalance_ratio",
]


def association_rules(
    frequent_itemsets: Sequence[FrequentItemset] | pd.DataFrame,
    min_confidence: float = 0.4,
    transactions: Sequence[Iterable[str]] | None = None,
    min_lift: float = 1.0,
    counter: SupportCounter | None = None,
) -> list[AssociationRule]:
    """Generate scored association rules from frequent itemsets.

    Every frequent itemset with at least two items is split into each
    non-empty proper subset (antecedent) and its complement (consequent),
    giving ``2**k - 2`` candidate rules for a ``k``-itemset.

    Parameters
    ----------
    frequent_itemsets:
        Output of :func:`smartbasket.apriori`, or a DataFrame with
        ``itemsets`` and ``support`` columns.
    min_confidence:
        Minimum confidence in ``[0, 1]``.
    transactions:
        The baskets the itemsets were mined from.  Used to count antecedent
        and consequent support.  May be omitted when *counter* is given.
    min_lift:
        Minimum lift (``>= 0``).  Rules must satisfy both thresholds.
    counter:
        Support cache of the mining run, to reuse its counts.  A fresh
        counter over *transactions* is built when omitted.

    Returns
    -------
    list[AssociationRule]
        Rules sorted by ``confidence * lift`` descending; ties keep
        generation order.

    Raises
    ------
    InvalidParameterError
        If a threshold is out of range, or neither *transactions* nor
        *counter* is given.
    InvariantViolationError
        If an antecedent or consequent has zero support, or less support
        than the itemset itself.  Neither can happen for itemsets mined from
        the same transactions.
    """
    min_confidence = check_min_confidence(min_confidence)
    min_lift = check_min_lift(min_lift)

    if counter is None:
        if transactions is None:
            raise InvalidParameterError("transactions", None, "the mined transactions when no `counter` is given")
        counter = SupportCounter(valid_transactions(transactions))

    if hasattr(frequent_itemsets, "columns"):
        frequent_itemsets = _itemsets_from_frame(frequent_itemsets, counter.n_transactions)

    rules: list[AssociationRule] = []
    n_candidates = 0
    for fi in frequent_itemsets:
        items = fi.items
        if len(items) < 2:
            continue
        for size in range(1, len(items)):
            for antecedent in combinations(items, size):
                consequent = tuple(item for item in items if item not in antecedent)
                n_candidates += 1
                rule = _score_rule(antecedent, consequent, fi.support, counter)
                if rule.confidence >= min_confidence and rule.lift >= min_lift:
                    rules.append(rule)

    rules.sort(key=lambda r: r.confidence * r.lift, reverse=True)
    logger.debug("kept %d of %d candidate rules", len(rules), n_candidates)
    return rules


def rule_metrics(support_xy: float, support_x: float, support_y: float) -> dict[str, float]:
    """All rule metrics from the supports of ``X ∪ Y``, ``X`` and ``Y``."""
    if support_x <= 0.0 or support_y <= 0.0:
        raise InvariantViolationError(
            f"Rule sides must have positive support, got antecedent={support_x}, consequent={support_y}."
        )
    if support_xy > min(support_x, support_y) + 1e-12:
        raise InvariantViolationError(
            f"Itemset support {support_xy} exceeds the support of one of its sides "
            f"(antecedent={support_x}, consequent={support_y}); supports must come from the same transactions."
        )

    confidence = support_xy / support_x
    reverse_confidence = support_xy / support_y
    union = support_x + support_y - support_xy

    if confidence == 1.0:
        conviction = CONVICTION_CAP
    else:
        conviction = (1.0 - support_y) / (1.0 - confidence)

    return {
        "confidence": confidence,
        "lift": confidence / support_y,
        "conviction": conviction,
        "leverage": support_xy - support_x * support_y,
        "jaccard": support_xy / union,
        "cosine": support_xy / math.sqrt(support_x * support_y),
        "kulczynski": (confidence + reverse_confidence) / 2.0,
        "imbalance_ratio": abs(support_x - support_y) / union,
    }


def _score_rule(
    antecedent: Itemset,
    consequent: Itemset,
    support_xy: float,
    counter: SupportCounter,
) -> AssociationRule:
    support_x = counter.support(antecedent).support
    support_y = counter.support(consequent).support
    metrics = rule_metrics(support_xy, support_x, support_y)
    return AssociationRule(
        antecedent=antecedent,
        consequent=consequent,
        support=support_xy,
        antecedent_support=support_x,
        consequent_support=support_y,
        **metrics,
    )


def _itemsets_from_frame(df: pd.DataFrame, n_transactions: int) -> list[FrequentItemset]:
    if "support" not in df.columns:
        raise ValueError("The input DataFrame must contain a 'support' column")
    if "itemsets" not in df.columns:
        raise ValueError("The input DataFrame must contain an 'itemsets' column")

    counts: Any = df["support_count"] if "support_count" in df.columns else None
    itemsets = []
    for i, (items, support) in enumerate(zip(df["itemsets"], df["support"].astype(float))):
        count = int(counts.iloc[i]) if counts is not None else round(support * n_transactions)
        itemsets.append(FrequentItemset(canonical(items), float(support), count))
    return itemsets
