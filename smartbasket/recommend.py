"""Basket-level recommendations from association rules."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from ._types import AssociationRule, Itemset, Recommendation
from ._validation import check_top_n, valid_basket

if TYPE_CHECKING:
    import pandas as pd


def rule_score(rule: AssociationRule) -> float:
    """Composite heuristic ``(confidence * lift * kulczynski) / 3``."""
    return (rule.confidence * rule.lift * rule.kulczynski) / 3.0


def recommend(
    basket: Iterable[str] | None,
    rules: Sequence[AssociationRule],
    top_n: int = 5,
) -> list[Recommendation]:
    """Rank the next items for *basket* from the rules it triggers.

    A rule applies when its whole antecedent is in the basket.  Each
    consequent item not already in the basket is scored with
    :func:`rule_score`; an item reached by several rules keeps the maximum
    score and the union of their antecedents as reasons.

    Parameters
    ----------
    basket:
        Items currently in the cart.
    rules:
        Association rules, e.g. from :func:`smartbasket.association_rules`.
    top_n:
        Maximum number of recommendations to return.

    Returns
    -------
    list[Recommendation]
        Best score first.  Empty when the basket or the rule list is empty.
    """
    top_n = check_top_n(top_n)
    cart = valid_basket(basket)
    if not cart or not rules:
        return []

    scores: dict[str, float] = {}
    reasons: dict[str, list[Itemset]] = {}
    contributing: dict[str, list[AssociationRule]] = {}

    for rule in rules:
        if not cart.issuperset(rule.antecedent):
            continue
        score = rule_score(rule)
        for item in rule.consequent:
            if item in cart:
                continue
            if item not in scores:
                scores[item] = score
                reasons[item] = [rule.antecedent]
                contributing[item] = [rule]
            else:
                scores[item] = max(scores[item], score)
                if rule.antecedent not in reasons[item]:
                    reasons[item].append(rule.antecedent)
                contributing[item].append(rule)

    ranked = sorted(scores, key=lambda item: scores[item], reverse=True)[:top_n]
    return [
        Recommendation(
            item=item,
            score=scores[item],
            reasons=tuple(reasons[item]),
            rules=tuple(contributing[item]),
            confidence=max(r.confidence for r in contributing[item]),
            support=max(r.support for r in contributing[item]),
        )
        for item in ranked
    ]


class Recommender:
    """Cart recommender over a fixed rule set.

    Parameters
    ----------
    rules:
        Association rules to score carts against.
    """

    def __init__(self, rules: Sequence[AssociationRule] | None = None) -> None:
        self.rules = list(rules) if rules is not None else None

    def recommend(self, cart_items: Iterable[str], n: int = 5) -> list[Recommendation]:
        if self.rules is None:
            raise ValueError("Association rules are not provided to the Recommender.")
        return recommend(cart_items, self.rules, top_n=n)

    def recommend_for_cart(self, cart_items: Iterable[str], n: int = 5) -> list[str]:
        """Suggest items to add to an active cart using association rules."""
        return [rec.item for rec in self.recommend(cart_items, n)]

    def recommend_for_carts(self, carts: Iterable[Iterable[str]], n: int = 5) -> pd.DataFrame:
        """Batch-rank the next best items for every cart in *carts*."""
        import pandas as pd

        recs = [{"cart": sorted(set(cart)), "recommended_items": self.recommend_for_cart(cart, n)} for cart in carts]
        return pd.DataFrame(recs, columns=["cart", "recommended_items"])
