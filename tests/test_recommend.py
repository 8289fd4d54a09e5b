import json

import pandas as pd
import pytest

from conftest import make_rule
from smartbasket import (
    InvalidParameterError,
    MalformedTransactionError,
    Recommender,
    apriori,
    association_rules,
    make_supermarket_transactions,
    recommend,
    rule_score,
)


def test_single_rule_score():
    rule = make_rule(("milk",), ("bread",), confidence=0.6, lift=1.2, kulczynski=0.65)
    recs = recommend(["milk"], [rule])

    assert len(recs) == 1
    assert recs[0].item == "bread"
    assert recs[0].score == pytest.approx(0.6 * 1.2 * 0.65 / 3)
    assert recs[0].score == pytest.approx(0.156)
    assert recs[0].reasons == (("milk",),)
    assert recs[0].rules == (rule,)
    assert recs[0].confidence == 0.6


def test_max_score_and_union_of_reasons():
    r1 = make_rule(("a",), ("c",), confidence=0.5, lift=2.0, kulczynski=0.6, support=0.2)
    r2 = make_rule(("b",), ("c",), confidence=0.9, lift=2.0, kulczynski=0.9, support=0.1)
    r3 = make_rule(("a", "b"), ("c", "d"), confidence=0.4, lift=1.5, kulczynski=0.5, support=0.05)
    r4 = make_rule(("a",), ("b",), confidence=0.99, lift=5.0, kulczynski=0.99)

    recs = recommend(["a", "b"], [r1, r2, r3, r4])

    assert [rec.item for rec in recs] == ["c", "d"]
    c, d = recs
    assert c.score == pytest.approx(rule_score(r2))
    assert c.reasons == (("a",), ("b",), ("a", "b"))
    assert c.rules == (r1, r2, r3)
    assert c.confidence == 0.9
    assert c.support == 0.2
    assert d.score == pytest.approx(0.4 * 1.5 * 0.5 / 3)
    assert d.reasons == (("a", "b"),)


def test_duplicate_reasons_are_collapsed():
    r1 = make_rule(("a",), ("c",), confidence=0.5, lift=2.0, kulczynski=0.6)
    r2 = make_rule(("a",), ("b", "c"), confidence=0.4, lift=2.0, kulczynski=0.6)
    recs = {rec.item: rec for rec in recommend(["a"], [r1, r2])}
    assert recs["c"].reasons == (("a",),)
    assert len(recs["c"].rules) == 2


def test_rule_needs_whole_antecedent():
    rule = make_rule(("a", "b"), ("c",), confidence=0.9, lift=2.0, kulczynski=0.9)
    assert recommend(["a"], [rule]) == []


def test_top_n():
    rules = [make_rule(("a",), (f"x{i}",), confidence=0.1 * (i + 1), lift=1.0, kulczynski=0.5) for i in range(8)]
    recs = recommend(["a"], rules, top_n=3)
    assert [rec.item for rec in recs] == ["x7", "x6", "x5"]
    assert recommend(["a"], rules, top_n=0) == []


def test_empty_basket_or_rules():
    rule = make_rule(("a",), ("b",), confidence=0.5, lift=1.0, kulczynski=0.5)
    assert recommend([], [rule]) == []
    assert recommend(None, [rule]) == []
    assert recommend(["a"], []) == []


def test_never_recommends_basket_items():
    baskets = make_supermarket_transactions(600, seed=9)
    rules = association_rules(apriori(baskets, min_support=0.03), 0.3, baskets)
    for basket in baskets[:50]:
        for rec in recommend(basket, rules, top_n=10):
            assert rec.item not in basket
            assert all(set(reason) <= set(basket) for reason in rec.reasons)


def test_invalid_arguments():
    rule = make_rule(("a",), ("b",), confidence=0.5, lift=1.0, kulczynski=0.5)
    with pytest.raises(InvalidParameterError):
        recommend(["a"], [rule], top_n=-1)
    with pytest.raises(MalformedTransactionError):
        recommend("a", [rule])


class TestRecommender:
    def test_recommend_for_cart(self):
        rules = [
            make_rule(("0",), ("1",), confidence=0.8, lift=2.0, kulczynski=0.8),
            make_rule(("0", "1"), ("2", "3"), confidence=0.9, lift=5.0, kulczynski=0.9),
            make_rule(("2",), ("0",), confidence=0.5, lift=1.5, kulczynski=0.5),
        ]
        rec = Recommender(rules)

        assert rec.recommend_for_cart(["0"], n=2) == ["1"]
        # the (0, 1) rule scores highest; "1" is already in the cart
        assert rec.recommend_for_cart(["0", "1"], n=5) == ["2", "3"]

    def test_missing_rules(self):
        with pytest.raises(ValueError):
            Recommender().recommend_for_cart(["a"])

    def test_recommend_for_carts(self):
        rules = [make_rule(("a",), ("b",), confidence=0.8, lift=2.0, kulczynski=0.8)]
        df = Recommender(rules).recommend_for_carts([["a"], ["b"]])
        assert isinstance(df, pd.DataFrame)
        assert list(df["recommended_items"]) == [["b"], []]


def test_recommendation_to_dict(grocery):
    rules = association_rules(apriori(grocery, min_support=0.5), 0.4, grocery)
    (rec,) = recommend(["butter"], rules)
    payload = json.loads(json.dumps(rec.to_dict()))

    assert set(payload) == {"item", "score", "reasons", "confidence", "support", "rules"}
    assert payload["item"] == "bread"
    assert payload["reasons"] == [["butter"]]
    assert payload["confidence"] == 1.0
    assert payload["support"] == 0.5
    assert payload["score"] == pytest.approx(rec.score)
    assert payload["rules"] == [rules[0].to_dict()]
    assert payload["rules"][0]["antecedent"] == ["butter"]
