"""Tests for the end-to-end run (stats → itemsets → rules) and per-group mining."""

from __future__ import annotations

import json
import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import pandas as pd
import pytest

from smartbasket import (
    ActionableRuleFilter,
    InvalidParameterError,
    MiningCancelledError,
    MiningConfig,
    MiningResult,
    apriori,
    association_rules,
    make_supermarket_transactions,
    mine_grouped,
    rules_grouped,
    run_apriori,
    run_apriori_async,
)
from smartbasket.export import RULE_COLUMNS, rules_to_frame


@pytest.fixture(scope="module")
def baskets() -> list[list[str]]:
    return make_supermarket_transactions(400, seed=21)


# ── run_apriori ───────────────────────────────────────────────────────────


class TestRunApriori:
    def test_matches_individual_steps(self, baskets) -> None:
        result = run_apriori(baskets, min_support=0.04, min_confidence=0.3)
        expected_itemsets = apriori(baskets, min_support=0.04)
        assert result.frequent_itemsets == expected_itemsets
        assert result.association_rules == association_rules(expected_itemsets, 0.3, baskets)

    def test_stats_are_filled_in(self, grocery) -> None:
        result = run_apriori(grocery, min_support=0.5)
        stats = result.stats
        assert stats.total_transactions == 4
        assert stats.unique_items == 4
        assert stats.avg_basket_size == pytest.approx(2.25)
        assert stats.total_itemsets == len(result.frequent_itemsets) == 5
        assert stats.mining_time_ms >= 0.0

    def test_defaults(self, grocery) -> None:
        result = run_apriori(grocery)
        assert result.config == MiningConfig()
        assert result.config.min_support == 0.05

    def test_overrides_beat_config(self, grocery) -> None:
        cfg = MiningConfig(min_support=0.25, min_confidence=0.9)
        result = run_apriori(grocery, min_support=0.5, config=cfg)
        assert result.config.min_support == 0.5
        assert result.config.min_confidence == 0.9
        assert [(r.antecedent, r.consequent) for r in result.association_rules] == [(("butter",), ("bread",))]

    def test_invalid_config(self, grocery) -> None:
        with pytest.raises(InvalidParameterError):
            run_apriori(grocery, config=MiningConfig(max_len=9))
        with pytest.raises(InvalidParameterError):
            run_apriori(grocery, min_confidence=2.0)

    def test_actionable_filter_only_narrows(self, baskets) -> None:
        plain = run_apriori(baskets, min_support=0.04, min_confidence=0.3)
        cfg = MiningConfig(min_support=0.04, min_confidence=0.3, actionable_filter=ActionableRuleFilter())
        filtered = run_apriori(baskets, config=cfg)
        assert filtered.frequent_itemsets == plain.frequent_itemsets
        assert set(filtered.association_rules) <= set(plain.association_rules)
        for rule in filtered.association_rules:
            assert rule.confidence >= 0.5
            assert rule.lift >= 1.2

    def test_json_round_trip(self, grocery) -> None:
        result = run_apriori(grocery, min_support=0.5)
        payload = json.loads(json.dumps(result.to_dict()))
        assert set(payload) == {"frequentItemsets", "associationRules", "stats"}
        assert payload["stats"]["totalTransactions"] == 4
        assert payload["associationRules"][0]["conviction"] == 999.0
        assert MiningResult.from_dict(payload) == result

    def test_json_round_trip_keeps_side_supports(self, grocery) -> None:
        result = run_apriori(grocery, min_support=0.5)
        loaded = MiningResult.from_dict(json.loads(json.dumps(result.to_dict())))
        before = rules_to_frame(result.association_rules)
        after = rules_to_frame(loaded.association_rules)
        for col in ("antecedent support", "consequent support"):
            assert after[col].tolist() == pytest.approx(before[col].tolist())
        assert after["antecedent support"].tolist() == pytest.approx([0.5, 0.75])

    def test_config_to_dict(self) -> None:
        cfg = MiningConfig(min_support=0.1, actionable_filter=ActionableRuleFilter(min_lift=1.5))
        payload = json.loads(json.dumps(cfg.to_dict()))
        assert payload == {
            "min_support": 0.1,
            "min_confidence": 0.4,
            "min_lift": 1.0,
            "max_len": 5,
            "actionable_filter": {
                "min_confidence": 0.5,
                "min_lift": 1.5,
                "min_leverage": 0.01,
                "max_imbalance_ratio": 0.8,
                "max_antecedent_size": 3,
                "max_consequent_size": 2,
            },
        }
        assert MiningConfig().to_dict()["actionable_filter"] is None

    def test_top_rules(self, baskets) -> None:
        result = run_apriori(baskets, min_support=0.04, min_confidence=0.2)
        assert result.top_rules(3) == result.association_rules[:3]

    def test_cancel(self, grocery) -> None:
        event = threading.Event()
        event.set()
        with pytest.raises(MiningCancelledError):
            run_apriori(grocery, cancel_event=event)

    def test_verbose(self, grocery, capsys: pytest.CaptureFixture[str]) -> None:
        run_apriori(grocery, min_support=0.5, verbose=1)
        out = capsys.readouterr().out
        assert "Running Apriori on 4 transactions" in out
        assert "Found 5 itemsets and 2 rules" in out
        assert "butter => bread" in out

    def test_debug_logging(self, grocery, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="smartbasket"):
            run_apriori(grocery, min_support=0.5)
        assert any("run finished" in rec.getMessage() for rec in caplog.records)


# ── run_apriori_async ─────────────────────────────────────────────────────


class TestRunAprioriAsync:
    def test_same_result_as_sync(self, baskets) -> None:
        with ThreadPoolExecutor(max_workers=2) as pool:
            future = run_apriori_async(pool, baskets, min_support=0.04)
            result = future.result(timeout=60)
        assert result == run_apriori(baskets, min_support=0.04)

    def test_input_is_snapshotted(self, grocery) -> None:
        gate = threading.Event()
        with ThreadPoolExecutor(max_workers=1) as pool:
            pool.submit(gate.wait, 10)
            future = run_apriori_async(pool, grocery, min_support=0.5)
            grocery.append(["eggs", "butter"])
            gate.set()
            result = future.result(timeout=60)
        assert result.stats.total_transactions == 4

    def test_validation_happens_in_caller(self) -> None:
        with ThreadPoolExecutor(max_workers=1) as pool:
            with pytest.raises(InvalidParameterError):
                run_apriori_async(pool, [])


# ── mine_grouped / rules_grouped ──────────────────────────────────────────


class TestGrouped:
    @pytest.fixture
    def groups(self, grocery) -> dict[str, list[list[str]]]:
        return {
            "store_a": grocery,
            "store_b": [["tea", "honey"], ["tea", "honey"], ["tea"], ["coffee"]],
        }

    def test_mapping_matches_independent_runs(self, groups) -> None:
        cfg = MiningConfig(min_support=0.5)
        results = mine_grouped(groups, config=cfg)
        assert list(results) == ["store_a", "store_b"]
        for name, baskets in groups.items():
            assert results[name] == run_apriori(baskets, config=cfg)

    def test_groups_do_not_mix(self, groups) -> None:
        results = mine_grouped(groups, config=MiningConfig(min_support=0.5))
        items_a = {i for fi in results["store_a"].frequent_itemsets for i in fi.items}
        items_b = {i for fi in results["store_b"].frequent_itemsets for i in fi.items}
        assert items_a == {"bread", "butter", "milk"}
        assert items_b == {"honey", "tea"}

    def test_threads(self, groups) -> None:
        cfg = MiningConfig(min_support=0.5)
        assert mine_grouped(groups, config=cfg, n_jobs=2) == mine_grouped(groups, config=cfg)

    def test_dataframe(self) -> None:
        df = pd.DataFrame(
            {
                "segment": ["a", "a", "a", "a", "b", "b"],
                "order": [1, 1, 2, 2, 3, 3],
                "item": ["milk", "bread", "milk", "bread", "tea", "honey"],
            }
        )
        results = mine_grouped(df, group_col="segment", transaction_col="order", item_col="item",
                               config=MiningConfig(min_support=0.5))
        assert set(results) == {"a", "b"}
        assert results["a"].stats.total_transactions == 2
        assert ("bread", "milk") in {fi.items for fi in results["a"].frequent_itemsets}
        assert results["b"].stats.total_transactions == 1

    def test_dataframe_requires_group_col(self) -> None:
        df = pd.DataFrame({"order": [1], "item": ["a"]})
        with pytest.raises(ValueError):
            mine_grouped(df)

    def test_unsupported_input(self) -> None:
        with pytest.raises(TypeError):
            mine_grouped([["a"]])

    def test_rules_grouped(self, groups) -> None:
        results = mine_grouped(groups, config=MiningConfig(min_support=0.5))
        df = rules_grouped(results, group_col="store")
        assert list(df.columns) == ["store", *RULE_COLUMNS]
        assert set(df["store"]) == {"store_a", "store_b"}
        n_rules = sum(len(r.association_rules) for r in results.values())
        assert len(df) == n_rules

    def test_rules_grouped_empty(self) -> None:
        df = rules_grouped({})
        assert df.empty
        assert list(df.columns) == ["group", *RULE_COLUMNS]
