"""End-to-end mining run: statistics → frequent itemsets → association rules.

Example
-------
>>> from smartbasket import run_apriori
>>> result = run_apriori(baskets, min_support=0.05, min_confidence=0.4)
>>> result.stats.total_itemsets
>>> payload = result.to_dict()   # JSON-ready
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable, Sequence
from concurrent.futures import Executor, Future
from dataclasses import dataclass, field
from typing import Any

from ._types import AssociationRule, FrequentItemset, MiningStats
from ._validation import valid_transactions
from .analytics import dataset_stats, filter_actionable_rules
from .apriori import _mine
from .association_rules import association_rules
from .config import MiningConfig

logger = logging.getLogger(__name__)


@dataclass
class MiningResult:
    """Everything one mining run produces."""

    frequent_itemsets: list[FrequentItemset]
    association_rules: list[AssociationRule]
    stats: MiningStats
    config: MiningConfig = field(default_factory=MiningConfig, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "frequentItemsets": [fi.to_dict() for fi in self.frequent_itemsets],
            "associationRules": [rule.to_dict() for rule in self.association_rules],
            "stats": self.stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MiningResult:
        return cls(
            frequent_itemsets=[FrequentItemset.from_dict(d) for d in data["frequentItemsets"]],
            association_rules=[AssociationRule.from_dict(d) for d in data["associationRules"]],
            stats=MiningStats.from_dict(data["stats"]),
        )

    def top_rules(self, n: int = 10) -> list[AssociationRule]:
        return self.association_rules[:n]


def run_apriori(
    transactions: Sequence[Iterable[str]],
    min_support: float | None = None,
    min_confidence: float | None = None,
    min_lift: float | None = None,
    *,
    config: MiningConfig | None = None,
    verbose: int = 0,
    cancel_event: threading.Event | None = None,
) -> MiningResult:
    """Mine frequent itemsets and association rules in one call.

    Parameters
    ----------
    transactions:
        Baskets of string item identifiers.
    min_support, min_confidence, min_lift:
        Thresholds; each one given here overrides the matching field of
        *config*.  Defaults are ``0.05``, ``0.4`` and ``1.0``.
    config:
        Full run configuration, including the optional actionable filter.
    verbose:
        If > 0, print progress details to standard output.
    cancel_event:
        Checked between Apriori levels; see :func:`smartbasket.apriori`.

    Returns
    -------
    MiningResult
        Itemsets, rules (best ``confidence * lift`` first) and statistics,
        with ``total_itemsets`` and ``mining_time_ms`` filled in.
    """
    cfg = config if config is not None else MiningConfig()
    overrides = {
        "min_support": min_support,
        "min_confidence": min_confidence,
        "min_lift": min_lift,
    }
    cfg = _with_overrides(cfg, {k: v for k, v in overrides.items() if v is not None}).validate()

    t0 = time.perf_counter()
    frozen = valid_transactions(transactions)
    stats = dataset_stats(frozen)
    if verbose:
        print(
            f"[{time.strftime('%X')}] Running Apriori on {stats.total_transactions:,} transactions, "
            f"{stats.unique_items:,} unique items (min_support={cfg.min_support:.1%}, "
            f"min_confidence={cfg.min_confidence:.1%}, min_lift={cfg.min_lift:.1f})"
        )

    itemsets, counter = _mine(frozen, cfg.min_support, cfg.max_len, verbose, cancel_event)
    rules = association_rules(itemsets, cfg.min_confidence, min_lift=cfg.min_lift, counter=counter)
    if cfg.actionable_filter is not None:
        rules = filter_actionable_rules(rules, cfg.actionable_filter)

    stats.total_itemsets = len(itemsets)
    stats.mining_time_ms = (time.perf_counter() - t0) * 1000.0
    logger.debug(
        "run finished: %d itemsets, %d rules in %.1f ms (support cache %s)",
        len(itemsets),
        len(rules),
        stats.mining_time_ms,
        counter.cache_info(),
    )
    if verbose:
        print(f"[{time.strftime('%X')}] Found {len(itemsets):,} itemsets and {len(rules):,} rules in {stats.mining_time_ms:.0f}ms")
        for i, rule in enumerate(rules[:10], start=1):
            print(f"  {i}. {rule}")

    return MiningResult(itemsets, rules, stats, cfg)


def run_apriori_async(
    executor: Executor,
    transactions: Sequence[Iterable[str]],
    min_support: float | None = None,
    min_confidence: float | None = None,
    min_lift: float | None = None,
    *,
    config: MiningConfig | None = None,
    cancel_event: threading.Event | None = None,
) -> Future[MiningResult]:
    """Submit :func:`run_apriori` to *executor* so the caller is not blocked.

    The transactions are snapshotted before submission, so later mutation of
    the caller's lists cannot affect the run.
    """
    frozen = valid_transactions(transactions)
    return executor.submit(
        run_apriori,
        frozen,
        min_support,
        min_confidence,
        min_lift,
        config=config,
        cancel_event=cancel_event,
    )


def _with_overrides(cfg: MiningConfig, overrides: dict[str, float]) -> MiningConfig:
    if not overrides:
        return cfg
    from dataclasses import replace

    return replace(cfg, **overrides)
