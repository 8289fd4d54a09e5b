from __future__ import annotations

import logging
import threading
import time
from collections import Counter
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from ._types import FrequentItemset
from ._validation import (
    InvalidParameterError,
    MiningCancelledError,
    check_min_support,
    valid_transactions,
)
from .candidates import generate_candidates
from .config import MAX_ITEMSET_SIZE
from .model import BaseModel, RuleMinerMixin
from .support import SupportCounter

if TYPE_CHECKING:
    import pandas as pd
    import polars as pl

    from ._types import AssociationRule

logger = logging.getLogger(__name__)


def apriori(
    transactions: Sequence[Iterable[str]],
    min_support: float = 0.05,
    max_len: int = MAX_ITEMSET_SIZE,
    verbose: int = 0,
    cancel_event: threading.Event | None = None,
) -> list[FrequentItemset]:
    """Find all frequent itemsets with the level-wise Apriori algorithm.

    Parameters
    ----------
    transactions:
        Baskets of string item identifiers, e.g.
        ``[["milk", "bread"], ["bread", "butter"]]``.  Duplicates inside a
        basket are ignored.
    min_support:
        Minimum support threshold (fraction of transactions) in ``(0, 1]``.
        The comparison is inclusive: ``support >= min_support``.
    max_len:
        Largest itemset size to grow, at most 5.
    verbose:
        If > 0, print progress details to standard output.
    cancel_event:
        Optional event checked between levels; when set the run stops with
        :class:`~smartbasket.MiningCancelledError`.

    Returns
    -------
    list[FrequentItemset]
        Frequent itemsets ordered by size, then lexicographically by items.

    Raises
    ------
    EmptyTransactionsError
        If *transactions* is empty.
    InvalidParameterError
        If *min_support* is outside ``(0, 1]`` or *max_len* outside ``[1, 5]``.

    Examples
    --------
    >>> from smartbasket import apriori
    >>> baskets = [["milk", "bread"], ["bread", "butter"], ["milk", "bread", "butter"]]
    >>> [fi.items for fi in apriori(baskets, min_support=0.6)]
    [('bread',), ('butter',), ('milk',), ('bread', 'butter'), ('bread', 'milk')]
    """
    frozen = valid_transactions(transactions)
    itemsets, _ = _mine(frozen, check_min_support(min_support), _check_max_len(max_len), verbose, cancel_event)
    return itemsets


def _check_max_len(max_len: int) -> int:
    if isinstance(max_len, bool) or not isinstance(max_len, int) or not 1 <= max_len <= MAX_ITEMSET_SIZE:
        raise InvalidParameterError("max_len", max_len, f"an integer within `[1, {MAX_ITEMSET_SIZE}]`")
    return max_len


def _mine(
    transactions: Sequence[frozenset[str]],
    min_support: float,
    max_len: int,
    verbose: int = 0,
    cancel_event: threading.Event | None = None,
) -> tuple[list[FrequentItemset], SupportCounter]:
    """Run Apriori on validated input; also return the run's support cache."""
    counter = SupportCounter(transactions)
    n_rows = counter.n_transactions
    t0 = time.perf_counter()

    item_counts: Counter[str] = Counter()
    for txn in transactions:
        item_counts.update(txn)

    level: list[FrequentItemset] = []
    for item in sorted(item_counts):
        count = item_counts[item]
        counter.seed((item,), count)
        support = count / n_rows
        if support >= min_support:
            level.append(FrequentItemset((item,), support, count))

    result = list(level)
    logger.debug("level 1: %d distinct items, %d frequent", len(item_counts), len(level))
    if verbose:
        print(f"[{time.strftime('%X')}] Level 1: {len(level)} frequent items out of {len(item_counts)}")

    k = 2
    while level and k <= max_len:
        if cancel_event is not None and cancel_event.is_set():
            raise MiningCancelledError(f"Mining cancelled before level {k}.")

        candidates = generate_candidates(level, k)
        if not candidates:
            logger.debug("level %d: no candidates, stopping", k)
            break

        level = []
        for candidate in candidates:
            support, count = counter.support(candidate)
            if support >= min_support:
                level.append(FrequentItemset(candidate, support, count))
        level.sort(key=lambda fi: fi.items)
        result.extend(level)

        logger.debug("level %d: %d candidates, %d frequent", k, len(candidates), len(level))
        if verbose:
            print(f"[{time.strftime('%X')}] Level {k}: {len(level)} frequent itemsets from {len(candidates)} candidates")
        k += 1

    elapsed_ms = (time.perf_counter() - t0) * 1000.0
    logger.debug("mined %d frequent itemsets in %.1f ms", len(result), elapsed_ms)
    return result, counter


class Apriori(BaseModel, RuleMinerMixin):
    """Apriori frequent itemset miner with rule generation and cart recommendations.

    Parameters
    ----------
    min_support:
        Minimum support threshold (fraction of transactions) in ``(0, 1]``.
    min_confidence:
        Minimum confidence for association rules.  ``None`` skips rule
        generation during :meth:`fit`; rules can still be requested later via
        :meth:`association_rules`.
    min_lift:
        Minimum lift for association rules.
    max_len:
        Maximum length of frequent itemsets, at most 5.
    verbose:
        If > 0, print progress details to standard output.

    Examples
    --------
    .. code-block:: python

        from smartbasket import Apriori

        model = Apriori(min_support=0.05, min_confidence=0.4).fit(baskets)
        freq = model.frequent_itemsets_
        rules = model.association_rules_
        model.recommend_for_cart(["Pasta", "Tomato Sauce"], n=3)
    """

    def __init__(
        self,
        min_support: float = 0.05,
        min_confidence: float | None = None,
        min_lift: float = 1.0,
        max_len: int = MAX_ITEMSET_SIZE,
        verbose: int = 0,
    ) -> None:
        self.min_support = min_support
        self.min_confidence = min_confidence
        self.min_lift = min_lift
        self.max_len = max_len
        self.verbose = verbose

        self._frequent_itemsets: list[FrequentItemset] | None = None
        self._association_rules: list[AssociationRule] | None = None
        self._transactions: list[frozenset[str]] | None = None
        self._counter: SupportCounter | None = None

    @classmethod
    def from_transactions(
        cls,
        data: pd.DataFrame | pl.DataFrame | Sequence[Iterable[str]] | Any,
        transaction_col: str | None = None,
        item_col: str | None = None,
        verbose: int = 0,
        **kwargs: Any,
    ) -> Apriori:
        """Build and fit a model from long-format DataFrames or a list of baskets."""
        from .transactions import from_transactions

        baskets = from_transactions(data, transaction_col=transaction_col, item_col=item_col)
        return cls(verbose=verbose, **kwargs).fit(baskets)

    def fit(self, transactions: Sequence[Iterable[str]], cancel_event: threading.Event | None = None) -> Apriori:
        """Mine frequent itemsets (and rules, if ``min_confidence`` is set)."""
        frozen = valid_transactions(transactions)
        min_support = check_min_support(self.min_support)
        max_len = _check_max_len(self.max_len)

        self._invalidate_rules_cache()
        self._frequent_itemsets, self._counter = _mine(frozen, min_support, max_len, self.verbose, cancel_event)
        self._transactions = frozen

        if self.min_confidence is not None:
            self._association_rules = self.association_rules(self.min_confidence, self.min_lift)
        else:
            self._association_rules = None
        return self

    @property
    def frequent_itemsets_(self) -> list[FrequentItemset]:
        if self._frequent_itemsets is None:
            raise RuntimeError("Call fit() before accessing frequent_itemsets_.")
        return self._frequent_itemsets

    @property
    def association_rules_(self) -> list[AssociationRule]:
        """Association rules mined during :meth:`fit` (requires *min_confidence*)."""
        if self._association_rules is None:
            if self.min_confidence is None:
                raise RuntimeError("Set min_confidence in the constructor to generate rules.")
            raise RuntimeError("Call fit() before accessing association_rules_.")
        return self._association_rules

    @property
    def n_transactions(self) -> int:
        return 0 if self._transactions is None else len(self._transactions)

    def __repr__(self) -> str:
        fitted = self._frequent_itemsets is not None
        return (
            f"{type(self).__name__}("
            f"min_support={self.min_support}, "
            f"min_confidence={self.min_confidence}, "
            f"min_lift={self.min_lift}, "
            f"fitted={fitted})"
        )
