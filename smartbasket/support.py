"""Memoized support counting, scoped to a single mining run."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import NamedTuple

from ._types import Itemset, canonical
from ._validation import EmptyTransactionsError


class SupportResult(NamedTuple):
    support: float
    count: int


class CacheInfo(NamedTuple):
    hits: int
    misses: int
    size: int


class SupportCounter:
    """Counts how many transactions contain an itemset, caching every answer.

    One counter belongs to one mining run: it is bound to a fixed transaction
    list, so results can never leak into a run over different data.  Create a
    fresh counter (or call :meth:`clear`) for every run.

    Parameters
    ----------
    transactions:
        The run's baskets as frozen item sets.  The sequence is iterated in
        its given order on every cache miss.

    Raises
    ------
    EmptyTransactionsError
        If *transactions* is empty, since support would divide by zero.
    """

    def __init__(self, transactions: Sequence[frozenset[str]]) -> None:
        if len(transactions) == 0:
            raise EmptyTransactionsError()
        self._transactions = transactions
        self._cache: dict[Itemset, SupportResult] = {}
        self._hits = 0
        self._misses = 0

    @property
    def n_transactions(self) -> int:
        return len(self._transactions)

    def support(self, itemset: Iterable[str]) -> SupportResult:
        """Return ``(support, count)`` for *itemset*; the key is its sorted item tuple."""
        key = canonical(itemset)
        cached = self._cache.get(key)
        if cached is not None:
            self._hits += 1
            return cached

        self._misses += 1
        wanted = frozenset(key)
        count = sum(1 for txn in self._transactions if wanted <= txn)
        result = SupportResult(count / len(self._transactions), count)
        self._cache[key] = result
        return result

    def seed(self, itemset: Itemset, count: int) -> None:
        """Record a count obtained elsewhere (e.g. the level-1 item scan)."""
        self._cache[canonical(itemset)] = SupportResult(count / len(self._transactions), count)

    def clear(self) -> None:
        self._cache.clear()
        self._hits = 0
        self._misses = 0

    def cache_info(self) -> CacheInfo:
        return CacheInfo(self._hits, self._misses, len(self._cache))

    def __contains__(self, itemset: Iterable[str]) -> bool:
        return canonical(itemset) in self._cache

    def __repr__(self) -> str:
        return f"SupportCounter(n_transactions={self.n_transactions}, cached={len(self._cache)})"
