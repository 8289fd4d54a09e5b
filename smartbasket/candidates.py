"""Level-wise candidate generation with Apriori pruning."""

from __future__ import annotations

from collections.abc import Sequence
from itertools import combinations

from ._types import FrequentItemset, Itemset


def generate_candidates(prev_frequent: Sequence[FrequentItemset], k: int) -> list[Itemset]:
    """Join frequent ``(k-1)``-itemsets into unique, pruned ``k``-candidates.

    Two ``(k-1)``-itemsets join only when their first ``k-2`` items agree; the
    candidate is their sorted union.  A candidate survives only if every one
    of its ``(k-1)``-subsets is itself in *prev_frequent*, so supersets of
    infrequent itemsets are never counted against the data.

    Parameters
    ----------
    prev_frequent:
        Frequent itemsets of size ``k-1``, each stored sorted, and the list
        itself sorted by item tuple.  The prefix join relies on this order.
    k:
        Size of the candidates to produce (``k >= 2``).

    Returns
    -------
    list[tuple[str, ...]]
        Candidate itemsets in generation order, without duplicates.
    """
    if k < 2:
        raise ValueError(f"`k` must be at least 2 to join itemsets. Got {k}.")

    prefix_len = k - 2
    frequent_keys = {fi.items for fi in prev_frequent}
    seen: set[Itemset] = set()
    candidates: list[Itemset] = []

    for i in range(len(prev_frequent)):
        left = prev_frequent[i].items
        for j in range(i + 1, len(prev_frequent)):
            right = prev_frequent[j].items
            if left[:prefix_len] != right[:prefix_len]:
                # sorted input: once the prefix differs, no later itemset shares it
                break

            candidate = tuple(sorted(set(left) | set(right)))
            if len(candidate) != k or candidate in seen:
                continue

            if all(subset in frequent_keys for subset in combinations(candidate, k - 1)):
                seen.add(candidate)
                candidates.append(candidate)

    return candidates
