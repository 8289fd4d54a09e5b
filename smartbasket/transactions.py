from __future__ import annotations

import time
import typing
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from ._validation import valid_transactions

if TYPE_CHECKING:
    import pandas as pd
    import polars as pl


def from_transactions(
    data: pd.DataFrame | pl.DataFrame | Sequence[Iterable[str]] | Any,
    transaction_col: str | None = None,
    item_col: str | None = None,
    min_item_count: int = 1,
    verbose: int = 0,
) -> list[frozenset[str]]:
    """Convert transactional data into the baskets the miner consumes.

    Parameters
    ----------
    data
        One of:

        - **Pandas / Polars DataFrame** in long format with (at least) two
          columns: one for the transaction identifier and one for the item.
        - **List of lists** where each inner list contains the items of a
          single transaction, e.g. ``[["bread", "milk"], ["bread", "eggs"]]``.

    transaction_col
        Name of the column that identifies transactions.  If ``None`` the
        first column is used.  Ignored for list-of-lists input.

    item_col
        Name of the column that contains item values.  If ``None`` the
        second column is used.  Ignored for list-of-lists input.

    min_item_count
        Minimum number of transactions an item must appear in to be kept.
        Baskets left empty by this filter are dropped.

    Returns
    -------
    list[frozenset[str]]
        One deduplicated basket per transaction.  DataFrame input is grouped
        in order of first appearance of each transaction id; item values are
        converted to ``str``.

    Examples
    --------
    >>> import pandas as pd
    >>> import smartbasket
    >>> df = pd.DataFrame({"order_id": [1, 1, 2], "item": ["milk", "bread", "milk"]})
    >>> smartbasket.from_transactions(df)
    [frozenset({'bread', 'milk'}), frozenset({'milk'})]
    """
    _type = type(data)
    _mod = getattr(_type, "__module__", "") or ""

    if _type.__name__ == "DataFrame" and _mod.startswith("polars"):
        pandas_df = typing.cast("pl.DataFrame", data).to_pandas()
        baskets = _from_dataframe(pandas_df, transaction_col, item_col, verbose=verbose)
    elif _type.__name__ == "DataFrame" and _mod.startswith("pandas"):
        baskets = _from_dataframe(typing.cast("pd.DataFrame", data), transaction_col, item_col, verbose=verbose)
    elif isinstance(data, (list, tuple)):
        baskets = valid_transactions(data)
    else:
        raise TypeError(f"Expected a Pandas/Polars DataFrame or list of lists, got {type(data)}")

    if min_item_count > 1:
        baskets = _drop_rare_items(baskets, min_item_count, verbose)
    return baskets


def from_pandas(
    df: pd.DataFrame,
    transaction_col: str | None = None,
    item_col: str | None = None,
    verbose: int = 0,
) -> list[frozenset[str]]:
    """Shorthand for ``from_transactions(df, transaction_col, item_col)``."""
    return from_transactions(df, transaction_col=transaction_col, item_col=item_col, verbose=verbose)


def from_polars(
    df: pl.DataFrame,
    transaction_col: str | None = None,
    item_col: str | None = None,
    verbose: int = 0,
) -> list[frozenset[str]]:
    """Shorthand for ``from_transactions(df, transaction_col, item_col)``."""
    return from_transactions(df, transaction_col=transaction_col, item_col=item_col, verbose=verbose)


def from_one_hot(df: pd.DataFrame | pl.DataFrame | Any) -> list[frozenset[str]]:
    """Turn a one-hot boolean matrix (rows = transactions, columns = items) into baskets.

    Rows with no item set are dropped.
    """
    import numpy as np

    _mod = getattr(type(df), "__module__", "") or ""
    if _mod.startswith("polars"):
        df = df.to_pandas()

    columns = [str(c) for c in df.columns]
    values = df.to_numpy(dtype=bool, na_value=False)
    baskets = [frozenset(columns[j] for j in np.flatnonzero(row)) for row in values]
    return valid_transactions([b for b in baskets if b])


def _from_dataframe(
    df: pd.DataFrame,
    transaction_col: str | None,
    item_col: str | None,
    verbose: int = 0,
) -> list[frozenset[str]]:
    if df.shape[1] < 2:
        raise ValueError(f"Long-format input needs a transaction and an item column, got {list(df.columns)}")

    txn_c = transaction_col if transaction_col is not None else df.columns[0]
    itm_c = item_col if item_col is not None else df.columns[1]
    for col in (txn_c, itm_c):
        if col not in df.columns:
            raise ValueError(f"Column {col!r} not found in DataFrame columns {list(df.columns)}")

    t0 = time.perf_counter()
    clean = df[[txn_c, itm_c]].dropna()
    grouped: dict[Any, set[str]] = {}
    for txn, item in zip(clean[txn_c], clean[itm_c]):
        grouped.setdefault(txn, set()).add(str(item))
    baskets = [frozenset(items) for items in grouped.values()]

    if verbose:
        print(
            f"[{time.strftime('%X')}] Grouped {len(clean):,} rows into {len(baskets):,} transactions "
            f"in {time.perf_counter() - t0:.2f}s"
        )
    return valid_transactions(baskets)


def _drop_rare_items(baskets: list[frozenset[str]], min_item_count: int, verbose: int) -> list[frozenset[str]]:
    from collections import Counter

    counts: Counter[str] = Counter()
    for basket in baskets:
        counts.update(basket)
    keep = {item for item, c in counts.items() if c >= min_item_count}
    if verbose:
        print(f"[{time.strftime('%X')}] Keeping {len(keep):,} of {len(counts):,} items with >= {min_item_count} occurrences")
    filtered = [basket & keep for basket in baskets]
    return valid_transactions([b for b in filtered if b])
