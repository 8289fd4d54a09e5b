from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from .config import MiningConfig
from .pipeline import MiningResult, run_apriori

if TYPE_CHECKING:
    import pandas as pd


def mine_grouped(
    data: Mapping[Hashable, Sequence[Iterable[str]]] | pd.DataFrame | Any,
    group_col: str | None = None,
    transaction_col: str | None = None,
    item_col: str | None = None,
    config: MiningConfig | None = None,
    n_jobs: int = 1,
) -> dict[Hashable, MiningResult]:
    """Run one independent mining per group (e.g. per customer segment).

    Each group gets its own run and therefore its own support cache, so
    results never mix across groups.

    Parameters
    ----------
    data:
        Either a mapping ``group -> baskets`` or a long-format pandas/polars
        DataFrame with a group column, a transaction column and an item column.
    group_col:
        Column holding the group key (DataFrame input only).
    transaction_col, item_col:
        Passed to :func:`smartbasket.from_transactions` for each group.
    config:
        Thresholds shared by every group.
    n_jobs:
        Number of worker threads; ``1`` runs the groups sequentially.

    Returns
    -------
    dict
        ``group -> MiningResult``, in order of first appearance of each group.
    """
    groups = _split_groups(data, group_col, transaction_col, item_col)
    cfg = config if config is not None else MiningConfig()

    if n_jobs <= 1 or len(groups) <= 1:
        return {name: run_apriori(baskets, config=cfg) for name, baskets in groups.items()}

    with ThreadPoolExecutor(max_workers=n_jobs) as pool:
        futures = {name: pool.submit(run_apriori, baskets, config=cfg) for name, baskets in groups.items()}
        return {name: fut.result() for name, fut in futures.items()}


def rules_grouped(results: Mapping[Hashable, MiningResult], group_col: str = "group") -> pd.DataFrame:
    """Stack the rules of every group into one DataFrame with a leading *group_col*."""
    import pandas as pd

    from .export import RULE_COLUMNS, rules_to_frame

    frames = []
    for name, result in results.items():
        frame = rules_to_frame(result.association_rules)
        if not frame.empty:
            frame.insert(0, group_col, name)
            frames.append(frame)
    if frames:
        return pd.concat(frames, ignore_index=True)
    return pd.DataFrame(columns=[group_col, *RULE_COLUMNS])


def _split_groups(
    data: Any,
    group_col: str | None,
    transaction_col: str | None,
    item_col: str | None,
) -> dict[Hashable, Sequence[Iterable[str]]]:
    if isinstance(data, Mapping):
        return dict(data)

    mod = getattr(type(data), "__module__", "") or ""
    if not (type(data).__name__ == "DataFrame" and (mod.startswith("pandas") or mod.startswith("polars"))):
        raise TypeError(f"Expected a mapping of baskets or a Pandas/Polars DataFrame, got {type(data)}")
    if group_col is None:
        raise ValueError("`group_col` is required for DataFrame input.")

    from .transactions import from_transactions

    if mod.startswith("polars"):
        data = data.to_pandas()

    out: dict[Hashable, Sequence[Iterable[str]]] = {}
    for name, group_df in data.groupby(group_col, sort=False):
        if isinstance(name, tuple):
            name = name[0]
        drop_df = group_df.drop(columns=[group_col])
        out[name] = from_transactions(drop_df, transaction_col=transaction_col, item_col=item_col)
    return out
