from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from ._dependencies import import_optional_dependency
from ._types import AssociationRule, FrequentItemset, Recommendation
from .association_rules import _ALL_METRICS

if TYPE_CHECKING:
    import pandas as pd

ITEMSET_COLUMNS = ["itemsets", "length", "support", "support_count"]
RULE_COLUMNS = ["antecedents", "consequents", *_ALL_METRICS]
RECOMMENDATION_COLUMNS = ["item", "score", "confidence", "support", "reasons", "n_rules"]


def itemsets_to_frame(itemsets: Iterable[FrequentItemset], format: str = "pandas") -> Any:
    """Frequent itemsets as a DataFrame with columns ``itemsets``, ``length``, ``support``, ``support_count``.

    Parameters
    ----------
    itemsets : Iterable[FrequentItemset]
        Output of :func:`smartbasket.apriori`.
    format : str, default="pandas"
        The DataFrame format to return. One of "pandas", "polars", or "arrow".
    """
    import pandas as pd

    rows = [(list(fi.items), len(fi.items), fi.support, fi.support_count) for fi in itemsets]
    df = pd.DataFrame(rows, columns=ITEMSET_COLUMNS)
    return _convert(df, format)


def rules_to_frame(rules: Iterable[AssociationRule], format: str = "pandas") -> Any:
    """Association rules as a DataFrame, one column per metric.

    Antecedents and consequents are stored as lists of item names so that
    the frame converts cleanly to Polars and Arrow.

    Parameters
    ----------
    rules : Iterable[AssociationRule]
        Output of :func:`smartbasket.association_rules`.
    format : str, default="pandas"
        The DataFrame format to return. One of "pandas", "polars", or "arrow".
    """
    import pandas as pd

    rows = [
        (
            list(r.antecedent),
            list(r.consequent),
            r.antecedent_support,
            r.consequent_support,
            r.support,
            r.confidence,
            r.lift,
            r.conviction,
            r.leverage,
            r.jaccard,
            r.cosine,
            r.kulczynski,
            r.imbalance_ratio,
        )
        for r in rules
    ]
    df = pd.DataFrame(rows, columns=RULE_COLUMNS)
    return _convert(df, format)


def recommendations_to_frame(recommendations: Iterable[Recommendation], format: str = "pandas") -> Any:
    """Recommendations as a DataFrame (reasons rendered as ``"a + b"`` strings)."""
    import pandas as pd

    rows = [
        (
            rec.item,
            rec.score,
            rec.confidence,
            rec.support,
            [" + ".join(reason) for reason in rec.reasons],
            len(rec.rules),
        )
        for rec in recommendations
    ]
    df = pd.DataFrame(rows, columns=RECOMMENDATION_COLUMNS)
    return _convert(df, format)


def _convert(df: pd.DataFrame, format: str) -> Any:
    if format == "pandas":
        return df
    elif format == "polars":
        pl = import_optional_dependency("polars", "format='polars'")

        return pl.from_pandas(df)
    elif format == "arrow":
        pa = import_optional_dependency("pyarrow", "format='arrow'")

        return pa.Table.from_pandas(df, preserve_index=False)
    else:
        raise ValueError(f"Unknown format: {format}")
