from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import pandas as pd
    import polars as pl
    from typing_extensions import Self

    from ._types import AssociationRule, FrequentItemset, Recommendation
    from .support import SupportCounter


class RuleMinerMixin:
    """Mixin for association rules and recommendations on frequent itemset models.

    The host class must provide ``frequent_itemsets_`` and set
    ``_transactions`` / ``_counter`` when it is fitted.
    """

    # Cache: (min_confidence, min_lift) -> rules
    _rules_cache: dict[tuple[float, float], list[AssociationRule]] | None = None
    _transactions: list[frozenset[str]] | None
    _counter: SupportCounter | None

    def _invalidate_rules_cache(self) -> None:
        """Clear the cached association rules (call after re-mining)."""
        self._rules_cache = None

    def association_rules(self, min_confidence: float = 0.4, min_lift: float = 1.0) -> list[AssociationRule]:
        """Generate association rules from the mined frequent itemsets.

        Parameters
        ----------
        min_confidence : float, default=0.4
            Minimum confidence ``support(X ∪ Y) / support(X)`` in ``[0, 1]``.
        min_lift : float, default=1.0
            Minimum lift of a rule.

        Returns
        -------
        list[AssociationRule]
            Rules sorted by ``confidence * lift``, best first.
        """
        from .association_rules import association_rules as _assoc_rules

        freq: list[FrequentItemset] = self.frequent_itemsets_  # type: ignore[attr-defined]
        if self._transactions is None:
            raise RuntimeError("Call fit() before generating association rules.")

        cache_key = (float(min_confidence), float(min_lift))
        if self._rules_cache is None:
            self._rules_cache = {}
        if cache_key not in self._rules_cache:
            self._rules_cache[cache_key] = _assoc_rules(
                freq,
                min_confidence,
                self._transactions,
                min_lift=min_lift,
                counter=self._counter,
            )
        return self._rules_cache[cache_key]

    def recommend(self, items: list[str], n: int = 5) -> list[Recommendation]:
        """Scored recommendations for a cart, using rules at the model's thresholds."""
        from .recommend import recommend as _recommend

        min_confidence = getattr(self, "min_confidence", None)
        rules = self.association_rules(
            min_confidence=0.4 if min_confidence is None else min_confidence,
            min_lift=getattr(self, "min_lift", 1.0),
        )
        return _recommend(items, rules, top_n=n)

    def recommend_for_cart(self, items: list[str], n: int = 5) -> list[str]:
        """Suggest items to add to an active cart using association rules.

        Parameters
        ----------
        items : list[str]
            The items currently in the cart or basket.
        n : int, default=5
            The maximum number of items to recommend.

        Returns
        -------
        list[str]
            Recommended items, best score first.  Never contains an item
            already in *items*.
        """
        return [rec.item for rec in self.recommend(items, n)]


class BaseModel(ABC):
    """Abstract base class for smartbasket estimators.

    Provides unified data ingestion methods (from_transactions, from_pandas, etc.).
    """

    @classmethod
    @abstractmethod
    def from_transactions(
        cls,
        data: Any,
        transaction_col: str | None = None,
        item_col: str | None = None,
        verbose: int = 0,
        **kwargs: Any,
    ) -> Self:
        """Initialize the model from a long-format DataFrame or sequences.

        Must be implemented by subclasses.
        """

    def __dir__(self) -> list[str]:
        """Public API surface only; hides attributes starting with underscores."""
        return [k for k in super().__dir__() if not k.startswith("_")]

    @classmethod
    def from_pandas(
        cls,
        df: pd.DataFrame,
        transaction_col: str | None = None,
        item_col: str | None = None,
        verbose: int = 0,
        **kwargs: Any,
    ) -> Self:
        """Shorthand for ``from_transactions(df, transaction_col, item_col)``."""
        return cls.from_transactions(df, transaction_col=transaction_col, item_col=item_col, verbose=verbose, **kwargs)

    @classmethod
    def from_polars(
        cls,
        df: pl.DataFrame,
        transaction_col: str | None = None,
        item_col: str | None = None,
        verbose: int = 0,
        **kwargs: Any,
    ) -> Self:
        """Shorthand for ``from_transactions(df, transaction_col, item_col)``."""
        return cls.from_transactions(df, transaction_col=transaction_col, item_col=item_col, verbose=verbose, **kwargs)
