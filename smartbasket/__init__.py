from ._types import AssociationRule, FrequentItemset, MiningStats, Recommendation
from ._validation import (
    EmptyTransactionsError,
    InvalidParameterError,
    InvariantViolationError,
    MalformedTransactionError,
    MiningCancelledError,
    SmartBasketError,
)
from .analytics import dataset_stats, filter_actionable_rules, find_substitutes
from .apriori import Apriori, apriori
from .association_rules import CONVICTION_CAP, association_rules, rule_metrics
from .candidates import generate_candidates
from .config import MAX_ITEMSET_SIZE, ActionableRuleFilter, MiningConfig
from .datasets import make_supermarket_transactions
from .export import itemsets_to_frame, recommendations_to_frame, rules_to_frame
from .grouped import mine_grouped, rules_grouped
from .pipeline import MiningResult, run_apriori, run_apriori_async
from .recommend import Recommender, recommend, rule_score
from .support import SupportCounter, SupportResult
from .transactions import from_one_hot, from_pandas, from_polars, from_transactions

__version__ = "0.1.0"

__all__ = [
    "apriori",
    "Apriori",
    "association_rules",
    "rule_metrics",
    "CONVICTION_CAP",
    "generate_candidates",
    "SupportCounter",
    "SupportResult",
    "recommend",
    "rule_score",
    "Recommender",
    "run_apriori",
    "run_apriori_async",
    "MiningResult",
    "mine_grouped",
    "rules_grouped",
    "dataset_stats",
    "filter_actionable_rules",
    "find_substitutes",
    "MiningConfig",
    "ActionableRuleFilter",
    "MAX_ITEMSET_SIZE",
    "from_transactions",
    "from_pandas",
    "from_polars",
    "from_one_hot",
    "itemsets_to_frame",
    "rules_to_frame",
    "recommendations_to_frame",
    "make_supermarket_transactions",
    "FrequentItemset",
    "AssociationRule",
    "Recommendation",
    "MiningStats",
    "SmartBasketError",
    "InvalidParameterError",
    "EmptyTransactionsError",
    "MalformedTransactionError",
    "InvariantViolationError",
    "MiningCancelledError",
]
