"""Input validation utilities and the exception hierarchy."""

from __future__ import annotations

import numbers
from collections.abc import Iterable, Sequence
from typing import Any


class SmartBasketError(Exception):
    """Base class for every error raised by smartbasket."""


class InvalidParameterError(SmartBasketError, ValueError):
    """A caller-supplied parameter lies outside its valid range.

    Parameters
    ----------
    parameter:
        Name of the offending argument.
    value:
        The value that was passed.
    expected:
        Human-readable description of the accepted range.
    """

    def __init__(self, parameter: str, value: Any, expected: str) -> None:
        self.parameter = parameter
        self.value = value
        self.expected = expected
        super().__init__(f"`{parameter}` must be {expected}. Got {value!r}.")


class EmptyTransactionsError(InvalidParameterError):
    """Mining was requested on an empty transaction list."""

    def __init__(self, parameter: str = "transactions") -> None:
        super().__init__(parameter, [], "a non-empty sequence of transactions")


class MalformedTransactionError(SmartBasketError, TypeError):
    """A transaction is not an iterable of string item identifiers."""

    def __init__(self, index: int, transaction: Any, reason: str) -> None:
        self.index = index
        self.transaction = transaction
        super().__init__(f"Transaction #{index} is malformed: {reason}. Got {transaction!r}.")


class InvariantViolationError(SmartBasketError, ArithmeticError):
    """An internal invariant was broken (e.g. a zero support denominator)."""


class MiningCancelledError(SmartBasketError):
    """A mining run was stopped through its cancellation event."""


def check_min_support(min_support: float) -> float:
    if isinstance(min_support, bool) or not isinstance(min_support, numbers.Real):
        raise InvalidParameterError("min_support", min_support, "a number within the interval `(0, 1]`")
    if not 0.0 < min_support <= 1.0:
        raise InvalidParameterError("min_support", min_support, "a positive number within the interval `(0, 1]`")
    return float(min_support)


def check_min_confidence(min_confidence: float) -> float:
    if isinstance(min_confidence, bool) or not isinstance(min_confidence, numbers.Real):
        raise InvalidParameterError("min_confidence", min_confidence, "a number within the interval `[0, 1]`")
    if not 0.0 <= min_confidence <= 1.0:
        raise InvalidParameterError("min_confidence", min_confidence, "a number within the interval `[0, 1]`")
    return float(min_confidence)


def check_min_lift(min_lift: float) -> float:
    if isinstance(min_lift, bool) or not isinstance(min_lift, numbers.Real):
        raise InvalidParameterError("min_lift", min_lift, "a non-negative number")
    if not min_lift >= 0.0:
        raise InvalidParameterError("min_lift", min_lift, "a non-negative number")
    return float(min_lift)


def check_top_n(top_n: int) -> int:
    if isinstance(top_n, bool) or not isinstance(top_n, int) or top_n < 0:
        raise InvalidParameterError("top_n", top_n, "a non-negative integer")
    return top_n


def valid_transactions(transactions: Sequence[Iterable[str]] | Any) -> list[frozenset[str]]:
    """Validate raw baskets and freeze them into deduplicated item sets.

    Parameters
    ----------
    transactions:
        Sequence of baskets, each an iterable (list, tuple, set) of string
        item identifiers.  Duplicate items inside a basket are collapsed.

    Returns
    -------
    list[frozenset[str]]
        One frozen set per input basket, in input order.

    Raises
    ------
    EmptyTransactionsError
        If *transactions* is empty.
    MalformedTransactionError
        If *transactions* is a string, a basket is a string or not iterable,
        or a basket contains a non-string item.
    """
    if isinstance(transactions, (str, bytes)) or not isinstance(transactions, Iterable):
        raise MalformedTransactionError(0, transactions, "expected a sequence of baskets")

    frozen: list[frozenset[str]] = []
    for idx, basket in enumerate(transactions):
        if isinstance(basket, (str, bytes)):
            raise MalformedTransactionError(idx, basket, "a basket must be a collection of items, not a string")
        if isinstance(basket, frozenset) and all(isinstance(item, str) for item in basket):
            frozen.append(basket)
            continue
        if not isinstance(basket, Iterable):
            raise MalformedTransactionError(idx, basket, "a basket must be iterable")
        items = list(basket)
        for item in items:
            if not isinstance(item, str):
                raise MalformedTransactionError(
                    idx, basket, f"item {item!r} has type {type(item).__name__}, expected str"
                )
        frozen.append(frozenset(items))

    if not frozen:
        raise EmptyTransactionsError()
    return frozen


def valid_basket(basket: Iterable[str] | None) -> frozenset[str]:
    """Freeze a live shopping basket; ``None`` is treated as empty."""
    if basket is None:
        return frozenset()
    if isinstance(basket, (str, bytes)):
        raise MalformedTransactionError(0, basket, "a basket must be a collection of items, not a string")
    items = frozenset(basket)
    for item in items:
        if not isinstance(item, str):
            raise MalformedTransactionError(0, basket, f"item {item!r} has type {type(item).__name__}, expected str")
    return items
