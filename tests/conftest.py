"""pytest configuration and shared fixtures."""

from __future__ import annotations

import os
import sys

import pytest

from smartbasket import AssociationRule

# Ensure tests/ dir is on path so `from conftest import make_rule` works
sys.path.insert(0, os.path.dirname(__file__))


@pytest.fixture
def grocery() -> list[list[str]]:
    """Four baskets: milk/bread 0.75, butter 0.5, eggs 0.25."""
    return [
        ["milk", "bread"],
        ["bread", "butter"],
        ["milk", "bread", "butter"],
        ["milk", "eggs"],
    ]


def make_rule(
    antecedent: tuple[str, ...],
    consequent: tuple[str, ...],
    confidence: float,
    lift: float,
    kulczynski: float,
    support: float = 0.1,
) -> AssociationRule:
    """Hand-built rule; metrics not under test are zero."""
    return AssociationRule(
        antecedent=antecedent,
        consequent=consequent,
        support=support,
        confidence=confidence,
        lift=lift,
        conviction=0.0,
        leverage=0.0,
        jaccard=0.0,
        cosine=0.0,
        kulczynski=kulczynski,
        imbalance_ratio=0.0,
    )
