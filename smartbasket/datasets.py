"""Seeded synthetic supermarket transactions for demos and tests.

Baskets are built from customer segments (basket size and preferred
categories), time-of-day meal patterns, seasonal items and impulse buys.
Passing the same ``seed`` always yields the same transactions.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

PRODUCT_CATALOG: dict[str, list[str]] = {
    "fruits": ["Apples", "Bananas", "Oranges", "Grapes", "Strawberries", "Watermelon", "Blueberries", "Peaches"],
    "vegetables": ["Lettuce", "Tomatoes", "Carrots", "Broccoli", "Spinach", "Cucumbers", "Onions", "Potatoes", "Garlic"],
    "dairy": ["Milk", "Yogurt", "Cheese", "Butter", "Cream", "Sour Cream", "Cream Cheese", "Eggs"],
    "meat": ["Chicken Breast", "Ground Beef", "Pork Chops", "Bacon", "Sausage", "Salmon", "Turkey", "Ham"],
    "bakery": ["Bread", "Bagels", "Croissants", "Muffins", "Baguette", "Tortillas"],
    "grains": ["Rice", "Pasta", "Cereal", "Oatmeal", "Quinoa", "Flour"],
    "canned": ["Canned Tomatoes", "Canned Beans", "Canned Soup", "Tomato Sauce", "Pasta Sauce"],
    "condiments": ["Olive Oil", "Ketchup", "Mustard", "Mayonnaise", "Soy Sauce", "Salad Dressing"],
    "beverages": ["Coffee", "Tea", "Orange Juice", "Soda", "Energy Drink", "Bottled Water", "Lemonade"],
    "alcohol": ["Beer", "Wine"],
    "snacks": ["Chips", "Crackers", "Pretzels", "Popcorn", "Nuts", "Granola Bars", "Protein Bars"],
    "sweets": ["Chocolate", "Cookies", "Candy", "Ice Cream"],
    "frozen": ["Frozen Pizza", "Frozen Vegetables", "Frozen Meals", "Frozen Fries"],
    "health": ["Protein Powder", "Almond Milk", "Greek Yogurt", "Hummus", "Avocado"],
    "household": ["Detergent", "Dish Soap", "Paper Towels", "Toilet Paper", "Trash Bags", "Sponges"],
    "baby": ["Diapers", "Baby Wipes", "Baby Food", "Baby Formula"],
    "pet": ["Pet Food", "Pet Treats", "Cat Litter"],
}


@dataclass(frozen=True)
class CustomerSegment:
    name: str
    min_basket: int
    max_basket: int
    preferred_categories: tuple[str, ...]
    weight: float


CUSTOMER_SEGMENTS: tuple[CustomerSegment, ...] = (
    CustomerSegment("budget", 3, 8, ("grains", "canned", "frozen", "household"), 0.25),
    CustomerSegment("regular", 5, 12, ("dairy", "meat", "vegetables", "fruits", "bakery", "beverages"), 0.35),
    CustomerSegment("premium", 8, 18, ("meat", "dairy", "fruits", "vegetables", "health", "alcohol", "sweets"), 0.15),
    CustomerSegment("health_conscious", 6, 14, ("health", "fruits", "vegetables", "dairy", "meat", "grains"), 0.12),
    CustomerSegment("convenience", 2, 6, ("frozen", "snacks", "beverages", "bakery"), 0.08),
    CustomerSegment("family", 12, 25, ("dairy", "meat", "vegetables", "fruits", "snacks", "household", "bakery", "frozen"), 0.05),
)

SHOPPING_PATTERNS: dict[str, list[list[str]]] = {
    "breakfast": [
        ["Milk", "Cereal", "Bananas", "Orange Juice"],
        ["Bread", "Eggs", "Bacon", "Butter", "Coffee"],
        ["Bagels", "Cream Cheese", "Coffee", "Orange Juice"],
        ["Croissants", "Butter", "Coffee", "Orange Juice"],
    ],
    "dinner": [
        ["Pasta", "Tomato Sauce", "Cheese", "Olive Oil", "Garlic", "Bread"],
        ["Ground Beef", "Tortillas", "Cheese", "Lettuce", "Tomatoes", "Sour Cream"],
        ["Chicken Breast", "Rice", "Broccoli", "Soy Sauce"],
        ["Salmon", "Potatoes", "Olive Oil"],
        ["Lettuce", "Tomatoes", "Cucumbers", "Salad Dressing"],
    ],
    "quick_meal": [
        ["Frozen Pizza", "Soda"],
        ["Frozen Meals", "Bread"],
        ["Canned Soup", "Crackers", "Cheese"],
    ],
    "snacking": [
        ["Chips", "Soda"],
        ["Cookies", "Milk"],
        ["Chocolate", "Ice Cream"],
        ["Crackers", "Cheese"],
        ["Popcorn", "Soda"],
    ],
    "household": [
        ["Detergent", "Dish Soap", "Paper Towels", "Toilet Paper"],
        ["Trash Bags", "Sponges", "Dish Soap"],
    ],
    "impulse": [["Chocolate"], ["Candy"], ["Soda"], ["Chips"], ["Cookies"], ["Energy Drink"]],
}

IMPULSE_ITEMS: tuple[str, ...] = tuple(p[0] for p in SHOPPING_PATTERNS["impulse"])

TIME_PATTERNS: dict[str, tuple[str, ...]] = {
    "morning": ("breakfast", "snacking", "impulse"),
    "afternoon": ("quick_meal", "snacking", "household"),
    "evening": ("dinner",),
    "night": ("snacking", "impulse", "quick_meal"),
}

SEASONAL_ITEMS: dict[str, list[str]] = {
    "spring": ["Strawberries", "Spinach", "Lettuce"],
    "summer": ["Watermelon", "Ice Cream", "Lemonade", "Tomatoes"],
    "fall": ["Apples", "Canned Soup"],
    "winter": ["Tea", "Oranges", "Canned Soup"],
}


def make_supermarket_transactions(
    n_transactions: int = 2000,
    seed: int | None = None,
    pattern_share: float = 0.75,
) -> list[list[str]]:
    """Generate realistic-looking supermarket baskets.

    Parameters
    ----------
    n_transactions : int, default=2000
        Number of baskets to generate.
    seed : int | None, default=None
        Seed for ``numpy.random.default_rng``; fix it for reproducible fixtures.
    pattern_share : float, default=0.75
        Fraction of baskets seeded from a meal/shopping pattern; the rest
        are drawn at random from the segment's preferred categories.

    Returns
    -------
    list[list[str]]
        Sorted, duplicate-free baskets; never empty.
    """
    rng = np.random.default_rng(seed)
    weights = np.array([s.weight for s in CUSTOMER_SEGMENTS])
    weights = weights / weights.sum()
    categories = list(PRODUCT_CATALOG)
    seasons = list(SEASONAL_ITEMS)
    times = list(TIME_PATTERNS)
    time_weights = np.array([0.3, 0.2, 0.4, 0.1])

    def pick(options: list[str] | tuple[str, ...]) -> str:
        return options[int(rng.integers(len(options)))]

    transactions: list[list[str]] = []
    for _ in range(n_transactions):
        segment = CUSTOMER_SEGMENTS[int(rng.choice(len(CUSTOMER_SEGMENTS), p=weights))]
        basket: list[str] = []

        if rng.random() < pattern_share:
            time_of_day = times[int(rng.choice(len(times), p=time_weights))]
            pattern_options = SHOPPING_PATTERNS[pick(TIME_PATTERNS[time_of_day])]
            basket = list(pattern_options[int(rng.integers(len(pattern_options)))])

            for _ in range(int(rng.integers(1, 4))):
                _add(basket, pick(PRODUCT_CATALOG[pick(segment.preferred_categories)]))
            if rng.random() < 0.2:
                _add(basket, pick(SEASONAL_ITEMS[pick(seasons)]))
            if rng.random() < 0.4:
                _add(basket, pick(IMPULSE_ITEMS))
            while len(basket) < segment.min_basket:
                _add(basket, pick(PRODUCT_CATALOG[pick(categories)]))
            basket = basket[: segment.max_basket]
        else:
            size = int(rng.integers(segment.min_basket, segment.max_basket + 1))
            while len(basket) < size:
                pool = segment.preferred_categories if rng.random() < 0.7 else categories
                _add(basket, pick(PRODUCT_CATALOG[pick(pool)]))

        transactions.append(sorted(basket))
    return transactions


def _add(basket: list[str], item: str) -> None:
    if item not in basket:
        basket.append(item)
