from .validation import (
    VALID_CATEGORIES,
    MAX_LENGTHS,
    MIN_INGREDIENTS,
    MAX_INGREDIENTS,
    MAX_PRICE,
    MAX_QUANTITY,
    MAX_FOOD_COST_PCT,
)
