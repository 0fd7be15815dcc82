"""
Validation Constants

Limits and whitelists for validating API input before it reaches the
costing services.
"""

# Valid inventory categories (whitelist)
VALID_CATEGORIES = {
    'Produce', 'Meat', 'Seafood', 'Dairy', 'Bakery', 'Pantry', 'Frozen',
    'Beverages', 'Condiments', 'Spices', 'Canned', 'Packaging', 'Other'
}

# Maximum field lengths
MAX_LENGTHS = {
    'ingredient_name': 255,
    'sku': 100,
    'category': 100,
    'vendor': 255,
    'restaurant_id': 64,
    'strategy': 500,
}

# Recipe optimizer request limits
MIN_INGREDIENTS = 1
MAX_INGREDIENTS = 50

# Upper bounds on numeric input
MAX_PRICE = 1000000
MAX_QUANTITY = 1000000
MAX_FOOD_COST_PCT = 100
