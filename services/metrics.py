"""
Cost Metrics Service

Plain calculations for recipe costs and cost of goods sold.
"""


def calculate_recipe_cost(lines):
    """
    Cost of a recipe from its ingredient lines.

    Args:
        lines: Iterable of (quantity_used, unit_price) pairs

    Returns:
        Sum of quantity_used * unit_price
    """
    total = 0.0
    for quantity_used, unit_price in lines:
        total += quantity_used * unit_price
    return total


def calculate_ideal_sale_price(recipe_cost, target_food_cost_pct):
    """
    Menu price at which recipe_cost is exactly target_food_cost_pct of the price.

    Raises:
        ValueError: If the target is not strictly between 0 and 100
    """
    if target_food_cost_pct <= 0 or target_food_cost_pct >= 100:
        raise ValueError('Target food cost percentage must be between 0 and 100.')
    return recipe_cost / (target_food_cost_pct / 100)


def calculate_weekly_cogs(total_costs):
    """Cost of goods sold for a week: the sum of purchase totals."""
    return sum(total_costs, 0.0)
