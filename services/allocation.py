"""
Recipe Budget Allocation Service

Splits a recipe's food-cost budget across its ingredients.

The budget is the share of the sale price the kitchen is willing to spend
on food (sale price * target food cost %). Locked ingredients have a fixed
quantity and are paid for first; whatever budget remains is divided among
the unlocked ingredients in proportion to their weights.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class IngredientInput:
    """
    One ingredient of an allocation request.

    weight and locked_qty are presence-sensitive: None means "not given",
    which is different from 0. A weight of 0 means the ingredient gets no
    share of the remaining budget; a missing weight on every unlocked
    ingredient means the budget is split evenly.
    """
    name: str
    average_unit_cost: float = 0.0
    weight: Optional[float] = None
    locked_qty: Optional[float] = None

    @property
    def is_locked(self):
        return self.locked_qty is not None


@dataclass(frozen=True)
class AllocatedIngredient:
    name: str
    quantity: float
    cost: float

    def to_dict(self):
        return {'name': self.name, 'quantity': self.quantity, 'cost': self.cost}


@dataclass(frozen=True)
class AllocationResult:
    ingredients: List[AllocatedIngredient]
    total_cost: float
    cost_percentage: float
    over_budget: bool

    def to_dict(self):
        """Serialize to the JSON shape returned by the API."""
        return {
            'ingredients': [ing.to_dict() for ing in self.ingredients],
            'totalCost': self.total_cost,
            'costPercentage': self.cost_percentage,
            'overBudget': self.over_budget,
        }


def nominal_budget(sales_price, target_food_cost_pct):
    """Cost ceiling implied by the target food cost percentage."""
    return sales_price * target_food_cost_pct / 100


def summarize(ingredients, sales_price, target_food_cost_pct):
    """
    Build an AllocationResult from per-ingredient lines.

    Totals and ratios are always derived here from the local sale price and
    target, never taken from whoever produced the lines.
    """
    total_cost = 0.0
    for ing in ingredients:
        total_cost += ing.cost

    return AllocationResult(
        ingredients=list(ingredients),
        total_cost=total_cost,
        cost_percentage=total_cost / sales_price * 100,
        over_budget=total_cost > nominal_budget(sales_price, target_food_cost_pct),
    )


def allocate(sales_price: float, target_food_cost_pct: float,
             ingredients: Sequence[IngredientInput]) -> AllocationResult:
    """
    Allocate the food-cost budget across ingredients.

    Steps:
    1. budget = sales_price * target_food_cost_pct / 100
    2. Locked ingredients cost locked_qty * average_unit_cost. That cost is
       taken out of the budget, which may go negative.
    3. The remaining budget is split over unlocked ingredients by
       weight / total_weight, or evenly when no unlocked weight is > 0.
    4. quantity = allocated cost / average_unit_cost. A unit cost of 0
       gives quantity 0 but the ingredient still carries its cost share.

    Inputs are not range-checked; callers validate sale price, target and
    ingredient list first. Lines come back in input order.

    Args:
        sales_price: Menu price of the dish (> 0)
        target_food_cost_pct: Target food cost, percent in (0, 100]
        ingredients: IngredientInput rows, names unique

    Returns:
        AllocationResult with one line per input ingredient
    """
    remaining_budget = nominal_budget(sales_price, target_food_cost_pct)

    locked = [ing for ing in ingredients if ing.is_locked]
    unlocked = [ing for ing in ingredients if not ing.is_locked]

    lines = {}

    for ing in locked:
        cost = ing.locked_qty * ing.average_unit_cost
        lines[ing.name] = AllocatedIngredient(ing.name, ing.locked_qty, cost)
        remaining_budget -= cost

    if unlocked:
        total_weight = sum(ing.weight or 0 for ing in unlocked)

        for ing in unlocked:
            if total_weight > 0:
                share = (ing.weight or 0) / total_weight
            else:
                share = 1 / len(unlocked)

            allocation = remaining_budget * share
            if ing.average_unit_cost > 0:
                quantity = allocation / ing.average_unit_cost
            else:
                quantity = 0.0
            lines[ing.name] = AllocatedIngredient(ing.name, quantity, allocation)

    ordered = [lines[ing.name] for ing in ingredients]
    return summarize(ordered, sales_price, target_food_cost_pct)
