"""
Request Validation Module

Validates JSON bodies of the API endpoints. Every parser either returns
clean values or raises ValidationError with per-field messages; the
costing services themselves never range-check their input.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

from constants import (
    MAX_FOOD_COST_PCT,
    MAX_INGREDIENTS,
    MAX_LENGTHS,
    MAX_PRICE,
    MAX_QUANTITY,
    MIN_INGREDIENTS,
    VALID_CATEGORIES,
)
from services.insights import FinancialMetrics, LowStockItem, RecipeCostFlag
from .sanitizer import sanitize_text


class ValidationError(Exception):
    """Raised when a request body fails validation."""

    def __init__(self, message, details=None):
        super().__init__(message)
        self.details = details or {}


@dataclass(frozen=True)
class IngredientRequest:
    name: str
    weight: Optional[float] = None
    locked_qty: Optional[float] = None


@dataclass(frozen=True)
class OptimizeRequest:
    sales_price: float
    target_food_cost_pct: float
    ingredients: List[IngredientRequest]
    restaurant_id: Optional[str] = None
    strategy: Optional[str] = None


@dataclass(frozen=True)
class RecipeLine:
    name: str
    quantity_used: float


@dataclass(frozen=True)
class RecipeCostRequest:
    ingredients: List[RecipeLine]
    target_food_cost_pct: float
    restaurant_id: Optional[str] = None


_MISSING = object()


def _is_finite(value):
    # JSON integers can exceed the float range
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _number(payload, key, errors, field=None, required=True,
            min_val=None, exclusive_min=False, max_val=None):
    """Read a JSON number from payload[key], recording an error under field."""
    field = field or key
    value = payload.get(key, _MISSING)
    if value is _MISSING or value is None:
        if required:
            errors[field] = 'Required'
        return None

    if isinstance(value, bool) or not isinstance(value, (int, float)) or not _is_finite(value):
        errors[field] = 'Must be a number'
        return None

    value = float(value)
    if min_val is not None:
        if exclusive_min and value <= min_val:
            errors[field] = f'Must be greater than {min_val:g}'
            return None
        if not exclusive_min and value < min_val:
            errors[field] = f'Must be at least {min_val:g}'
            return None
    if max_val is not None and value > max_val:
        errors[field] = f'Must be at most {max_val:g}'
        return None
    return value


def _text(payload, key, errors, max_length, field=None, required=True):
    field = field or key
    value = payload.get(key)
    if value is None:
        if required:
            errors[field] = 'Required'
        return None
    if not isinstance(value, str):
        errors[field] = 'Must be a string'
        return None

    value = sanitize_text(value, max_length=max_length + 1)
    if not value:
        if required:
            errors[field] = 'Required'
        return None
    if len(value) > max_length:
        errors[field] = f'Cannot exceed {max_length} characters'
        return None
    return value


def _require_object(payload):
    if not isinstance(payload, dict):
        raise ValidationError('Invalid input', {'body': 'Expected a JSON object'})


def parse_optimize_request(payload):
    """
    Validate a recipe optimization request.

    Expected shape:
        {salesPrice, targetFoodCostPct,
         ingredients: [{name, weight?, lockedQty?}],
         restaurantId?, strategy?}

    Returns:
        OptimizeRequest

    Raises:
        ValidationError: If any field is missing or out of range
    """
    _require_object(payload)
    errors = {}

    sales_price = _number(payload, 'salesPrice', errors, min_val=0, exclusive_min=True, max_val=MAX_PRICE)
    target_pct = _number(payload, 'targetFoodCostPct', errors, min_val=0, exclusive_min=True,
                         max_val=MAX_FOOD_COST_PCT)
    restaurant_id = _text(payload, 'restaurantId', errors, MAX_LENGTHS['restaurant_id'], required=False)
    strategy = _text(payload, 'strategy', errors, MAX_LENGTHS['strategy'], required=False)

    raw_ingredients = payload.get('ingredients')
    ingredients = []
    if not isinstance(raw_ingredients, list):
        errors['ingredients'] = 'Must be a list'
    elif not MIN_INGREDIENTS <= len(raw_ingredients) <= MAX_INGREDIENTS:
        errors['ingredients'] = f'Must have between {MIN_INGREDIENTS} and {MAX_INGREDIENTS} ingredients'
    else:
        seen = set()
        for i, raw in enumerate(raw_ingredients):
            prefix = f'ingredients[{i}]'
            if not isinstance(raw, dict):
                errors[prefix] = 'Must be an object'
                continue

            name = _text(raw, 'name', errors, MAX_LENGTHS['ingredient_name'], field=f'{prefix}.name')
            weight = _number(raw, 'weight', errors, field=f'{prefix}.weight', required=False, min_val=0)
            locked_qty = _number(raw, 'lockedQty', errors, field=f'{prefix}.lockedQty', required=False,
                                 min_val=0, max_val=MAX_QUANTITY)

            if name is None:
                continue
            if name in seen:
                errors[f'{prefix}.name'] = f'Duplicate ingredient "{name}"'
                continue
            seen.add(name)
            ingredients.append(IngredientRequest(name=name, weight=weight, locked_qty=locked_qty))

    if errors:
        raise ValidationError('Invalid input', errors)

    return OptimizeRequest(
        sales_price=sales_price,
        target_food_cost_pct=target_pct,
        ingredients=ingredients,
        restaurant_id=restaurant_id,
        strategy=strategy,
    )


def parse_inventory_item(payload):
    """
    Validate an inventory purchase.

    Returns:
        dict of InventoryItem column values (total_cost included)

    Raises:
        ValidationError: If any field is missing or out of range
    """
    _require_object(payload)
    errors = {}

    name = _text(payload, 'name', errors, MAX_LENGTHS['ingredient_name'])
    sku = _text(payload, 'sku', errors, MAX_LENGTHS['sku'])
    quantity = _number(payload, 'quantity', errors, min_val=0, max_val=MAX_QUANTITY)
    unit_price = _number(payload, 'unitPrice', errors, min_val=0, max_val=MAX_PRICE)
    category = _text(payload, 'category', errors, MAX_LENGTHS['category'])
    vendor = _text(payload, 'vendor', errors, MAX_LENGTHS['vendor'], required=False)
    restaurant_id = _text(payload, 'restaurantId', errors, MAX_LENGTHS['restaurant_id'], required=False)

    if category is not None and category not in VALID_CATEGORIES:
        errors['category'] = f'Invalid category: {category}'

    if errors:
        raise ValidationError('Invalid input', errors)

    return {
        'name': name,
        'sku': sku,
        'quantity': quantity,
        'unit_price': unit_price,
        'total_cost': quantity * unit_price,
        'category': category,
        'vendor': vendor,
        'restaurant_id': restaurant_id,
    }


def _named_rows(payload, key, value_key, errors):
    rows = payload.get(key) or []
    if not isinstance(rows, list):
        errors[key] = 'Must be a list'
        return []

    parsed = []
    for i, row in enumerate(rows):
        field = f'{key}[{i}]'
        if not isinstance(row, dict):
            errors[field] = 'Must be an object'
            continue
        name = _text(row, 'name', errors, MAX_LENGTHS['ingredient_name'], field=f'{field}.name')
        value = _number(row, value_key, errors, field=f'{field}.{value_key}')
        if name is not None and value is not None:
            parsed.append((name, value))
    return parsed


def parse_financial_metrics(payload):
    """
    Validate the body of an insights request.

    Returns:
        services.insights.FinancialMetrics

    Raises:
        ValidationError: If any figure is missing or not a number
    """
    _require_object(payload)
    errors = {}

    figures = {
        attr: _number(payload, key, errors)
        for attr, key in (
            ('revenue', 'revenue'),
            ('expenses', 'expenses'),
            ('net_profit', 'netProfit'),
            ('cogs', 'cogs'),
            ('labor_cost', 'laborCost'),
            ('revenue_change', 'revenueChange'),
        )
    }
    recipes = _named_rows(payload, 'highFoodCostRecipes', 'costPercentage', errors)
    low_stock = _named_rows(payload, 'lowInventoryItems', 'quantity', errors)

    if errors:
        raise ValidationError('Invalid input', errors)

    return FinancialMetrics(
        high_food_cost_recipes=[RecipeCostFlag(name, pct) for name, pct in recipes],
        low_inventory_items=[LowStockItem(name, qty) for name, qty in low_stock],
        **figures,
    )


def parse_recipe_cost_request(payload):
    """
    Validate a recipe costing request.

    Expected shape:
        {ingredients: [{name, quantityUsed}], targetFoodCostPct, restaurantId?}

    Returns:
        RecipeCostRequest

    Raises:
        ValidationError: If any field is missing or out of range
    """
    _require_object(payload)
    errors = {}

    target_pct = _number(payload, 'targetFoodCostPct', errors, min_val=0, exclusive_min=True,
                         max_val=MAX_FOOD_COST_PCT)
    # A 100% target has no sale price
    if target_pct is not None and target_pct >= MAX_FOOD_COST_PCT:
        errors['targetFoodCostPct'] = f'Must be less than {MAX_FOOD_COST_PCT}'
    restaurant_id = _text(payload, 'restaurantId', errors, MAX_LENGTHS['restaurant_id'], required=False)

    raw_ingredients = payload.get('ingredients')
    lines = []
    if not isinstance(raw_ingredients, list):
        errors['ingredients'] = 'Must be a list'
    elif not MIN_INGREDIENTS <= len(raw_ingredients) <= MAX_INGREDIENTS:
        errors['ingredients'] = f'Must have between {MIN_INGREDIENTS} and {MAX_INGREDIENTS} ingredients'
    else:
        for i, raw in enumerate(raw_ingredients):
            prefix = f'ingredients[{i}]'
            if not isinstance(raw, dict):
                errors[prefix] = 'Must be an object'
                continue
            name = _text(raw, 'name', errors, MAX_LENGTHS['ingredient_name'], field=f'{prefix}.name')
            quantity = _number(raw, 'quantityUsed', errors, field=f'{prefix}.quantityUsed',
                               min_val=0, exclusive_min=True, max_val=MAX_QUANTITY)
            if name is not None and quantity is not None:
                lines.append(RecipeLine(name=name, quantity_used=quantity))

    if errors:
        raise ValidationError('Invalid input', errors)

    return RecipeCostRequest(ingredients=lines, target_food_cost_pct=target_pct, restaurant_id=restaurant_id)
