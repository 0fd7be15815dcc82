"""
Tests for the local budget allocator.
Run with: pytest tests/test_allocation.py
"""

import pytest

from services.allocation import IngredientInput, allocate, nominal_budget


def by_name(result):
    return {ing.name: ing for ing in result.ingredients}


def weighted_salad():
    return [
        IngredientInput('Chicken', average_unit_cost=1, weight=0.5),
        IngredientInput('Cheese', average_unit_cost=1, weight=0.3),
        IngredientInput('Lettuce', average_unit_cost=1, weight=0.2),
    ]


def test_weighted_split():
    """$10 dish at 30% gives a $3 budget split 50/30/20."""
    result = allocate(10, 30, weighted_salad())
    lines = by_name(result)

    assert lines['Chicken'].cost == pytest.approx(1.5)
    assert lines['Cheese'].cost == pytest.approx(0.9)
    assert lines['Lettuce'].cost == pytest.approx(0.6)
    assert result.total_cost == pytest.approx(3.0)
    assert result.cost_percentage == pytest.approx(30.0)
    assert result.over_budget is False


def test_locked_ingredient_paid_first():
    items = weighted_salad()
    items[0] = IngredientInput('Chicken', average_unit_cost=1, weight=0.5, locked_qty=2)

    result = allocate(10, 30, items)
    lines = by_name(result)

    assert lines['Chicken'].quantity == 2
    assert lines['Chicken'].cost == 2
    # Remaining $1 split 0.3 / 0.2
    assert lines['Cheese'].cost == pytest.approx(0.6)
    assert lines['Lettuce'].cost == pytest.approx(0.4)
    assert result.total_cost == pytest.approx(3.0)


def test_zero_unit_cost_keeps_cost_share():
    items = [
        IngredientInput('Salt', average_unit_cost=0, weight=1),
        IngredientInput('Beef', average_unit_cost=2, weight=1),
    ]
    lines = by_name(allocate(20, 25, items))

    assert lines['Salt'].quantity == 0
    assert lines['Salt'].cost == pytest.approx(2.5)
    assert lines['Beef'].quantity == pytest.approx(1.25)


def test_locked_costs_over_budget_go_negative():
    items = [
        IngredientInput('Lobster', average_unit_cost=10, locked_qty=5),
        IngredientInput('Butter', average_unit_cost=1, weight=1),
    ]
    result = allocate(10, 30, items)
    lines = by_name(result)

    assert lines['Lobster'].quantity == 5
    assert lines['Lobster'].cost == 50
    assert lines['Butter'].cost == pytest.approx(3 - 50)
    assert lines['Butter'].quantity == pytest.approx(3 - 50)
    # The negative share absorbs the overrun
    assert result.total_cost == pytest.approx(3.0)
    assert result.over_budget == (result.total_cost > 3.0)


def test_locked_only_over_budget():
    items = [IngredientInput('Lobster', average_unit_cost=10, locked_qty=5)]
    result = allocate(10, 30, items)

    assert result.total_cost == 50
    assert result.cost_percentage == pytest.approx(500.0)
    assert result.over_budget is True


def test_even_split_without_weights():
    items = [IngredientInput(name, average_unit_cost=2) for name in ('Rice', 'Beans', 'Salsa', 'Tortilla')]
    result = allocate(12, 50, items)

    for line in result.ingredients:
        assert line.cost == pytest.approx(6 / 4)
        assert line.quantity == pytest.approx(6 / 4 / 2)


def test_zero_weights_fall_back_to_even_split():
    items = [
        IngredientInput('Rice', average_unit_cost=1, weight=0),
        IngredientInput('Beans', average_unit_cost=1, weight=0),
    ]
    lines = by_name(allocate(10, 20, items))

    assert lines['Rice'].cost == pytest.approx(1.0)
    assert lines['Beans'].cost == pytest.approx(1.0)


def test_zero_weight_gets_nothing_when_others_weighted():
    items = [
        IngredientInput('Rice', average_unit_cost=1, weight=0),
        IngredientInput('Beans', average_unit_cost=1, weight=2),
        IngredientInput('Cilantro', average_unit_cost=1),
    ]
    lines = by_name(allocate(10, 20, items))

    assert lines['Rice'].cost == 0
    assert lines['Cilantro'].cost == 0
    assert lines['Beans'].cost == pytest.approx(2.0)


def test_all_locked():
    items = [
        IngredientInput('Bun', average_unit_cost=0.5, locked_qty=1),
        IngredientInput('Patty', average_unit_cost=2.25, locked_qty=1),
    ]
    result = allocate(9, 30, items)

    assert result.total_cost == pytest.approx(2.75)
    assert result.over_budget is True
    assert [line.quantity for line in result.ingredients] == [1, 1]


def test_lines_keep_input_order():
    items = [
        IngredientInput('Cheese', average_unit_cost=1, weight=1),
        IngredientInput('Chicken', average_unit_cost=1, locked_qty=1),
        IngredientInput('Lettuce', average_unit_cost=1, weight=1),
    ]
    result = allocate(10, 30, items)
    assert [line.name for line in result.ingredients] == ['Cheese', 'Chicken', 'Lettuce']


def test_result_invariants_hold_exactly():
    items = [
        IngredientInput('Shrimp', average_unit_cost=0.83, locked_qty=7),
        IngredientInput('Garlic', average_unit_cost=0.07, weight=0.15),
        IngredientInput('Pasta', average_unit_cost=0.12, weight=0.55),
        IngredientInput('Parmesan', average_unit_cost=0.41),
    ]
    sales_price, target = 23.5, 28
    result = allocate(sales_price, target, items)

    assert sum(line.cost for line in result.ingredients) == result.total_cost
    assert result.cost_percentage == result.total_cost / sales_price * 100
    assert result.over_budget == (result.total_cost > sales_price * target / 100)


def test_allocate_is_pure():
    items = weighted_salad()
    snapshot = list(items)

    first = allocate(14.25, 32, items)
    second = allocate(14.25, 32, items)

    assert first == second
    assert items == snapshot


def test_to_dict_uses_api_field_names():
    data = allocate(10, 30, weighted_salad()).to_dict()

    assert set(data) == {'ingredients', 'totalCost', 'costPercentage', 'overBudget'}
    assert data['ingredients'][0] == {'name': 'Chicken', 'quantity': 1.5, 'cost': 1.5}


def test_nominal_budget():
    assert nominal_budget(10, 30) == 3.0
    assert nominal_budget(18, 100) == 18.0
