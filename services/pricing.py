"""
Inventory Pricing Service

Resolves ingredient names to average unit costs from purchase history and
totals recent purchases into cost of goods sold.
"""

from datetime import datetime, timedelta, timezone

from models import db, InventoryItem
from .metrics import calculate_weekly_cogs


def average_unit_costs(names, restaurant_id=None):
    """
    Average unit price per ingredient name across all recorded purchases.

    Names with no purchases map to 0.0, which the allocator treats as an
    unknown (free) cost.

    Args:
        names: Ingredient names to look up
        restaurant_id: Optional restaurant scope

    Returns:
        dict of name -> average unit price
    """
    names = list(names)
    costs = {name: 0.0 for name in names}
    if not names:
        return costs

    query = db.session.query(
        InventoryItem.name, db.func.avg(InventoryItem.unit_price)
    ).filter(InventoryItem.name.in_(names))
    if restaurant_id:
        query = query.filter(InventoryItem.restaurant_id == restaurant_id)

    for name, avg_price in query.group_by(InventoryItem.name).all():
        costs[name] = float(avg_price or 0.0)
    return costs


def weekly_cogs(restaurant_id=None, now=None):
    """
    Cost of goods sold over the seven days ending at now.

    Args:
        restaurant_id: Optional restaurant scope
        now: End of the window (defaults to the current UTC time)

    Returns:
        (week_start, week_end, cogs)
    """
    week_end = now or datetime.now(timezone.utc)
    week_start = week_end - timedelta(days=7)

    query = db.session.query(InventoryItem.total_cost).filter(
        InventoryItem.purchased_at > week_start,
        InventoryItem.purchased_at <= week_end,
    )
    if restaurant_id:
        query = query.filter(InventoryItem.restaurant_id == restaurant_id)

    cogs = calculate_weekly_cogs(total or 0.0 for (total,) in query.all())
    return week_start, week_end, cogs
