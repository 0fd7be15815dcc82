"""
Inventory Models

Contains the InventoryItem model: one row per purchase of an item.
Average unit prices across purchases feed recipe budget allocation.
"""

from datetime import datetime, timezone

from .base import db


class InventoryItem(db.Model):
    """A purchased inventory line (what was bought, how much, at what price)."""
    __tablename__ = 'inventory_item'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    sku = db.Column(db.String(100), nullable=False)
    category = db.Column(db.String(100), default='Other', index=True)
    vendor = db.Column(db.String(255), nullable=True)

    quantity = db.Column(db.Float, default=0.0)
    # Price paid per ONE unit
    unit_price = db.Column(db.Float, default=0.0)
    # quantity * unit_price, stored so weekly COGS can be summed directly
    total_cost = db.Column(db.Float, default=0.0)

    # Optional tenant scope; scoped lookups only see rows with a matching id
    restaurant_id = db.Column(db.String(64), nullable=True, index=True)
    purchased_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'sku': self.sku,
            'category': self.category,
            'vendor': self.vendor,
            'quantity': self.quantity,
            'unitPrice': self.unit_price,
            'totalCost': self.total_cost,
            'restaurantId': self.restaurant_id,
            'purchasedAt': self.purchased_at.isoformat() if self.purchased_at else None,
        }
