"""
Models Package

Exports the database models and the db instance for use throughout the application.
"""

from .base import db

from .inventory import InventoryItem

__all__ = [
    'db',
    'InventoryItem',
]
