# Utility modules for the back-office API
from .sanitizer import sanitize_text
from .validation import (
    ValidationError,
    parse_optimize_request,
    parse_inventory_item,
    parse_financial_metrics,
    parse_recipe_cost_request,
)
