import logging
import sqlite3

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_migrate import Migrate
from sqlalchemy import event
from sqlalchemy.engine import Engine

from config import get_config
from constants import MAX_LENGTHS
from models import db, InventoryItem
from services import (
    AdvisorSettings,
    AdvisoryAllocator,
    IngredientInput,
    InsightAdvisor,
    average_unit_costs,
    build_generator,
    calculate_ideal_sale_price,
    calculate_recipe_cost,
    weekly_cogs,
)
from utils import (
    ValidationError,
    parse_financial_metrics,
    parse_inventory_item,
    parse_optimize_request,
    parse_recipe_cost_request,
    sanitize_text,
)

logger = logging.getLogger(__name__)

migrate = Migrate()

api = Blueprint('api', __name__, url_prefix='/api')


# ============================================
# ROUTES - RECIPE OPTIMIZER
# ============================================

@api.route('/optimize-recipe', methods=['POST'])
async def optimize_recipe():
    """
    Allocate a recipe's food-cost budget across its ingredients.

    Unit costs come from the average purchase price in inventory; the
    allocation itself comes from the advisory allocator, which never
    fails once the request is valid.
    """
    req = parse_optimize_request(request.get_json(silent=True))

    try:
        costs = average_unit_costs([ing.name for ing in req.ingredients], req.restaurant_id)
        items = [
            IngredientInput(
                name=ing.name,
                average_unit_cost=costs[ing.name],
                weight=ing.weight,
                locked_qty=ing.locked_qty,
            )
            for ing in req.ingredients
        ]

        allocator = current_app.extensions['allocator']
        result = await allocator.allocate_with_advice(
            req.sales_price, req.target_food_cost_pct, items, strategy=req.strategy
        )
    except Exception:
        logger.exception('Optimize recipe error')
        return jsonify({'error': 'Failed to optimize recipe'}), 500

    return jsonify(result.to_dict())


@api.route('/recipe-cost', methods=['POST'])
def recipe_cost():
    """Cost a recipe from average purchase prices and suggest a menu price."""
    req = parse_recipe_cost_request(request.get_json(silent=True))

    costs = average_unit_costs({line.name for line in req.ingredients}, req.restaurant_id)
    lines = [
        {
            'name': line.name,
            'quantityUsed': line.quantity_used,
            'unitCost': costs[line.name],
            'cost': line.quantity_used * costs[line.name],
        }
        for line in req.ingredients
    ]
    total = calculate_recipe_cost((line.quantity_used, costs[line.name]) for line in req.ingredients)

    return jsonify({
        'ingredients': lines,
        'recipeCost': total,
        'targetFoodCostPct': req.target_food_cost_pct,
        'idealSalePrice': calculate_ideal_sale_price(total, req.target_food_cost_pct),
    })


# ============================================
# ROUTES - INVENTORY
# ============================================

@api.route('/inventory', methods=['POST'])
def inventory_add():
    """Record an inventory purchase."""
    values = parse_inventory_item(request.get_json(silent=True))

    item = InventoryItem(**values)
    db.session.add(item)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception('Failed to create inventory item')
        return jsonify({'error': 'Failed to create inventory item'}), 500

    logger.info('Recorded purchase of %s (%s @ %.2f)', item.name, item.quantity, item.unit_price)
    return jsonify({'data': item.to_dict()}), 201


@api.route('/inventory/weekly-cogs')
def inventory_weekly_cogs():
    """Cost of goods sold from purchases in the last seven days."""
    restaurant_id = sanitize_text(request.args.get('restaurantId'), max_length=MAX_LENGTHS['restaurant_id'])
    week_start, week_end, cogs = weekly_cogs(restaurant_id or None)
    return jsonify({
        'weekStart': week_start.isoformat(),
        'weekEnd': week_end.isoformat(),
        'cogs': cogs,
    })


# ============================================
# ROUTES - INSIGHTS
# ============================================

@api.route('/insights', methods=['POST'])
async def insights():
    metrics = parse_financial_metrics(request.get_json(silent=True))
    advisor = current_app.extensions['insights']
    return jsonify({'insights': await advisor.get_insights(metrics)})


@api.route('/health')
def health():
    return jsonify({
        'status': 'ok',
        'advisor': current_app.extensions['allocator'].enabled,
    })


def handle_validation_error(error):
    return jsonify({'error': str(error), 'details': error.details}), 400


# ============================================
# APPLICATION FACTORY
# ============================================

def create_app(config_name=None):
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    db.init_app(app)
    migrate.init_app(app, db)

    # Built once; read-only for the life of the process
    settings = AdvisorSettings.from_config(app.config)
    generator = build_generator(settings)
    app.extensions['allocator'] = AdvisoryAllocator(generator, timeout=settings.timeout)
    app.extensions['insights'] = InsightAdvisor(generator, timeout=settings.timeout)

    app.register_blueprint(api)
    app.register_error_handler(ValidationError, handle_validation_error)
    return app


# ============================================
# INITIALIZE DATABASE
# ============================================

@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    # Enable SQLite foreign key enforcement
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db(app):
    with app.app_context():
        db.create_all()


app = create_app()


if __name__ == '__main__':
    init_db(app)
    # host='0.0.0.0' allows access from other devices on the network
    app.run(debug=True, host='0.0.0.0', port=5000, use_reloader=False)
