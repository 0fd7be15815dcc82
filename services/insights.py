"""
Insights Service

Turns a restaurant's monthly numbers into a short list of actionable
insights, from the language model when available and from fixed rules
otherwise.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List

from .advisor import AdvisorError

logger = logging.getLogger(__name__)

MAX_INSIGHTS = 5


@dataclass(frozen=True)
class RecipeCostFlag:
    name: str
    cost_percentage: float


@dataclass(frozen=True)
class LowStockItem:
    name: str
    quantity: float


@dataclass(frozen=True)
class FinancialMetrics:
    """Monthly figures; cogs, labor_cost and revenue_change are percentages."""
    revenue: float
    expenses: float
    net_profit: float
    cogs: float
    labor_cost: float
    revenue_change: float
    high_food_cost_recipes: List[RecipeCostFlag] = field(default_factory=list)
    low_inventory_items: List[LowStockItem] = field(default_factory=list)


def default_insights(metrics):
    """Rule-based insights used when the model is unavailable."""
    insights = []

    if metrics.net_profit < metrics.revenue * 0.1:
        insights.append('• Consider reviewing pricing strategy as net profit margin is below 10%')

    if metrics.cogs > 35:
        insights.append(f'• High COGS ({metrics.cogs:g}% of revenue). Review ingredient costs and portion sizes.')

    if metrics.labor_cost > 30:
        insights.append(f'• Labor costs ({metrics.labor_cost:g}% of revenue) are above industry average. '
                        'Consider optimizing staff scheduling.')

    if metrics.revenue_change < 0:
        insights.append(f'• Revenue decreased by {abs(metrics.revenue_change):g}% from last month. '
                        'Investigate potential causes.')

    insights.append('• Consider implementing daily specials to move inventory with lower turnover')
    insights.append('• Review portion sizes and prep waste to reduce food costs')

    return insights[:MAX_INSIGHTS]


def build_insights_prompt(metrics):
    lines = [
        'Here are the current financial metrics for the restaurant:',
        f'- Monthly Revenue: ${metrics.revenue:,.2f}',
        f'- Monthly Expenses: ${metrics.expenses:,.2f}',
        f'- Net Profit: ${metrics.net_profit:,.2f}',
        f'- Cost of Goods Sold (COGS): {metrics.cogs:g}% of revenue',
        f'- Labor Cost: {metrics.labor_cost:g}% of revenue',
        f'- Revenue Change from last month: {metrics.revenue_change:g}%',
    ]

    if metrics.high_food_cost_recipes:
        lines += ['', 'High Food Cost Recipes (cost > 30% of menu price):']
        lines += [f'- {r.name}: {r.cost_percentage:g}%' for r in metrics.high_food_cost_recipes]

    if metrics.low_inventory_items:
        lines += ['', 'Low Inventory Items (quantity < 10):']
        lines += [f'- {i.name}: {i.quantity:g} remaining' for i in metrics.low_inventory_items]

    lines += [
        '',
        'Based on this data, please provide 3-5 specific, actionable insights to improve profitability.',
        'Focus on:',
        '1. Cost reduction opportunities',
        '2. Revenue optimization',
        '3. Operational improvements',
        '4. Menu engineering suggestions',
        '',
        'Format each insight as a concise bullet point starting with "• "',
    ]
    return '\n'.join(lines)


def parse_insights(text):
    """Split a model reply into at most MAX_INSIGHTS non-empty lines, dropping notes."""
    if not isinstance(text, str):
        return []
    lines = [line.strip() for line in text.splitlines()]
    insights = [line for line in lines if line and not line.startswith('Note:')]
    return insights[:MAX_INSIGHTS]


class InsightAdvisor:
    """Produces insights from a TextGenerator, falling back to default_insights()."""

    def __init__(self, generator=None, timeout=None):
        self.generator = generator
        self.timeout = timeout

    async def get_insights(self, metrics):
        if self.generator is None:
            return default_insights(metrics)

        try:
            reply = await asyncio.wait_for(
                self.generator.request_insights(build_insights_prompt(metrics)), timeout=self.timeout
            )
        except (AdvisorError, asyncio.TimeoutError) as e:
            logger.warning('AI insights failed, using default insights: %s', e)
            return default_insights(metrics)
        except Exception:
            logger.exception('Unexpected error generating AI insights')
            return default_insights(metrics)

        insights = parse_insights(reply)
        return insights or default_insights(metrics)
