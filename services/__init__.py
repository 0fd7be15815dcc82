"""
Services Package

Business logic modules for the back-office application.
"""

from .allocation import (
    IngredientInput,
    AllocatedIngredient,
    AllocationResult,
    nominal_budget,
    allocate,
)

from .advisor import (
    AdvisorError,
    ServiceUnavailable,
    MalformedResponse,
    AdvisorSettings,
    TextGenerator,
    OpenAIGenerator,
    AdvisoryAllocator,
    build_generator,
    build_allocation_prompt,
    parse_allocation,
)

from .insights import (
    FinancialMetrics,
    InsightAdvisor,
    default_insights,
)

from .metrics import (
    calculate_recipe_cost,
    calculate_ideal_sale_price,
    calculate_weekly_cogs,
)

from .pricing import average_unit_costs, weekly_cogs

__all__ = [
    # Allocation
    'IngredientInput',
    'AllocatedIngredient',
    'AllocationResult',
    'nominal_budget',
    'allocate',
    # Advisor
    'AdvisorError',
    'ServiceUnavailable',
    'MalformedResponse',
    'AdvisorSettings',
    'TextGenerator',
    'OpenAIGenerator',
    'AdvisoryAllocator',
    'build_generator',
    'build_allocation_prompt',
    'parse_allocation',
    # Insights
    'FinancialMetrics',
    'InsightAdvisor',
    'default_insights',
    # Metrics
    'calculate_recipe_cost',
    'calculate_ideal_sale_price',
    'calculate_weekly_cogs',
    # Pricing
    'average_unit_costs',
    'weekly_cogs',
]
