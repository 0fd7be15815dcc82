"""
Language-Model Advisor

Asks an external language model to split a recipe budget, and falls back
to the local allocator whenever the model is missing, slow or wrong.

The model is treated as an untrusted text source: its reply must parse as
an allocation covering exactly the requested ingredients, and only its
quantity/cost split is used. Cost percentage and over-budget are always
recomputed locally.
"""

import asyncio
import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from openai import AsyncOpenAI, OpenAIError

from .allocation import (
    AllocatedIngredient,
    AllocationResult,
    IngredientInput,
    allocate,
    nominal_budget,
)

logger = logging.getLogger(__name__)


class AdvisorError(Exception):
    """Base class for failures of the text-generation service."""
    pass


class ServiceUnavailable(AdvisorError):
    """Raised when the service cannot be reached, times out or rejects the call."""
    pass


class MalformedResponse(AdvisorError):
    """Raised when the service answers with text that is not a usable allocation."""
    pass


ALLOCATION_SYSTEM_PROMPT = (
    'You are a restaurant chef and food cost consultant. '
    'You build recipes that hit a food cost target. '
    'Reply with JSON only, no commentary.'
)

INSIGHTS_SYSTEM_PROMPT = (
    'You are a financial advisor for restaurants. Provide 3-5 concise, '
    'actionable insights based on the provided financial data. Focus on cost '
    'optimization, revenue opportunities, and operational improvements.'
)


@dataclass(frozen=True)
class AdvisorSettings:
    """Read-only advisor configuration, built once when the app starts."""
    api_key: Optional[str] = None
    model: str = 'gpt-4'
    temperature: float = 0.2
    max_tokens: int = 800
    timeout: float = 20.0

    @classmethod
    def from_config(cls, config):
        """Build settings from a Flask config mapping."""
        return cls(
            api_key=config.get('OPENAI_API_KEY') or None,
            model=config.get('OPENAI_MODEL', 'gpt-4'),
            temperature=config.get('ADVISOR_TEMPERATURE', 0.2),
            max_tokens=config.get('ADVISOR_MAX_TOKENS', 800),
            timeout=config.get('ADVISOR_TIMEOUT', 20.0),
        )


class TextGenerator:
    """
    Interface for the text-generation service.

    Both methods return the raw reply text and raise ServiceUnavailable or
    MalformedResponse on failure. Implementations make one attempt only.
    """

    async def request_allocation(self, prompt):
        raise NotImplementedError

    async def request_insights(self, prompt):
        raise NotImplementedError


class OpenAIGenerator(TextGenerator):
    """TextGenerator backed by the OpenAI chat completions API."""

    def __init__(self, settings):
        self.settings = settings

    async def request_allocation(self, prompt):
        return await self._complete(ALLOCATION_SYSTEM_PROMPT, prompt, temperature=self.settings.temperature)

    async def request_insights(self, prompt):
        return await self._complete(INSIGHTS_SYSTEM_PROMPT, prompt, temperature=0.7)

    async def _complete(self, system_prompt, prompt, temperature):
        messages = [
            {'role': 'system', 'content': system_prompt},
            {'role': 'user', 'content': prompt},
        ]
        try:
            # A client per call: Flask may run each async view on its own event loop
            async with AsyncOpenAI(api_key=self.settings.api_key,
                                   timeout=self.settings.timeout,
                                   max_retries=0) as client:
                response = await client.chat.completions.create(
                    model=self.settings.model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=self.settings.max_tokens,
                )
        except OpenAIError as e:
            raise ServiceUnavailable(str(e)) from e

        if not response.choices:
            raise MalformedResponse('Reply had no choices')
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise MalformedResponse('Reply was empty')
        return content


def build_generator(settings):
    """
    Create the production TextGenerator, or None when AI is disabled.

    A missing API key is an expected configuration, not an error.
    """
    if not settings.api_key:
        logger.warning('OpenAI API key is not set. AI features will be disabled.')
        return None
    try:
        return OpenAIGenerator(settings)
    except Exception:
        logger.exception('Failed to initialize OpenAI generator')
        return None


# ============================================
# PROMPT AND REPLY HANDLING
# ============================================

def _fmt(value):
    return f'{value:g}'


def build_allocation_prompt(sales_price, target_food_cost_pct, ingredients, strategy=None):
    """Describe an allocation request in plain language for the model."""
    budget = nominal_budget(sales_price, target_food_cost_pct)
    lines = [
        f'Build a recipe that sells for ${sales_price:.2f} with a target food cost '
        f'of {_fmt(target_food_cost_pct)}% (ingredient budget ${budget:.2f}).',
        '',
        'Ingredients (average cost per unit):',
    ]
    for ing in ingredients:
        line = f'- {ing.name}: ${ing.average_unit_cost:.4f} per unit'
        if ing.locked_qty is not None:
            line += f', quantity locked at {_fmt(ing.locked_qty)}'
        elif ing.weight is not None:
            line += f', relative weight {_fmt(ing.weight)}'
        lines.append(line)

    if strategy:
        lines += ['', f'Strategy: {strategy}']

    lines += [
        '',
        'Locked quantities must not change. Spend the rest of the budget on the '
        'other ingredients.',
        'Respond with a JSON object of the form '
        '{"ingredients": [{"name": string, "quantity": number, "cost": number}], '
        '"totalCost": number} with exactly one entry per ingredient listed above.',
    ]
    return '\n'.join(lines)


_FENCE_RE = re.compile(r'^```[a-zA-Z]*\s*|\s*```$')


def _is_number(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def parse_allocation(text, expected_names):
    """
    Parse a model reply into allocation lines and a total cost.

    Accepts bare JSON or JSON wrapped in a markdown code fence.

    Args:
        text: Raw reply text
        expected_names: Ingredient names of the request, in request order

    Returns:
        (lines, total_cost) with lines ordered like expected_names

    Raises:
        MalformedResponse: If the reply is not JSON of the expected shape
    """
    if not isinstance(text, str):
        raise MalformedResponse('Reply is not text')

    cleaned = _FENCE_RE.sub('', text.strip())
    start = cleaned.find('{')
    end = cleaned.rfind('}')
    if start == -1 or end < start:
        raise MalformedResponse('No JSON object in reply')

    try:
        data = json.loads(cleaned[start:end + 1])
    except ValueError as e:
        raise MalformedResponse(f'Invalid JSON: {e}') from e

    if not isinstance(data, dict):
        raise MalformedResponse('Reply JSON is not an object')

    items = data.get('ingredients')
    total_cost = data.get('totalCost')
    if not isinstance(items, list):
        raise MalformedResponse('Missing "ingredients" list')
    if not _is_number(total_cost):
        raise MalformedResponse('Missing or non-numeric "totalCost"')

    by_name = {}
    for item in items:
        if not isinstance(item, dict):
            raise MalformedResponse('Ingredient entry is not an object')
        name = item.get('name')
        quantity = item.get('quantity')
        cost = item.get('cost')
        if not isinstance(name, str) or not _is_number(quantity) or not _is_number(cost):
            raise MalformedResponse(f'Bad ingredient entry: {item!r}')
        if name in by_name:
            raise MalformedResponse(f'Duplicate ingredient "{name}"')
        by_name[name] = AllocatedIngredient(name, float(quantity), float(cost))

    if set(by_name) != set(expected_names):
        raise MalformedResponse('Ingredient names do not match the request')

    return [by_name[name] for name in expected_names], float(total_cost)


# ============================================
# ADVISORY ALLOCATOR
# ============================================

class AdvisoryAllocator:
    """
    Budget allocator that consults a language model first.

    Worst case is identical to services.allocation.allocate(): every
    failure of the model falls back to the local computation.
    """

    def __init__(self, generator: Optional[TextGenerator] = None, timeout: Optional[float] = None):
        self.generator = generator
        self.timeout = timeout

    @property
    def enabled(self):
        return self.generator is not None

    async def allocate_with_advice(self, sales_price: float, target_food_cost_pct: float,
                                   ingredients: Sequence[IngredientInput],
                                   strategy: Optional[str] = None) -> AllocationResult:
        if self.generator is None:
            return allocate(sales_price, target_food_cost_pct, ingredients)

        prompt = build_allocation_prompt(sales_price, target_food_cost_pct, ingredients, strategy)
        try:
            reply = await asyncio.wait_for(self.generator.request_allocation(prompt), timeout=self.timeout)
            lines, total_cost = parse_allocation(reply, [ing.name for ing in ingredients])
        except (AdvisorError, asyncio.TimeoutError) as e:
            logger.warning('AI allocation failed, using local allocation: %s', e)
            return allocate(sales_price, target_food_cost_pct, ingredients)
        except Exception:
            logger.exception('Unexpected error from AI allocation, using local allocation')
            return allocate(sales_price, target_food_cost_pct, ingredients)

        return AllocationResult(
            ingredients=lines,
            total_cost=total_cost,
            cost_percentage=total_cost / sales_price * 100,
            over_budget=total_cost > nominal_budget(sales_price, target_food_cost_pct),
        )
