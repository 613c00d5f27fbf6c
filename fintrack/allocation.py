"""Greedy budget allocation and rule-based recommendations.

A fixed total budget is handed out to categories strictly in declared
priority order.  Each category takes what it needs while money remains;
the first one that cannot be fully funded receives the remainder and
every later category gets nothing.  There is no rebalancing.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Sequence, Union

import pandas as pd

from .models import BudgetAllocation, BudgetCategory
from .numeric import round_half_up, safe_ratio
from .settings import get_recommendation_config

logger = logging.getLogger(__name__)

CategoryInput = Union[BudgetCategory, Mapping[str, Any]]
AllocationInput = Union[BudgetAllocation, Mapping[str, Any]]


def optimize_budget(total_budget: float, categories: Iterable[CategoryInput]) -> List[BudgetAllocation]:
    """Allocate ``total_budget`` across categories, priority 1 first.

    Args:
        total_budget: Money available.  Not validated; a negative total
            simply funds nothing.
        categories: ``BudgetCategory`` instances or mappings with
            ``name``, ``requiredAmount`` and ``priority``.

    Returns:
        One allocation per category in priority order (stable for ties).

    Example:
        >>> rows = optimize_budget(1000, [
        ...     {'name': 'Rent', 'requiredAmount': 800, 'priority': 1},
        ...     {'name': 'Food', 'requiredAmount': 300, 'priority': 2},
        ... ])
        >>> [(r.name, r.allocated_amount, r.fulfilled) for r in rows]
        [('Rent', 800.0, True), ('Food', 200.0, False)]
    """
    parsed = [item if isinstance(item, BudgetCategory) else BudgetCategory.from_dict(item) for item in categories]
    ordered = sorted(parsed, key=lambda category: category.priority)

    remaining = total_budget
    allocations: List[BudgetAllocation] = []

    for category in ordered:
        allocation = BudgetAllocation(name=category.name)

        if remaining >= category.required_amount:
            allocation.allocated_amount = category.required_amount
            allocation.percent_allocated = 100.0
            allocation.fulfilled = True
            remaining -= category.required_amount
        elif remaining > 0:
            allocation.allocated_amount = remaining
            allocation.percent_allocated = safe_ratio(remaining, category.required_amount) * 100
            remaining = 0

        allocations.append(allocation)

    logger.debug(
        "Allocated %s of %s across %d categories",
        total_budget - remaining,
        total_budget,
        len(allocations),
    )
    return allocations


def make_recommendations(allocations: Sequence[AllocationInput], income: float) -> List[str]:
    """Turn allocation results into short pieces of advice.

    The first few allocations are treated as essential by caller
    convention; any of them left unfunded produce one general message
    followed by a message per category.  A savings category below the
    configured share adds a warning.  With positive income and nothing
    else to say, a single "well balanced" message is returned.
    """
    config = get_recommendation_config()
    constants = config['constants']
    messages = config['messages']

    parsed = [item if isinstance(item, BudgetAllocation) else BudgetAllocation.from_dict(item) for item in allocations]
    recommendations: List[str] = []

    essential_positions = int(constants['essential_positions'])
    underfunded = [alloc for alloc in parsed[:essential_positions] if not alloc.fulfilled]
    if underfunded:
        recommendations.append(messages['underfunded_general'])
        for alloc in underfunded:
            percent = round_half_up(alloc.percent_allocated)
            recommendations.append(
                messages['underfunded_category'].format(name=alloc.name, percent=f"{percent:.0f}")
            )

    keyword = str(constants['savings_keyword']).lower()
    savings = next((alloc for alloc in parsed if keyword in alloc.name.lower()), None)
    if savings is not None and savings.percent_allocated < float(constants['savings_threshold_percent']):
        recommendations.append(messages['low_savings'])

    if income > 0 and not recommendations:
        recommendations.append(messages['balanced'])

    return recommendations


def allocation_frame(allocations: Sequence[AllocationInput]) -> pd.DataFrame:
    """Tabulate allocations for display code."""
    columns = ['Name', 'Allocated', 'Percent_Allocated', 'Fulfilled']
    parsed = [item if isinstance(item, BudgetAllocation) else BudgetAllocation.from_dict(item) for item in allocations]
    if not parsed:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([
        {
            'Name': alloc.name,
            'Allocated': alloc.allocated_amount,
            'Percent_Allocated': alloc.percent_allocated,
            'Fulfilled': alloc.fulfilled,
        }
        for alloc in parsed
    ], columns=columns)
