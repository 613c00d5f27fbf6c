"""Top‑level package for the FinTrack analytics kernel.

The kernel is a set of pure calculations over in-memory expense, budget
and goal records.  It never fetches or stores data itself.  The modules
are:

* ``allocation`` – greedy budget allocation and recommendations
* ``projection`` – expense forecasting and budget utilization curves
* ``classifier`` – Naive Bayes categorisation and lexical search
* ``reports`` – dashboard aggregations built on pandas
* ``formatting`` – currency display helpers

Typical use::

    from fintrack import calculate_expense_projection, calculate_budget_projection

    projected = calculate_expense_projection(expenses, days=60)
    curves = calculate_budget_projection(budgets, expenses, projected)
"""

from .allocation import allocation_frame, make_recommendations, optimize_budget
from .classifier import NaiveBayesSearcher, tokenize
from .formatting import format_currency, get_currency
from .models import (
    Budget,
    BudgetAllocation,
    BudgetCategory,
    BudgetProjectionResult,
    CategoryMetric,
    Expense,
    FinancialRecord,
    Goal,
    PeriodProjection,
    TrainingItem,
)
from .projection import (
    calculate_budget_projection,
    calculate_expense_projection,
    category_metrics,
    projection_frame,
)

__all__ = [
    # Records
    'Budget',
    'BudgetAllocation',
    'BudgetCategory',
    'BudgetProjectionResult',
    'CategoryMetric',
    'Expense',
    'FinancialRecord',
    'Goal',
    'PeriodProjection',
    'TrainingItem',
    # Allocation
    'optimize_budget',
    'make_recommendations',
    'allocation_frame',
    # Projection
    'category_metrics',
    'calculate_expense_projection',
    'calculate_budget_projection',
    'projection_frame',
    # Classification
    'NaiveBayesSearcher',
    'tokenize',
    # Formatting
    'format_currency',
    'get_currency',
]
