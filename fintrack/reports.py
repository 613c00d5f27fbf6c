"""Dashboard and report aggregations.

These helpers back the overview, report and goal screens: category
totals for pie charts, budget vs. spend comparisons, goal progress,
timeframe filters and a merged history of expenses and budgets.  They
return pandas DataFrames where the result is tabular and plain Python
values otherwise.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

from .models import (
    Budget,
    Expense,
    FinancialRecord,
    Goal,
    as_budget,
    as_expense,
    as_goal,
    parse_date,
)
from .numeric import clamp_percentage, safe_ratio

logger = logging.getLogger(__name__)

ExpenseInput = Union[Expense, Mapping[str, Any]]
BudgetInput = Union[Budget, Mapping[str, Any]]

TIMEFRAMES = ('daily', 'weekly', 'monthly')


def expenses_frame(expenses: Iterable[ExpenseInput]) -> pd.DataFrame:
    """Build a DataFrame of expenses with a parsed ``Date`` column."""
    columns = ['Id', 'Date', 'Category', 'Description', 'Amount', 'Is_Projected']
    parsed = [as_expense(item) for item in expenses]
    if not parsed:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([
        {
            'Id': expense.id,
            'Date': expense.timestamp,
            'Category': expense.category,
            'Description': expense.description,
            'Amount': expense.amount,
            'Is_Projected': expense.is_projected,
        }
        for expense in parsed
    ], columns=columns)


def _as_record(item: Union[FinancialRecord, Mapping[str, Any]]) -> FinancialRecord:
    if isinstance(item, (Expense, Budget)):
        return item
    # Budgets carry no transaction date
    if item.get('kind') == 'budget' or 'date' not in item:
        return as_budget(item)
    return as_expense(item)


def category_totals(records: Iterable[Union[FinancialRecord, Mapping[str, Any]]]) -> pd.DataFrame:
    """Sum amounts per category, keeping first-seen category order.

    Accepts record objects or mappings; mappings with a ``date`` are read
    as expenses and the rest as budgets.
    """
    parsed = [_as_record(item) for item in records]
    rows = [{'Category': record.category, 'Amount': float(record.amount)} for record in parsed]
    if not rows:
        return pd.DataFrame(columns=['Category', 'Amount'])
    frame = pd.DataFrame(rows)
    return frame.groupby('Category', sort=False)['Amount'].sum().reset_index()


def budget_comparison(budgets: Iterable[BudgetInput], expenses: Iterable[ExpenseInput]) -> pd.DataFrame:
    """Compare each budget with lifetime spend in its category."""
    columns = ['Category', 'Budget', 'Spent', 'Remaining']
    parsed_budgets = [as_budget(item) for item in budgets]
    if not parsed_budgets:
        return pd.DataFrame(columns=columns)

    spent_by_category = category_totals([as_expense(item) for item in expenses])
    spent = dict(zip(spent_by_category['Category'], spent_by_category['Amount']))

    rows = []
    for budget in parsed_budgets:
        category_spent = float(spent.get(budget.category, 0.0))
        rows.append({
            'Category': budget.category,
            'Budget': float(budget.amount),
            'Spent': category_spent,
            'Remaining': float(budget.amount) - category_spent,
        })
    return pd.DataFrame(rows, columns=columns)


def dashboard_totals(budgets: Iterable[BudgetInput], expenses: Iterable[ExpenseInput]) -> Dict[str, float]:
    """Headline numbers for the overview screen."""
    total_expenses = sum((as_expense(item).amount for item in expenses), 0.0)
    total_budget = sum((as_budget(item).amount for item in budgets), 0.0)
    return {
        'total_expenses': total_expenses,
        'total_budget': total_budget,
        'remaining_budget': total_budget - total_expenses,
    }


def goal_progress(current_amount: float, target_amount: float) -> float:
    """Percentage of a goal reached, clamped to [0, 100].

    A zero target reports no progress instead of dividing by zero.
    """
    if target_amount == 0:
        return 0.0
    return clamp_percentage(safe_ratio(current_amount, target_amount) * 100)


def goals_progress(goals: Iterable[Union[Goal, Mapping[str, Any]]]) -> pd.DataFrame:
    """Progress table for a list of savings goals."""
    columns = ['Name', 'Current', 'Target', 'Progress', 'Remaining', 'Deadline', 'Status']
    rows = []
    for goal in (as_goal(item) for item in goals):
        progress = goal_progress(goal.current_amount, goal.target_amount)
        rows.append({
            'Name': goal.name,
            'Current': goal.current_amount,
            'Target': goal.target_amount,
            'Progress': progress,
            'Remaining': max(goal.target_amount - goal.current_amount, 0.0),
            'Deadline': goal.deadline,
            'Status': 'Completed' if progress >= 100 else 'In Progress',
        })
    return pd.DataFrame(rows, columns=columns)


def timeframe_start(timeframe: str, now: Optional[datetime] = None) -> datetime:
    """Start of the current day, week (Sunday) or month."""
    if timeframe not in TIMEFRAMES:
        raise ValueError(f"Unsupported timeframe '{timeframe}', expected one of {', '.join(TIMEFRAMES)}")
    now = parse_date(now) if now is not None else datetime.now()
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if timeframe == 'daily':
        return midnight
    if timeframe == 'weekly':
        days_since_sunday = (midnight.weekday() + 1) % 7
        return midnight - timedelta(days=days_since_sunday)
    return midnight.replace(day=1)


def filter_expenses_by_timeframe(
    expenses: Iterable[ExpenseInput],
    timeframe: str = 'monthly',
    now: Optional[datetime] = None,
) -> List[Expense]:
    """Expenses dated within the current timeframe, newest first."""
    start = timeframe_start(timeframe, now)
    selected = [expense for expense in (as_expense(item) for item in expenses) if expense.timestamp >= start]
    selected.sort(key=lambda expense: expense.timestamp, reverse=True)
    return selected


def _history_key(record: FinancialRecord) -> datetime:
    stamp = record.created_at or getattr(record, 'date', None)
    if not stamp:
        return datetime.min
    return parse_date(stamp)


def financial_history(
    expenses: Iterable[ExpenseInput],
    budgets: Iterable[BudgetInput],
    limit: Optional[int] = None,
) -> List[FinancialRecord]:
    """Merge expenses and budgets into one history, newest first.

    Records are ordered by ``created_at``; expenses without one fall back
    to their transaction date.  Use ``record.kind`` to tell them apart.
    """
    records: List[FinancialRecord] = [as_expense(item) for item in expenses]
    records.extend(as_budget(item) for item in budgets)
    records.sort(key=_history_key, reverse=True)
    if limit is not None:
        records = records[:limit]
    return records


def user_stats(expenses: Iterable[ExpenseInput], budgets: Iterable[BudgetInput]) -> Dict[str, float]:
    parsed_expenses = [as_expense(item) for item in expenses]
    parsed_budgets = [as_budget(item) for item in budgets]
    stats = {
        'total_expenses': len(parsed_expenses),
        'total_budgets': len(parsed_budgets),
        'total_spent': sum((expense.amount for expense in parsed_expenses), 0.0),
    }
    logger.debug("User stats: %s", stats)
    return stats
