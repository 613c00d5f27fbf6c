"""Greedy expense forecasting and budget utilization projection.

Two related calculations live here:

* ``calculate_expense_projection`` estimates how often each category
  recurs and how much it usually costs, then walks forward from the most
  recent expense emitting synthetic "projected" expenses.
* ``calculate_budget_projection`` adds those projections on top of the
  actual spend for each budget's category and reports a cumulative
  utilization curve bucketed by the budget's own period.

There is no trend or seasonality model.  "Now" can be injected so that
results are reproducible; it defaults to the current local time.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from .config import DEFAULT_FREQUENCY_DAYS, get_projection_days, get_projection_period
from .models import (
    Budget,
    BudgetProjectionResult,
    CategoryMetric,
    Expense,
    PeriodProjection,
    as_budget,
    as_expense,
    format_iso_date,
    parse_date,
)
from .numeric import clamp_percentage, round_half_up, safe_ratio

logger = logging.getLogger(__name__)

ExpenseInput = Union[Expense, Mapping[str, Any]]
BudgetInput = Union[Budget, Mapping[str, Any]]

_ONE_DAY = timedelta(days=1)


def days_between(later: datetime, earlier: datetime) -> int:
    """Whole days from ``earlier`` to ``later``, truncated towards zero."""
    return int((later - earlier) / _ONE_DAY)


def _default_frequency(period: str) -> int:
    return DEFAULT_FREQUENCY_DAYS.get(period, DEFAULT_FREQUENCY_DAYS['monthly'])


def _expense_frame(expenses: Sequence[Expense]) -> pd.DataFrame:
    return pd.DataFrame({
        'category': [expense.category for expense in expenses],
        'amount': [expense.amount for expense in expenses],
        'date': pd.to_datetime([expense.timestamp for expense in expenses]),
    })


def category_metrics(expenses: Iterable[ExpenseInput], period: Optional[str] = None) -> List[CategoryMetric]:
    """Estimate average amount and cadence for every expense category.

    The cadence is the mean of the positive day gaps between consecutive
    expenses (newest first), rounded and floored at one day.  Categories
    with a single expense, or only same-day expenses, fall back to the
    period default (daily 1, weekly 7, monthly 30).
    """
    period = period or get_projection_period()
    parsed = [as_expense(item) for item in expenses]
    if not parsed:
        return []

    frame = _expense_frame(parsed)
    fallback = _default_frequency(period)
    metrics: List[CategoryMetric] = []

    for category, group in frame.groupby('category', sort=False):
        ordered = group.sort_values('date', ascending=False, kind='stable')
        avg_amount = float(group['amount'].mean(skipna=False))

        gaps = ordered['date'].diff(-1).dropna().dt.days
        gaps = gaps[gaps > 0]
        if len(ordered) > 1 and not gaps.empty:
            frequency = max(1, int(round_half_up(float(gaps.sum()) / len(gaps))))
        else:
            frequency = fallback

        metrics.append(CategoryMetric(
            category=str(category),
            avg_amount=avg_amount,
            frequency=frequency,
            last_date=ordered['date'].iloc[0].to_pydatetime(),
        ))

    return metrics


def calculate_expense_projection(
    expenses: Iterable[ExpenseInput],
    days: Optional[float] = None,
    period: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[Expense]:
    """Generate projected expenses for roughly the next ``days`` days.

    Starting from each category's latest expense the date is advanced by
    the category cadence while the current date is fewer than ``days``
    whole days from now.  Only dates strictly after now are emitted.  The
    check happens before advancing, so the last projection may land up to
    one cadence past the horizon.  A horizon of zero or less projects
    nothing.

    Args:
        expenses: Historical expenses (``Expense`` or mappings).
        days: Projection horizon; ``FINTRACK_PROJECTION_DAYS`` (90) by default.
        period: Fallback cadence selector: ``daily``, ``weekly`` or ``monthly``.
        now: Reference time; defaults to ``datetime.now()``.

    Returns:
        Projected expenses sorted by date, oldest first.
    """
    days = get_projection_days() if days is None else days
    now = parse_date(now) if now is not None else datetime.now()

    metrics = category_metrics(expenses, period)
    if not metrics or days <= 0:
        return []
    if not math.isfinite(days):
        logger.warning("Ignoring non-finite projection horizon %r", days)
        return []

    projected: List[Expense] = []
    for metric in metrics:
        amount = round_half_up(metric.avg_amount, 2)
        step = timedelta(days=metric.frequency)
        next_date = metric.last_date

        while days_between(next_date, now) < days:
            next_date = next_date + step
            if next_date > now:
                epoch_ms = int(round(next_date.timestamp() * 1000))
                projected.append(Expense(
                    id=f"projection-{metric.category}-{epoch_ms}",
                    category=metric.category,
                    amount=amount,
                    description=f"Projected {metric.category}",
                    date=format_iso_date(next_date),
                    is_projected=True,
                ))

    projected.sort(key=lambda expense: expense.date)
    logger.debug("Projected %d expenses across %d categories", len(projected), len(metrics))
    return projected


def _bucket(period: str, projection: Expense, now: datetime) -> Tuple[str, str]:
    when = projection.timestamp
    if period == 'monthly':
        return when.strftime('%Y-%m'), when.strftime('%B %Y')
    if period == 'weekly':
        week = math.floor(days_between(when, now) / 7)
        return f"week-{week}", f"Week {abs(week) + 1}"
    return projection.date, when.strftime('%b %d, %Y')


def calculate_budget_projection(
    budgets: Iterable[BudgetInput],
    expenses: Iterable[ExpenseInput],
    projected_expenses: Iterable[ExpenseInput],
    now: Optional[datetime] = None,
) -> List[BudgetProjectionResult]:
    """Project cumulative utilization of each budget.

    ``current_utilization`` is the lifetime actual spend in the budget's
    category (no period scoping).  Projected expenses in that category are
    summed per period bucket and accumulated on top of it.  Buckets keep
    the order in which they were first seen in ``projected_expenses``;
    they are not re-sorted.  Percentages are clamped to [0, 100] while
    the cumulative amount is left as is.
    """
    now = parse_date(now) if now is not None else datetime.now()
    parsed_budgets = [as_budget(item) for item in budgets]
    if not parsed_budgets:
        return []

    actual = [as_expense(item) for item in expenses]
    projected = [as_expense(item) for item in projected_expenses]
    results: List[BudgetProjectionResult] = []

    for budget in parsed_budgets:
        current_utilization = sum(
            (expense.amount for expense in actual if expense.category == budget.category),
            0.0,
        )
        relevant = [item for item in projected if item.category == budget.category]

        period = budget.period
        if period not in DEFAULT_FREQUENCY_DAYS:
            logger.warning("Budget %s has unknown period %r; bucketing daily", budget.id, period)
            period = 'daily'

        totals: Dict[str, float] = {}
        labels: Dict[str, str] = {}
        for item in relevant:
            key, label = _bucket(period, item, now)
            totals[key] = totals.get(key, 0.0) + item.amount
            labels.setdefault(key, label)

        accumulated = current_utilization
        projections: List[PeriodProjection] = []
        for key, amount in totals.items():
            accumulated += amount
            percentage = clamp_percentage(round_half_up(safe_ratio(accumulated, budget.amount) * 100))
            projections.append(PeriodProjection(
                period=key,
                amount=accumulated,
                percentage=int(percentage) if math.isfinite(percentage) else percentage,
                label=labels[key],
            ))

        results.append(BudgetProjectionResult(
            id=budget.id,
            category=budget.category,
            amount=budget.amount,
            period=budget.period,
            current_utilization=current_utilization,
            projections=projections,
        ))

    return results


def projection_frame(results: Sequence[BudgetProjectionResult]) -> pd.DataFrame:
    """Flatten projection results into one row per budget and bucket."""
    columns = ['Budget_Id', 'Category', 'Period', 'Label', 'Amount', 'Percentage']
    rows = [
        {
            'Budget_Id': result.id,
            'Category': result.category,
            'Period': item.period,
            'Label': item.label,
            'Amount': item.amount,
            'Percentage': item.percentage,
        }
        for result in results
        for item in result.projections
    ]
    return pd.DataFrame(rows, columns=columns)
