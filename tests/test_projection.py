from datetime import datetime, timezone

from fintrack.models import Expense
from fintrack.numeric import round_half_up
from fintrack.projection import calculate_expense_projection, category_metrics, days_between

NOW = datetime(2024, 3, 1, 12, 0)


def _expense(expense_id, amount, category, date):
    return {'id': expense_id, 'amount': amount, 'category': category, 'description': '', 'date': date}


def _food_history():
    return [
        _expense('1', 200, 'Food', '2024-01-30'),
        _expense('2', 100, 'Food', '2024-02-29'),
    ]


def test_empty_history_projects_nothing():
    assert calculate_expense_projection([], 90, now=NOW) == []


def test_days_between_truncates_towards_zero():
    assert days_between(datetime(2024, 3, 2), NOW) == 0
    assert days_between(datetime(2024, 2, 29), NOW) == -1
    assert days_between(datetime(2024, 3, 30), NOW) == 28


def test_category_metrics_use_average_gap():
    metrics = category_metrics(_food_history())
    assert len(metrics) == 1
    food = metrics[0]
    assert food.category == 'Food'
    assert food.avg_amount == 150
    assert food.frequency == 30
    assert food.last_date == datetime(2024, 2, 29)


def test_single_expense_uses_period_default():
    history = [_expense('1', 40, 'Transport', '2024-02-20')]
    assert category_metrics(history, 'monthly')[0].frequency == 30
    assert category_metrics(history, 'weekly')[0].frequency == 7
    assert category_metrics(history, 'daily')[0].frequency == 1


def test_same_day_expenses_fall_back_to_default():
    history = [
        _expense('1', 10, 'Coffee', '2024-02-20'),
        _expense('2', 12, 'Coffee', '2024-02-20'),
    ]
    metric = category_metrics(history, 'weekly')[0]
    assert metric.frequency == 7
    assert metric.avg_amount == 11


def test_projection_repeats_average_at_cadence():
    projected = calculate_expense_projection(_food_history(), days=60, now=NOW)

    assert [item.date for item in projected] == ['2024-03-30', '2024-04-29', '2024-05-29']
    for item in projected:
        assert item.amount == 150
        assert item.is_projected
        assert item.category == 'Food'
        assert item.description == 'Projected Food'
        assert item.id.startswith('projection-Food-')
        assert datetime.strptime(item.date, '%Y-%m-%d') > NOW


def test_projection_may_overshoot_horizon_by_one_step():
    projected = calculate_expense_projection(_food_history(), days=60, now=NOW)
    last = datetime.strptime(projected[-1].date, '%Y-%m-%d')
    assert days_between(last, NOW) >= 60


def test_non_positive_horizon_projects_nothing():
    assert calculate_expense_projection(_food_history(), days=0, now=NOW) == []
    assert calculate_expense_projection(_food_history(), days=-10, now=NOW) == []


def test_projection_skips_dates_not_after_now():
    history = [_expense('1', 40, 'Transport', '2024-02-20')]
    projected = calculate_expense_projection(history, days=30, period='weekly', now=NOW)
    assert [item.date for item in projected] == [
        '2024-03-05', '2024-03-12', '2024-03-19', '2024-03-26', '2024-04-02'
    ]


def test_projection_sorted_across_categories():
    history = _food_history() + [_expense('3', 40, 'Transport', '2024-02-20')]
    projected = calculate_expense_projection(history, days=60, now=NOW)
    dates = [item.date for item in projected]
    assert dates == sorted(dates)
    assert {item.category for item in projected} == {'Food', 'Transport'}


def test_projected_amount_rounded_to_cents():
    history = [
        _expense('1', 10, 'Snacks', '2024-02-01'),
        _expense('2', 10, 'Snacks', '2024-02-08'),
        _expense('3', 10.01, 'Snacks', '2024-02-15'),
    ]
    projected = calculate_expense_projection(history, days=14, now=NOW)
    assert projected
    assert all(item.amount == 10.0 for item in projected)


def test_projection_accepts_expense_objects_and_is_repeatable():
    history = [Expense.from_dict(item) for item in _food_history()]
    first = calculate_expense_projection(history, 60, 'monthly', now=NOW)
    second = calculate_expense_projection(history, 60, 'monthly', now=NOW)
    assert first == second


def test_huge_amounts_are_projected_unrounded():
    history = [
        _expense('1', 1e307, 'Property', '2024-02-01'),
        _expense('2', 1e307, 'Property', '2024-02-08'),
    ]
    projected = calculate_expense_projection(history, days=30, now=NOW)
    assert projected
    assert all(item.amount == 1e307 for item in projected)
    assert round_half_up(1e307, 2) == 1e307
    assert round_half_up(-1e307, 2) == -1e307


def test_timezone_aware_now_matches_naive_utc():
    aware_now = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert calculate_expense_projection(_food_history(), days=90, now=aware_now) == \
        calculate_expense_projection(_food_history(), days=90, now=NOW)
