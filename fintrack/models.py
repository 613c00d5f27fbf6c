"""Record types consumed and produced by the analytics kernel.

Records arrive from the persistence collaborator as JSON-like mappings
with camelCase keys.  Each dataclass offers ``from_dict`` to accept that
shape (snake_case aliases are tolerated) and ``to_dict`` to hand results
back to presentation code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Union

import pandas as pd

from .config import VALID_PERIODS


def parse_date(value: Any) -> datetime:
    """Parse an ISO date (or timestamp) into a naive ``datetime``.

    Timezone-aware values are converted to UTC before the zone is dropped
    so that mixed inputs remain comparable.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("Missing date value")
    if isinstance(value, datetime):
        ts = pd.Timestamp(value)
    elif isinstance(value, date):
        ts = pd.Timestamp(value.isoformat())
    else:
        ts = pd.Timestamp(str(value).strip())
    if pd.isna(ts):
        raise ValueError(f"Unparsable date value {value!r}")
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    return ts.to_pydatetime()


def format_iso_date(value: datetime) -> str:
    return value.strftime('%Y-%m-%d')


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None, required: bool = False) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    if required:
        raise ValueError(f"Record is missing required field '{keys[0]}'")
    return default


def _normalize_period(value: Any) -> str:
    period = str(value or '').strip().lower()
    if period not in VALID_PERIODS:
        raise ValueError(f"Unsupported budget period '{value}'")
    return period


@dataclass
class Expense:
    """A spending record, either actual or projected."""

    id: str
    amount: float
    category: str
    date: str
    description: Optional[str] = None
    is_projected: bool = False
    created_at: Optional[str] = None

    kind: ClassVar[str] = 'expense'

    @property
    def timestamp(self) -> datetime:
        return parse_date(self.date)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Expense':
        raw_date = _pick(data, 'date', required=True)
        parse_date(raw_date)
        return cls(
            id=str(_pick(data, 'id', required=True)),
            amount=float(_pick(data, 'amount', required=True)),
            category=str(_pick(data, 'category', required=True)),
            date=str(raw_date),
            description=_pick(data, 'description'),
            is_projected=bool(_pick(data, 'isProjected', 'is_projected', default=False)),
            created_at=_pick(data, 'created_at', 'createdAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            'id': self.id,
            'amount': self.amount,
            'category': self.category,
            'description': self.description,
            'date': self.date,
            'isProjected': self.is_projected,
        }
        if self.created_at is not None:
            payload['created_at'] = self.created_at
        return payload


@dataclass
class Budget:
    """A recurring spending ceiling for one category."""

    id: str
    category: str
    amount: float
    period: str = 'monthly'
    description: Optional[str] = None
    created_at: Optional[str] = None

    kind: ClassVar[str] = 'budget'

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Budget':
        return cls(
            id=str(_pick(data, 'id', required=True)),
            category=str(_pick(data, 'category', required=True)),
            amount=float(_pick(data, 'amount', required=True)),
            period=_normalize_period(_pick(data, 'period', default='monthly')),
            description=_pick(data, 'description'),
            created_at=_pick(data, 'created_at', 'createdAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            'id': self.id,
            'category': self.category,
            'amount': self.amount,
            'period': self.period,
        }
        if self.description is not None:
            payload['description'] = self.description
        if self.created_at is not None:
            payload['created_at'] = self.created_at
        return payload


# Tagged union used wherever expenses and budgets are mixed together.
FinancialRecord = Union[Expense, Budget]


def _whole_number(value: Any, field: str) -> int:
    number = float(value)
    if not number.is_integer():
        raise ValueError(f"{field} must be a whole number, got {value!r}")
    return int(number)


@dataclass
class BudgetCategory:
    name: str
    required_amount: float
    priority: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'BudgetCategory':
        return cls(
            name=str(_pick(data, 'name', required=True)),
            required_amount=float(_pick(data, 'requiredAmount', 'required_amount', required=True)),
            priority=_whole_number(_pick(data, 'priority', required=True), 'priority'),
        )


@dataclass
class BudgetAllocation:
    name: str
    allocated_amount: float = 0.0
    percent_allocated: float = 0.0
    fulfilled: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'BudgetAllocation':
        return cls(
            name=str(_pick(data, 'name', required=True)),
            allocated_amount=float(_pick(data, 'allocatedAmount', 'allocated_amount', default=0.0)),
            percent_allocated=float(_pick(data, 'percentAllocated', 'percent_allocated', default=0.0)),
            fulfilled=bool(_pick(data, 'fulfilled', default=False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'allocatedAmount': self.allocated_amount,
            'percentAllocated': self.percent_allocated,
            'fulfilled': self.fulfilled,
        }


@dataclass
class CategoryMetric:
    """Historical cadence of one expense category."""

    category: str
    avg_amount: float
    frequency: int
    last_date: datetime


@dataclass
class PeriodProjection:
    period: str
    amount: float
    percentage: float
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'period': self.period,
            'amount': self.amount,
            'percentage': self.percentage,
            'label': self.label,
        }


@dataclass
class BudgetProjectionResult:
    id: str
    category: str
    amount: float
    period: str
    current_utilization: float
    projections: List[PeriodProjection] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'category': self.category,
            'amount': self.amount,
            'period': self.period,
            'currentUtilization': self.current_utilization,
            'projections': [item.to_dict() for item in self.projections],
        }


@dataclass
class Goal:
    id: str
    name: str
    target_amount: float
    current_amount: float = 0.0
    deadline: Optional[str] = None
    category: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Goal':
        return cls(
            id=str(_pick(data, 'id', required=True)),
            name=str(_pick(data, 'name', 'title', default='Unnamed Goal')),
            target_amount=float(_pick(data, 'target_amount', 'targetAmount', required=True)),
            current_amount=float(_pick(data, 'current_amount', 'currentAmount', default=0.0)),
            deadline=_pick(data, 'deadline') or None,
            category=_pick(data, 'category') or None,
        )


@dataclass
class TrainingItem:
    text: str
    category: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TrainingItem':
        return cls(
            text=str(_pick(data, 'text', required=True)),
            category=str(_pick(data, 'category', required=True)),
        )


def as_expense(value: Union[Expense, Mapping[str, Any]]) -> Expense:
    return value if isinstance(value, Expense) else Expense.from_dict(value)


def as_budget(value: Union[Budget, Mapping[str, Any]]) -> Budget:
    return value if isinstance(value, Budget) else Budget.from_dict(value)


def as_goal(value: Union[Goal, Mapping[str, Any]]) -> Goal:
    return value if isinstance(value, Goal) else Goal.from_dict(value)
