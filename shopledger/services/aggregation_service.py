"""Profit-and-loss views derived from expense and revenue snapshots.

Every function here is pure: it reads the sequences it is given and returns
new values. Pass a stable snapshot (e.g. a tuple from a ``Snapshot``), not a
collection that another thread keeps mutating.
"""

import calendar
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from shopledger.core.constants import EXPENSE_CATEGORY_LABELS, ExpenseCategory
from shopledger.core.dates import in_range, month_prefix


@dataclass(frozen=True)
class Totals:
    total_revenue: float
    total_expenses: float
    net_profit: float


@dataclass(frozen=True)
class DailySummary:
    date: str
    total_revenue: float
    total_expenses: float
    net_profit: float
    expenses_by_category: dict = field(default_factory=dict)


@dataclass
class DailyTotals:
    revenue: float = 0.0
    expenses: float = 0.0


@dataclass(frozen=True)
class MonthlySummary:
    year: int
    month: int
    total_revenue: float
    total_expenses: float
    net_profit: float
    expenses_by_category: dict = field(default_factory=dict)
    daily_data: dict = field(default_factory=dict)


@dataclass(frozen=True)
class DailyPoint:
    date: str
    revenue: float
    expenses: float
    profit: float


@dataclass(frozen=True)
class CategoryAmount:
    category: ExpenseCategory
    label: str
    amount: float


def _sum_amounts(records: Iterable) -> float:
    return sum((record.amount for record in records), 0)


def _fold_by_category(expenses: Iterable) -> dict:
    totals = {}
    for expense in expenses:
        category = ExpenseCategory(expense.category)
        totals[category] = totals.get(category, 0) + expense.amount
    return totals


def daily_summary(day: str, expenses: Sequence, revenue: Sequence) -> DailySummary:
    day_expenses = [expense for expense in expenses if expense.date == day]
    day_revenue = [entry for entry in revenue if entry.date == day]

    total_revenue = _sum_amounts(day_revenue)
    total_expenses = _sum_amounts(day_expenses)
    return DailySummary(
        date=day,
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        net_profit=total_revenue - total_expenses,
        expenses_by_category=_fold_by_category(day_expenses),
    )


def monthly_summary(year: int, month: int, expenses: Sequence, revenue: Sequence) -> MonthlySummary:
    prefix = month_prefix(year, month)
    month_expenses = [expense for expense in expenses if expense.date.startswith(prefix)]
    month_revenue = [entry for entry in revenue if entry.date.startswith(prefix)]

    daily_data = {}
    for entry in month_revenue:
        daily_data.setdefault(entry.date, DailyTotals()).revenue += entry.amount
    for expense in month_expenses:
        daily_data.setdefault(expense.date, DailyTotals()).expenses += expense.amount

    total_revenue = _sum_amounts(month_revenue)
    total_expenses = _sum_amounts(month_expenses)
    return MonthlySummary(
        year=year,
        month=month,
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        net_profit=total_revenue - total_expenses,
        expenses_by_category=_fold_by_category(month_expenses),
        daily_data=daily_data,
    )


def category_totals(
    expenses: Sequence,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> dict:
    """Sum expense amounts per category.

    The date restriction only applies when both bounds are given; it is
    inclusive and compares ``YYYY-MM-DD`` strings directly.
    """
    if start_date and end_date:
        expenses = [expense for expense in expenses if in_range(expense.date, start_date, end_date)]
    return _fold_by_category(expenses)


def all_time_totals(expenses: Sequence, revenue: Sequence) -> Totals:
    total_revenue = _sum_amounts(revenue)
    total_expenses = _sum_amounts(expenses)
    return Totals(
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        net_profit=total_revenue - total_expenses,
    )


def daily_series(summary: MonthlySummary) -> list:
    """Every day of the summary's month, with missing days reported as zero."""
    if summary.year < 1 or not 1 <= summary.month <= 12:
        return []
    _, days_in_month = calendar.monthrange(summary.year, summary.month)
    prefix = month_prefix(summary.year, summary.month)
    series = []
    for day in range(1, days_in_month + 1):
        date_key = "{}-{:02d}".format(prefix, day)
        totals = summary.daily_data.get(date_key) or DailyTotals()
        series.append(
            DailyPoint(
                date=date_key,
                revenue=totals.revenue,
                expenses=totals.expenses,
                profit=totals.revenue - totals.expenses,
            )
        )
    return series


def category_breakdown(totals: dict, *, sorted_by_amount: bool = False) -> list:
    """Expand a category map over the full category set.

    With ``sorted_by_amount`` the result is ordered for charting: largest
    first, categories without spend dropped.
    """
    rows = [
        CategoryAmount(
            category=category,
            label=EXPENSE_CATEGORY_LABELS[category],
            amount=totals.get(category, 0),
        )
        for category in ExpenseCategory
    ]
    if sorted_by_amount:
        rows = sorted((row for row in rows if row.amount), key=lambda row: row.amount, reverse=True)
    return rows


def recent_expenses(expenses: Sequence, limit: int = 20) -> list:
    ordered = sorted(expenses, key=lambda expense: expense.created_at, reverse=True)
    return ordered[: max(0, int(limit))]


def clamp_quantity(current: float, delta: float) -> float:
    return max(0, current + delta)


def is_low_stock(item) -> bool:
    # min_level == 0 switches alerting off regardless of quantity.
    return item.current_quantity <= item.min_level and item.min_level > 0


def low_stock_items(items: Iterable) -> list:
    return [item for item in items if is_low_stock(item)]


__all__ = [
    "CategoryAmount",
    "DailyPoint",
    "DailySummary",
    "DailyTotals",
    "MonthlySummary",
    "Totals",
    "all_time_totals",
    "category_breakdown",
    "category_totals",
    "clamp_quantity",
    "daily_series",
    "daily_summary",
    "is_low_stock",
    "low_stock_items",
    "monthly_summary",
    "recent_expenses",
]
