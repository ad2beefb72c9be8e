from typing import Optional, Sequence

from shopledger.core.constants import ALL_CATEGORIES
from shopledger.core.dates import in_range


def _normalize_query(search: Optional[str]) -> str:
    # Blank input means no search; otherwise the text is matched as typed.
    if search is None or not str(search).strip():
        return ""
    return str(search).lower()


def _contains(value: Optional[str], query: str) -> bool:
    return bool(value) and query in value.lower()


def _sort_by_date_desc(records) -> list:
    # sorted() is stable: records sharing a date keep their input order.
    return sorted(records, key=lambda record: record.date, reverse=True)


def has_filters(search=None, category=ALL_CATEGORIES, start_date=None, end_date=None) -> bool:
    return bool(
        _normalize_query(search)
        or (category and category != ALL_CATEGORIES)
        or start_date
        or end_date
    )


def filter_expenses(
    expenses: Sequence,
    *,
    search: Optional[str] = None,
    category: Optional[str] = ALL_CATEGORIES,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> list:
    """Search, category and date-range filters, newest date first.

    The search matches the item description or the notes, ignoring case.
    """
    filtered = list(expenses)

    query = _normalize_query(search)
    if query:
        filtered = [
            expense
            for expense in filtered
            if _contains(expense.item, query) or _contains(expense.notes, query)
        ]

    if category and category != ALL_CATEGORIES:
        filtered = [expense for expense in filtered if expense.category == category]

    if start_date or end_date:
        filtered = [expense for expense in filtered if in_range(expense.date, start_date, end_date)]

    return _sort_by_date_desc(filtered)


def filter_revenue(
    revenue: Sequence,
    *,
    search: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> list:
    filtered = list(revenue)

    query = _normalize_query(search)
    if query:
        filtered = [entry for entry in filtered if _contains(entry.notes, query)]

    if start_date or end_date:
        filtered = [entry for entry in filtered if in_range(entry.date, start_date, end_date)]

    return _sort_by_date_desc(filtered)


def group_by_date(records: Sequence) -> dict:
    groups = {}
    for record in records:
        groups.setdefault(record.date, []).append(record)
    return groups


def group_totals(groups: dict) -> dict:
    return {day: sum((record.amount for record in records), 0) for day, records in groups.items()}


__all__ = [
    "filter_expenses",
    "filter_revenue",
    "group_by_date",
    "group_totals",
    "has_filters",
]
