from shopledger.services.aggregation_service import (
    all_time_totals,
    category_totals,
    daily_summary,
    is_low_stock,
    low_stock_items,
    monthly_summary,
)
from shopledger.services.filter_service import filter_expenses, filter_revenue, group_by_date
from shopledger.services.ledger_service import LedgerService
from shopledger.services.live_ledger import LiveLedger

__all__ = [
    "LedgerService",
    "LiveLedger",
    "all_time_totals",
    "category_totals",
    "daily_summary",
    "filter_expenses",
    "filter_revenue",
    "group_by_date",
    "is_low_stock",
    "low_stock_items",
    "monthly_summary",
]
