from shopledger.schemas.expense import (
    Expense,
    ExpenseCreate,
    RevenueCreate,
    RevenueEntry,
)
from shopledger.schemas.inventory import (
    ConsumableItem,
    ConsumableItemCreate,
    QuantityAdjustment,
    StockItem,
    StockItemCreate,
)

__all__ = [
    "ConsumableItem",
    "ConsumableItemCreate",
    "Expense",
    "ExpenseCreate",
    "QuantityAdjustment",
    "RevenueCreate",
    "RevenueEntry",
    "StockItem",
    "StockItemCreate",
]
