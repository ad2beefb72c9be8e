from fastapi import APIRouter

from shopledger.core.constants import (
    COMMON_UNITS,
    CONSUMABLE_CATEGORY_LABELS,
    EXPENSE_CATEGORY_LABELS,
    REVENUE_SOURCE_LABELS,
    STOCK_CATEGORY_LABELS,
)

router = APIRouter(prefix="/meta", tags=["Meta"])


def _options(labels):
    return [{"value": key.value, "label": label} for key, label in labels.items()]


@router.get("/categories")
def category_options():
    return {
        "expense_categories": _options(EXPENSE_CATEGORY_LABELS),
        "stock_categories": _options(STOCK_CATEGORY_LABELS),
        "consumable_categories": _options(CONSUMABLE_CATEGORY_LABELS),
        "revenue_sources": _options(REVENUE_SOURCE_LABELS),
        "units": list(COMMON_UNITS),
    }
