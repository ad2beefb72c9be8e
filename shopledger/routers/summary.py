from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from shopledger.config import get_settings
from shopledger.core.dates import normalize_date
from shopledger.dependencies import get_live_ledger
from shopledger.services.aggregation_service import category_breakdown, daily_series

router = APIRouter(prefix="/summary", tags=["Summary"])


def _require_date(value: Optional[str], name: str) -> Optional[str]:
    if value is None:
        return None
    normalized = normalize_date(value)
    if normalized is None:
        raise HTTPException(status_code=400, detail="{} must be YYYY-MM-DD.".format(name))
    return normalized


@router.get("/daily/{day}")
def daily(day: str, live_ledger=Depends(get_live_ledger)):
    return live_ledger.daily_summary(_require_date(day, "day"))


@router.get("/monthly/{year}/{month}")
def monthly(
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., description="1-12; other values match no records"),
    live_ledger=Depends(get_live_ledger),
):
    summary = live_ledger.monthly_summary(year, month)
    return {
        "summary": summary,
        "series": daily_series(summary),
        "categories": category_breakdown(summary.expenses_by_category, sorted_by_amount=True),
    }


@router.get("/categories")
def categories(
    date_from: Optional[str] = Query(None, description="Inclusive start date"),
    date_to: Optional[str] = Query(None, description="Inclusive end date"),
    live_ledger=Depends(get_live_ledger),
):
    totals = live_ledger.category_totals(
        _require_date(date_from, "date_from"),
        _require_date(date_to, "date_to"),
    )
    return {"totals": totals, "breakdown": category_breakdown(totals)}


@router.get("/all-time")
def all_time(live_ledger=Depends(get_live_ledger)):
    settings = get_settings()
    return {
        "totals": live_ledger.all_time_totals(),
        "recent_expenses": live_ledger.recent_expenses(settings.RECENT_EXPENSES_LIMIT),
    }


@router.get("/low-stock")
def low_stock(live_ledger=Depends(get_live_ledger)):
    stock = live_ledger.low_stock()
    consumables = live_ledger.low_consumables()
    return {
        "count": len(stock) + len(consumables),
        "stock": stock,
        "consumables": consumables,
    }


__all__ = ["router"]
