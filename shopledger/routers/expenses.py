from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from shopledger.core.constants import ALL_CATEGORIES, ExpenseCategory
from shopledger.core.dates import normalize_date
from shopledger.core.errors import LedgerError
from shopledger.core.session import SessionContext
from shopledger.dependencies import (
    get_ledger_service,
    get_live_ledger,
    require_auth,
    to_http_exception,
)
from shopledger.schemas.expense import ExpenseCreate, RevenueCreate
from shopledger.services.filter_service import (
    filter_expenses,
    filter_revenue,
    group_by_date,
    group_totals,
    has_filters,
)

router = APIRouter(tags=["Expenses"])


def _parse_bound(value: Optional[str], name: str) -> Optional[str]:
    if value is None or not str(value).strip():
        return None
    normalized = normalize_date(value)
    if normalized is None:
        raise HTTPException(status_code=400, detail="{} must be YYYY-MM-DD.".format(name))
    return normalized


def _parse_category(value: Optional[str]) -> str:
    if not value or value == ALL_CATEGORIES:
        return ALL_CATEGORIES
    try:
        return ExpenseCategory(value).value
    except ValueError:
        raise HTTPException(status_code=400, detail="Unknown expense category: {}".format(value))


def _listing(records, grouped: bool, filtered: bool):
    if not grouped:
        return {"count": len(records), "filtered": filtered, "results": records}
    groups = group_by_date(records)
    totals = group_totals(groups)
    return {
        "count": len(records),
        "filtered": filtered,
        "groups": [
            {"date": day, "total": totals[day], "records": day_records}
            for day, day_records in groups.items()
        ],
    }


@router.get("/expenses")
def list_expenses(
    search: Optional[str] = Query(None, description="Item or notes text"),
    category: Optional[str] = Query(ALL_CATEGORIES, description="Expense category or 'all'"),
    date_from: Optional[str] = Query(None, description="Inclusive start date"),
    date_to: Optional[str] = Query(None, description="Inclusive end date"),
    grouped: bool = Query(False, description="Group results by date"),
    live_ledger=Depends(get_live_ledger),
):
    filters = dict(
        search=search,
        category=_parse_category(category),
        start_date=_parse_bound(date_from, "date_from"),
        end_date=_parse_bound(date_to, "date_to"),
    )
    records = filter_expenses(live_ledger.expenses, **filters)
    return _listing(records, grouped, has_filters(**filters))


@router.post("/expenses", status_code=status.HTTP_201_CREATED)
def create_expense(
    payload: ExpenseCreate,
    service=Depends(get_ledger_service),
    session: SessionContext = Depends(require_auth),
):
    try:
        record_id = service.add_expense(session, payload)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return {"id": record_id}


@router.delete("/expenses/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(
    record_id: str,
    service=Depends(get_ledger_service),
    session: SessionContext = Depends(require_auth),
):
    try:
        service.delete_expense(session, record_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc


@router.get("/revenue")
def list_revenue(
    search: Optional[str] = Query(None, description="Notes text"),
    date_from: Optional[str] = Query(None, description="Inclusive start date"),
    date_to: Optional[str] = Query(None, description="Inclusive end date"),
    grouped: bool = Query(False, description="Group results by date"),
    live_ledger=Depends(get_live_ledger),
):
    filters = dict(
        search=search,
        start_date=_parse_bound(date_from, "date_from"),
        end_date=_parse_bound(date_to, "date_to"),
    )
    records = filter_revenue(live_ledger.revenue, **filters)
    return _listing(records, grouped, has_filters(**filters))


@router.post("/revenue", status_code=status.HTTP_201_CREATED)
def create_revenue(
    payload: RevenueCreate,
    service=Depends(get_ledger_service),
    session: SessionContext = Depends(require_auth),
):
    try:
        record_id = service.add_revenue(session, payload)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return {"id": record_id}


@router.delete("/revenue/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_revenue(
    record_id: str,
    service=Depends(get_ledger_service),
    session: SessionContext = Depends(require_auth),
):
    try:
        service.delete_revenue(session, record_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc


__all__ = ["router"]
