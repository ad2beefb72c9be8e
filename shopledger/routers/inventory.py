from fastapi import APIRouter, Depends, Query, status

from shopledger.core.errors import LedgerError
from shopledger.core.session import SessionContext
from shopledger.dependencies import (
    get_ledger_service,
    get_live_ledger,
    require_auth,
    to_http_exception,
)
from shopledger.schemas.inventory import (
    ConsumableItemCreate,
    QuantityAdjustment,
    StockItemCreate,
)
from shopledger.services.aggregation_service import is_low_stock

router = APIRouter(tags=["Inventory"])


def _item_listing(items, low_only: bool):
    rows = [
        {"item": item, "low": is_low_stock(item)}
        for item in items
        if not low_only or is_low_stock(item)
    ]
    return {"count": len(rows), "low_count": sum(1 for row in rows if row["low"]), "results": rows}


@router.get("/stock")
def list_stock(
    low_only: bool = Query(False, description="Only items at or below their minimum level"),
    live_ledger=Depends(get_live_ledger),
):
    return _item_listing(live_ledger.stock_items, low_only)


@router.post("/stock", status_code=status.HTTP_201_CREATED)
def create_stock_item(
    payload: StockItemCreate,
    service=Depends(get_ledger_service),
    session: SessionContext = Depends(require_auth),
):
    try:
        record_id = service.add_stock_item(session, payload)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return {"id": record_id}


@router.post("/stock/{record_id}/adjust")
def adjust_stock_item(
    record_id: str,
    payload: QuantityAdjustment,
    service=Depends(get_ledger_service),
    session: SessionContext = Depends(require_auth),
):
    try:
        quantity = service.adjust_stock_quantity(session, record_id, payload.delta)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return {"id": record_id, "currentQuantity": quantity}


@router.delete("/stock/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_stock_item(
    record_id: str,
    service=Depends(get_ledger_service),
    session: SessionContext = Depends(require_auth),
):
    try:
        service.delete_stock_item(session, record_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc


@router.get("/consumables")
def list_consumables(
    low_only: bool = Query(False, description="Only items at or below their minimum level"),
    live_ledger=Depends(get_live_ledger),
):
    return _item_listing(live_ledger.consumables, low_only)


@router.post("/consumables", status_code=status.HTTP_201_CREATED)
def create_consumable(
    payload: ConsumableItemCreate,
    service=Depends(get_ledger_service),
    session: SessionContext = Depends(require_auth),
):
    try:
        record_id = service.add_consumable(session, payload)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return {"id": record_id}


@router.post("/consumables/{record_id}/adjust")
def adjust_consumable(
    record_id: str,
    payload: QuantityAdjustment,
    service=Depends(get_ledger_service),
    session: SessionContext = Depends(require_auth),
):
    try:
        quantity = service.adjust_consumable_quantity(session, record_id, payload.delta)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return {"id": record_id, "currentQuantity": quantity}


@router.delete("/consumables/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_consumable(
    record_id: str,
    service=Depends(get_ledger_service),
    session: SessionContext = Depends(require_auth),
):
    try:
        service.delete_consumable(session, record_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc


__all__ = ["router"]
