from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Optional, Type, Union

from pydantic import BaseModel, ValidationError

from shopledger.core.constants import (
    CONSUMABLES_COLLECTION,
    EXPENSES_COLLECTION,
    REVENUE_COLLECTION,
    STOCK_COLLECTION,
)
from shopledger.core.dates import utc_now_iso
from shopledger.core.errors import RecordValidationError
from shopledger.core.session import SessionContext, require_session
from shopledger.schemas.expense import ExpenseCreate, RevenueCreate
from shopledger.schemas.inventory import ConsumableItemCreate, StockItemCreate
from shopledger.services.aggregation_service import clamp_quantity
from shopledger.store.base import RecordStore

logger = logging.getLogger(__name__)

Payload = Union[BaseModel, Mapping[str, Any]]


def _validate(model: Type[BaseModel], payload: Payload) -> BaseModel:
    if isinstance(payload, model):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in error["loc"]) for error in exc.errors()})
        raise RecordValidationError(
            "Please fill in all required fields: {}".format(", ".join(fields)),
            errors=[
                {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
                for error in exc.errors()
            ],
        ) from exc


class LedgerService:
    """Create/delete/adjust operations against the record store.

    Every call takes the acting session explicitly. Nothing is cached
    locally: callers observe the result through their next snapshot, and a
    failed request surfaces as an exception from the call itself.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    # =========================================================================
    # Expenses & revenue
    # =========================================================================

    def add_expense(self, session: Optional[SessionContext], payload: Payload) -> str:
        session = require_session(session)
        expense = _validate(ExpenseCreate, payload)
        document = {
            **expense.to_document(),
            **session.attribution(),
            "createdAt": utc_now_iso(),
        }
        record_id = self.store.create(EXPENSES_COLLECTION, document)
        logger.info(
            "Expense %s added by %s: %s %.2f",
            record_id,
            session.user_id,
            expense.category.value,
            expense.amount,
            extra={"collection": EXPENSES_COLLECTION, "record_id": record_id, "user_id": session.user_id},
        )
        return record_id

    def delete_expense(self, session: Optional[SessionContext], record_id: str) -> None:
        require_session(session)
        self.store.delete(EXPENSES_COLLECTION, record_id)

    def add_revenue(self, session: Optional[SessionContext], payload: Payload) -> str:
        session = require_session(session)
        entry = _validate(RevenueCreate, payload)
        document = {
            **entry.to_document(),
            **session.attribution(),
            "createdAt": utc_now_iso(),
        }
        record_id = self.store.create(REVENUE_COLLECTION, document)
        logger.info(
            "Revenue %s added by %s: %.2f",
            record_id,
            session.user_id,
            entry.amount,
            extra={"collection": REVENUE_COLLECTION, "record_id": record_id, "user_id": session.user_id},
        )
        return record_id

    def delete_revenue(self, session: Optional[SessionContext], record_id: str) -> None:
        require_session(session)
        self.store.delete(REVENUE_COLLECTION, record_id)

    # =========================================================================
    # Stock & consumables
    # =========================================================================

    def _add_item(self, session, collection, model, payload) -> str:
        session = require_session(session)
        item = _validate(model, payload)
        document = {**item.to_document(), "userId": session.user_id}
        record_id = self.store.create(collection, document)
        logger.info("Added %s/%s (%s)", collection, record_id, item.name)
        return record_id

    def _adjust_quantity(self, session, collection, record_id, delta) -> float:
        require_session(session)
        try:
            delta = float(delta)
        except (TypeError, ValueError) as exc:
            raise RecordValidationError("Quantity change must be a number") from exc
        if not math.isfinite(delta):
            raise RecordValidationError("Quantity change must be a finite number")

        previous = {}

        def apply_delta(document: dict) -> dict:
            current = float(document.get("currentQuantity") or 0)
            previous["quantity"] = current
            return {"currentQuantity": clamp_quantity(current, delta)}

        fields = self.store.update_with(collection, record_id, apply_delta)
        new_quantity = fields["currentQuantity"]
        logger.info(
            "Adjusted %s/%s quantity %s -> %s (delta %s)",
            collection,
            record_id,
            previous.get("quantity"),
            new_quantity,
            delta,
        )
        return new_quantity

    def add_stock_item(self, session: Optional[SessionContext], payload: Payload) -> str:
        return self._add_item(session, STOCK_COLLECTION, StockItemCreate, payload)

    def adjust_stock_quantity(self, session: Optional[SessionContext], record_id: str, delta: float) -> float:
        return self._adjust_quantity(session, STOCK_COLLECTION, record_id, delta)

    def delete_stock_item(self, session: Optional[SessionContext], record_id: str) -> None:
        require_session(session)
        self.store.delete(STOCK_COLLECTION, record_id)

    def add_consumable(self, session: Optional[SessionContext], payload: Payload) -> str:
        return self._add_item(session, CONSUMABLES_COLLECTION, ConsumableItemCreate, payload)

    def adjust_consumable_quantity(
        self, session: Optional[SessionContext], record_id: str, delta: float
    ) -> float:
        return self._adjust_quantity(session, CONSUMABLES_COLLECTION, record_id, delta)

    def delete_consumable(self, session: Optional[SessionContext], record_id: str) -> None:
        require_session(session)
        self.store.delete(CONSUMABLES_COLLECTION, record_id)


__all__ = ["LedgerService"]
