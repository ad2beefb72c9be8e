from typing import Optional

from pydantic import Field, field_validator

from shopledger.core.constants import ConsumableCategory, StockCategory
from shopledger.core.dates import today_iso
from shopledger.schemas.common import RecordModel, blank_to_none, validate_iso_date


class InventoryItemBase(RecordModel):
    name: str = Field(min_length=1)
    current_quantity: float = Field(default=0.0, ge=0)
    unit: str = "kg"
    # 0 turns low-stock alerting off for the item.
    min_level: float = Field(default=0.0, ge=0)
    last_purchased: str = Field(default_factory=today_iso)
    last_purchase_price: float = Field(default=0.0, ge=0)

    @field_validator("last_purchased", mode="before")
    @classmethod
    def check_last_purchased(cls, value):
        return validate_iso_date(value)


class StockItemCreate(InventoryItemBase):
    category: StockCategory = StockCategory.other
    notes: Optional[str] = None

    @field_validator("notes", mode="before")
    @classmethod
    def check_notes(cls, value):
        return blank_to_none(value)


class StockItem(StockItemCreate):
    id: str
    user_id: Optional[str] = None


class ConsumableItemCreate(InventoryItemBase):
    category: ConsumableCategory = ConsumableCategory.other


class ConsumableItem(ConsumableItemCreate):
    id: str
    user_id: Optional[str] = None


class QuantityAdjustment(RecordModel):
    delta: float


__all__ = [
    "ConsumableItem",
    "ConsumableItemCreate",
    "InventoryItemBase",
    "QuantityAdjustment",
    "StockItem",
    "StockItemCreate",
]
