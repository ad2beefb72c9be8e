from typing import Optional

from pydantic import Field, field_validator

from shopledger.core.constants import ExpenseCategory, RevenueSource
from shopledger.schemas.common import RecordModel, blank_to_none, validate_iso_date


class ExpenseBase(RecordModel):
    date: str
    category: ExpenseCategory
    item: str = Field(min_length=1)
    quantity: float = Field(default=1.0, ge=0)
    unit: str = "pcs"
    amount: float = Field(ge=0)
    notes: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, value):
        return validate_iso_date(value)

    @field_validator("notes", mode="before")
    @classmethod
    def check_notes(cls, value):
        return blank_to_none(value)


class ExpenseCreate(ExpenseBase):
    pass


class Expense(ExpenseBase):
    id: str
    created_at: str
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None


class RevenueBase(RecordModel):
    date: str
    amount: float = Field(ge=0)
    source: RevenueSource = RevenueSource.cash
    notes: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, value):
        return validate_iso_date(value)

    @field_validator("notes", mode="before")
    @classmethod
    def check_notes(cls, value):
        return blank_to_none(value)


class RevenueCreate(RevenueBase):
    pass


class RevenueEntry(RevenueBase):
    id: str
    created_at: str
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None


__all__ = [
    "Expense",
    "ExpenseBase",
    "ExpenseCreate",
    "RevenueBase",
    "RevenueCreate",
    "RevenueEntry",
]
