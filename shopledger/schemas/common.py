from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from shopledger.core.dates import normalize_date


class RecordModel(BaseModel):
    """Base for stored records: snake_case attributes, camelCase documents."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
    )

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def validate_iso_date(value):
    normalized = normalize_date(value)
    if normalized is None:
        raise ValueError("date must be a YYYY-MM-DD calendar date")
    return normalized


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None
