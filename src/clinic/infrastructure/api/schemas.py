"""Request bodies for the HTTP API.

Field names are accepted in camelCase (``patientId``) as well as
snake_case.  Amounts are integers in dong.  Integers are bounded to what
an SQLite INTEGER column holds; anything outside is a 400.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from clinic.domain.model.value_objects import MAX_INTEGER

SqlInt = Annotated[int, Field(ge=-MAX_INTEGER - 1, le=MAX_INTEGER)]
Amount = Annotated[int, Field(ge=0, le=MAX_INTEGER)]

_DATE_ONLY = re.compile(r"^\s*\d{4}-\d{2}-\d{2}\s*$")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _through_end_of_day(value: Any) -> Any:
    """A bare ``YYYY-MM-DD`` end date covers that whole day."""
    if isinstance(value, str) and _DATE_ONLY.match(value):
        day = date.fromisoformat(value.strip())
        return datetime.combine(day, time.max, tzinfo=timezone.utc)
    return value


# ----- Invoices -----


class InvoiceItemIn(CamelModel):
    product_id: SqlInt
    quantity: SqlInt = 1
    unit_price: Optional[int] = Field(None, description="Ignored: the product's current price is used")


class InvoiceIn(CamelModel):
    patient_id: Optional[SqlInt] = None
    type: str = "glasses"
    items: List[InvoiceItemIn] = Field(default_factory=list)
    processing_fee: Optional[Amount] = None
    shipping_fee: Optional[Amount] = None
    service_fee: Optional[Amount] = None
    discount: Amount = 0
    voucher_code: Optional[str] = None
    voucher_discount: Optional[int] = Field(None, description="Ignored: recomputed from the voucher")
    notes: Optional[str] = None
    instructions: Optional[str] = None
    dosage: Optional[str] = None
    follow_up_date: Optional[date] = None


class StatusIn(CamelModel):
    status: str


class SignatureIn(CamelModel):
    signature: str


# ----- Vouchers -----


class VoucherIn(CamelModel):
    code: str
    description: Optional[str] = None
    type: str
    value: SqlInt
    min_amount: Amount = 0
    max_discount: Optional[Amount] = None
    start_date: datetime
    end_date: datetime
    usage_limit: Optional[SqlInt] = None

    @field_validator("end_date", mode="before")
    @classmethod
    def end_of_day(cls, value: Any) -> Any:
        return _through_end_of_day(value)

    @field_validator("start_date", "end_date")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class VoucherUpdateIn(CamelModel):
    description: Optional[str] = None
    type: Optional[str] = None
    value: Optional[SqlInt] = None
    min_amount: Optional[Amount] = None
    max_discount: Optional[Amount] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    usage_limit: Optional[SqlInt] = None

    @field_validator("end_date", mode="before")
    @classmethod
    def end_of_day(cls, value: Any) -> Any:
        return _through_end_of_day(value)

    @field_validator("start_date", "end_date")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class VoucherCheckIn(CamelModel):
    code: str
    amount: int = 0


# ----- Products -----


class ProductIn(CamelModel):
    code: Optional[str] = None
    name: str
    category: Optional[str] = None
    manufacturer: Optional[str] = None
    material: Optional[str] = None
    sph_range: Optional[str] = None
    cyl_range: Optional[str] = None
    price: Amount = 0
    quantity: Amount = 0
    min_stock: Amount = 5
    expires_at: Optional[date] = None
    image_url: Optional[str] = None


class ProductUpdateIn(CamelModel):
    name: Optional[str] = None
    category: Optional[str] = None
    manufacturer: Optional[str] = None
    material: Optional[str] = None
    sph_range: Optional[str] = None
    cyl_range: Optional[str] = None
    price: Optional[Amount] = None
    quantity: Optional[Amount] = None
    min_stock: Optional[Amount] = None
    expires_at: Optional[date] = None
    image_url: Optional[str] = None


# ----- Patients -----


class PatientIn(CamelModel):
    full_name: str
    phone: Optional[str] = None
