"""Invoice aggregate — the core of the billing domain.

The Invoice is an aggregate root that owns its line items. Once created
its amounts never change; only the payment ``status`` and the customer
``signature`` may be updated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING

from clinic.domain.exceptions import ValidationError
from clinic.domain.model.value_objects import Money, Quantity

if TYPE_CHECKING:
    from clinic.domain.service.pricing_engine import Totals


class InvoiceType(Enum):
    GLASSES = "glasses"
    EXAMINATION = "examination"
    MEDICINE = "medicine"


class InvoiceStatus(Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


ALLOWED_TRANSITIONS = {
    InvoiceStatus.UNPAID: {InvoiceStatus.PAID, InvoiceStatus.CANCELLED},
}


def generate_invoice_code(invoice_type: InvoiceType, now: datetime) -> str:
    """Human-readable code: ``HK-`` for glasses, ``HT-`` otherwise, then the
    year and the last nine digits of the epoch-millisecond timestamp."""
    prefix = "HK" if invoice_type is InvoiceType.GLASSES else "HT"
    millis = int(now.timestamp() * 1000)
    return f"{prefix}-{now.year}{str(millis)[-9:]}"


@dataclass
class InvoiceItem:
    """Captures the price of a product at invoice-creation time."""

    product_id: int
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at invoice-creation time
    id: int | None = None

    @property
    def total_price(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Invoice:
    """Aggregate root for invoices.

    New invoices come from the ``Invoice.create()`` factory, which enforces
    the business rules.  The repository calls ``__init__`` directly to
    reconstitute persisted invoices without re-validating them.
    """

    id: int | None
    code: str
    patient_id: int
    type: InvoiceType
    items: list[InvoiceItem]
    subtotal: Money
    processing_fee: Money
    shipping_fee: Money
    service_fee: Money
    tax: Money
    discount: Money
    voucher_discount: Money
    total: Money
    voucher_code: str | None = None
    status: InvoiceStatus = InvoiceStatus.UNPAID
    signature: str | None = None
    notes: str | None = None
    instructions: str | None = None
    dosage: str | None = None
    follow_up_date: date | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW invoices only) ---------------------------------

    @staticmethod
    def create(
        code: str,
        patient_id: int,
        invoice_type: InvoiceType,
        items: list[InvoiceItem],
        totals: Totals,
        voucher_code: str | None = None,
        notes: str | None = None,
        instructions: str | None = None,
        dosage: str | None = None,
        follow_up_date: date | None = None,
        created_at: datetime | None = None,
    ) -> Invoice:
        """Create a new invoice from priced items, enforcing all invariants."""
        if not items:
            raise ValidationError("Invoice must contain at least one item")

        if totals.total <= 0:
            raise ValidationError(
                f"Invoice total must be positive, got {totals.total}"
            )

        return Invoice(
            id=None,
            code=code,
            patient_id=patient_id,
            type=invoice_type,
            items=list(items),
            subtotal=totals.subtotal,
            processing_fee=totals.fees.processing,
            shipping_fee=totals.fees.shipping,
            service_fee=totals.fees.service,
            tax=totals.tax,
            discount=totals.discount,
            voucher_discount=totals.voucher_discount,
            total=Money(totals.total),
            voucher_code=voucher_code,
            notes=_blank_to_none(notes),
            instructions=_blank_to_none(instructions),
            dosage=_blank_to_none(dosage),
            follow_up_date=follow_up_date,
            created_at=created_at or datetime.now(timezone.utc),
        )

    # --- State transitions ----------------------------------------------------

    def change_status(self, new_status: InvoiceStatus) -> bool:
        """Move to *new_status*; returns False when it is already there.

        Only UNPAID -> PAID and UNPAID -> CANCELLED are allowed.
        """
        if new_status == self.status:
            return False
        if new_status not in ALLOWED_TRANSITIONS.get(self.status, set()):
            raise ValidationError(
                f"Cannot change invoice {self.code} from {self.status.value} "
                f"to {new_status.value}"
            )
        self.status = new_status
        return True

    def sign(self, signature: str) -> None:
        """Attach the customer's signature (an opaque image payload)."""
        if not signature or not signature.strip():
            raise ValidationError("Signature is required")
        self.signature = signature

    # --- Computed properties --------------------------------------------------

    @property
    def fees_total(self) -> Money:
        return self.processing_fee + self.shipping_fee + self.service_fee

    def quantities_by_product(self) -> dict[int, int]:
        """Total units per product across all lines."""
        result: dict[int, int] = {}
        for item in self.items:
            result[item.product_id] = result.get(item.product_id, 0) + item.quantity.value
        return result


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None
