"""Domain service: Pricing Engine.

Pure functions that turn a cart of priced lines plus fee and discount
inputs into invoice totals.  No repository access, no hidden state, so
the same inputs always produce the same ``Totals`` and the engine can be
called on every keystroke of an interactive invoice editor.

    subtotal         = sum(price * quantity)
    total_before_tax = subtotal + processing + shipping + service
    tax              = round_half_up(total_before_tax * 10%)
    total            = total_before_tax + tax - discount - voucher_discount

``total`` is not clamped: a discount larger than the bill yields a zero or
negative total and it is up to the caller to reject it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from clinic.domain.model.invoice import InvoiceType
from clinic.domain.model.value_objects import Money, Quantity

TAX_RATE_PERCENT = Decimal("10")

GLASSES_PROCESSING_FEE = Money(50_000)
DEFAULT_SERVICE_FEE = Money(20_000)


@dataclass(frozen=True)
class PricedLine:
    price: Money
    quantity: Quantity = Quantity(1)

    @property
    def line_total(self) -> Money:
        return self.price * self.quantity.value


@dataclass(frozen=True)
class Fees:
    processing: Money = Money.zero()
    shipping: Money = Money.zero()
    service: Money = Money.zero()

    @property
    def total(self) -> Money:
        return self.processing + self.shipping + self.service

    @staticmethod
    def default_for(invoice_type: InvoiceType) -> Fees:
        """Fees pre-filled on a new invoice of the given type."""
        processing = (
            GLASSES_PROCESSING_FEE if invoice_type is InvoiceType.GLASSES else Money.zero()
        )
        return Fees(processing=processing, service=DEFAULT_SERVICE_FEE)


@dataclass(frozen=True)
class Totals:
    subtotal: Money
    fees: Fees
    total_before_tax: Money
    tax: Money
    discount: Money
    voucher_discount: Money
    total: int  # may be <= 0; see module docstring


def compute_totals(
    lines: Iterable[PricedLine],
    fees: Fees,
    discount: Money = Money.zero(),
    voucher_discount: Money = Money.zero(),
) -> Totals:
    subtotal = Money.zero()
    for line in lines:
        subtotal = subtotal + line.line_total

    total_before_tax = subtotal + fees.total
    tax = total_before_tax.percent(TAX_RATE_PERCENT)
    total = (
        total_before_tax.amount
        + tax.amount
        - discount.amount
        - voucher_discount.amount
    )
    return Totals(
        subtotal=subtotal,
        fees=fees,
        total_before_tax=total_before_tax,
        tax=tax,
        discount=discount,
        voucher_discount=voucher_discount,
        total=total,
    )
