"""Pricing of an invoice draft, shared by the quote and create use cases.

Resolves each requested product to its current price (the snapshot an
invoice keeps), applies type-dependent default fees, and runs the
voucher validator against the subtotal so the discount is always
computed server-side.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from clinic.application.dto import InvoiceDraft
from clinic.domain.exceptions import (
    EntityNotFoundError,
    ValidationError,
    VoucherRejectedError,
)
from clinic.domain.model.invoice import InvoiceItem, InvoiceType
from clinic.domain.model.product import Product
from clinic.domain.model.value_objects import Money, Quantity
from clinic.domain.model.voucher import Voucher, normalize_code
from clinic.domain.repository.unit_of_work import UnitOfWork
from clinic.domain.service.pricing_engine import Fees, PricedLine, Totals, compute_totals
from clinic.domain.service.voucher_validator import VoucherValidator

logger = logging.getLogger(__name__)


@dataclass
class PricedDraft:
    invoice_type: InvoiceType
    items: list[InvoiceItem]
    products: dict[int, Product]
    totals: Totals
    voucher: Voucher | None = None
    voucher_error: VoucherRejectedError | None = None


def parse_invoice_type(raw: str | None) -> InvoiceType:
    if not raw:
        return InvoiceType.GLASSES
    try:
        return InvoiceType(raw.strip().lower())
    except ValueError:
        valid = ", ".join(t.value for t in InvoiceType)
        raise ValidationError(f"Unknown invoice type '{raw}' (expected one of: {valid})")


def resolve_fees(draft: InvoiceDraft, invoice_type: InvoiceType) -> Fees:
    defaults = Fees.default_for(invoice_type)
    return Fees(
        processing=_fee(draft.processing_fee, defaults.processing),
        shipping=_fee(draft.shipping_fee, defaults.shipping),
        service=_fee(draft.service_fee, defaults.service),
    )


def price_draft(
    uow: UnitOfWork,
    draft: InvoiceDraft,
    now: datetime,
    strict_voucher: bool = True,
) -> PricedDraft:
    """Price *draft* inside an open unit of work.

    With ``strict_voucher`` a rejected voucher raises; otherwise the
    rejection is returned on the result and the voucher is left out.
    """
    invoice_type = parse_invoice_type(draft.invoice_type)

    items: list[InvoiceItem] = []
    products: dict[int, Product] = {}
    for spec in draft.items:
        product = uow.products.get_by_id(spec.product_id)
        if product is None:
            raise EntityNotFoundError(f"Product #{spec.product_id} not found")
        products[product.id] = product  # type: ignore[index]
        items.append(
            InvoiceItem(
                product_id=product.id,  # type: ignore[arg-type]
                product_name=product.name,
                quantity=Quantity(spec.quantity),
                unit_price=product.price,  # snapshot
            )
        )

    lines = [PricedLine(item.unit_price, item.quantity) for item in items]
    fees = resolve_fees(draft, invoice_type)
    discount = Money(draft.discount)

    voucher = None
    voucher_error = None
    voucher_discount = Money.zero()
    if draft.voucher_code and draft.voucher_code.strip():
        subtotal = compute_totals(lines, fees).subtotal
        try:
            quote = VoucherValidator(uow.vouchers).validate(draft.voucher_code, subtotal, now)
        except VoucherRejectedError as exc:
            if strict_voucher:
                raise
            logger.debug("Voucher %s left out of quote: %s", draft.voucher_code, exc)
            voucher_error = exc
        else:
            voucher, voucher_discount = quote.voucher, quote.discount

    totals = compute_totals(lines, fees, discount, voucher_discount)
    return PricedDraft(
        invoice_type=invoice_type,
        items=items,
        products=products,
        totals=totals,
        voucher=voucher,
        voucher_error=voucher_error,
    )


def voucher_code_of(draft: InvoiceDraft) -> str | None:
    if draft.voucher_code and draft.voucher_code.strip():
        return normalize_code(draft.voucher_code)
    return None


def _fee(value: int | None, default: Money) -> Money:
    return default if value is None else Money(value)
