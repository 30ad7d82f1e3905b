"""Application service: Quote Invoice use case (query).

Prices a draft exactly as invoice creation would, without checking the
patient or stock and without saving anything.  A voucher that cannot be
used is reported on the quote instead of failing it.
"""

from __future__ import annotations

from clinic.application.clock import Clock, utcnow
from clinic.application.dto import InvoiceDraft, InvoiceItemDTO, QuoteDTO
from clinic.application.price_draft import price_draft, voucher_code_of
from clinic.domain.repository.unit_of_work import UnitOfWork


class QuoteInvoiceHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, draft: InvoiceDraft) -> QuoteDTO:
        with self._uow as uow:
            priced = price_draft(uow, draft, self._clock(), strict_voucher=False)

        totals = priced.totals
        if priced.voucher is not None:
            voucher_message = f"Voucher {priced.voucher.code}: -{totals.voucher_discount}"
        elif priced.voucher_error is not None:
            voucher_message = str(priced.voucher_error)
        else:
            voucher_message = None

        return QuoteDTO(
            subtotal=totals.subtotal.amount,
            processing_fee=totals.fees.processing.amount,
            shipping_fee=totals.fees.shipping.amount,
            service_fee=totals.fees.service.amount,
            fees=totals.fees.total.amount,
            total_before_tax=totals.total_before_tax.amount,
            tax=totals.tax.amount,
            discount=totals.discount.amount,
            voucher_code=priced.voucher.code if priced.voucher else voucher_code_of(draft),
            voucher_discount=totals.voucher_discount.amount,
            total=totals.total,
            voucher_message=voucher_message,
            voucher_reason=(
                priced.voucher_error.reason.value if priced.voucher_error else None
            ),
            lines=[
                InvoiceItemDTO(
                    id=None,
                    product_id=item.product_id,
                    product_code=priced.products[item.product_id].code,
                    product_name=item.product_name,
                    quantity=item.quantity.value,
                    unit_price=item.unit_price.amount,
                    total_price=item.total_price.amount,
                )
                for item in priced.items
            ],
        )
