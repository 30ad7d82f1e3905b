"""Application service: Create Invoice use case.

Orchestrates pricing, voucher redemption and stock movements for a new
invoice.  Everything happens in one unit of work: the invoice and its
items, the guarded stock decrements and the guarded voucher usage
increment are committed together or not at all.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from clinic.application.clock import Clock, utcnow
from clinic.application.dto import InvoiceDraft, InvoiceDTO, invoice_to_dto
from clinic.application.price_draft import price_draft
from clinic.domain.exceptions import ConflictError, EntityNotFoundError, ValidationError
from clinic.domain.model.invoice import Invoice, InvoiceType, generate_invoice_code
from clinic.domain.repository.unit_of_work import UnitOfWork
from clinic.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 10


class CreateInvoiceHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, draft: InvoiceDraft) -> InvoiceDTO:
        """Create and persist a new invoice.

        Steps:
        1. Check the patient exists and the cart is not empty.
        2. Price the cart with current product prices; re-validate the
           voucher against the subtotal.
        3. Let the Invoice aggregate reject a non-positive total.
        4. Insert it, decrement stock, record the voucher redemption.
        5. Commit and return a DTO.
        """
        now = self._clock()

        with self._uow as uow:
            if draft.patient_id is None:
                raise ValidationError("Patient is required")
            patient = uow.patients.get_by_id(draft.patient_id)
            if patient is None:
                raise EntityNotFoundError(f"Patient #{draft.patient_id} not found")

            if not draft.items:
                raise ValidationError("Invoice must contain at least one item")

            priced = price_draft(uow, draft, now)

            invoice = Invoice.create(
                code=self._unique_code(uow, priced.invoice_type, now),
                patient_id=patient.id,  # type: ignore[arg-type]
                invoice_type=priced.invoice_type,
                items=priced.items,
                totals=priced.totals,
                voucher_code=priced.voucher.code if priced.voucher else None,
                notes=draft.notes,
                instructions=draft.instructions,
                dosage=draft.dosage,
                follow_up_date=draft.follow_up_date,
                created_at=now,
            )

            StockLedger(uow.products).take_for_invoice(invoice)
            uow.invoices.add(invoice)

            if priced.voucher is not None:
                if not uow.vouchers.increment_usage(priced.voucher.id):  # type: ignore[arg-type]
                    raise ConflictError(
                        f"Voucher {priced.voucher.code} has no uses left"
                    )

            uow.commit()

        logger.info(
            "Invoice %s created for patient #%s: total %s (%d item(s), voucher %s)",
            invoice.code,
            invoice.patient_id,
            invoice.total,
            len(invoice.items),
            invoice.voucher_code or "-",
        )
        return invoice_to_dto(invoice, patient, priced.products)

    def _unique_code(
        self, uow: UnitOfWork, invoice_type: InvoiceType, now: datetime
    ) -> str:
        """Timestamp-based code; on collision step the timestamp forward."""
        for attempt in range(MAX_CODE_ATTEMPTS):
            code = generate_invoice_code(invoice_type, now + timedelta(milliseconds=attempt))
            if not uow.invoices.code_exists(code):
                return code
        raise ConflictError("Could not allocate a unique invoice code, please retry")
