"""Application service: Update Invoice Status use case.

Only UNPAID -> PAID and UNPAID -> CANCELLED are accepted (setting the
current status again is a no-op).  Changing the status never touches
stock or voucher usage.
"""

from __future__ import annotations

import logging

from clinic.application.dto import InvoiceDTO
from clinic.application.show_invoice import parse_status, render_invoice
from clinic.domain.exceptions import EntityNotFoundError
from clinic.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class UpdateInvoiceStatusHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, invoice_id: int, status: str) -> InvoiceDTO:
        new_status = parse_status(status)

        with self._uow as uow:
            invoice = uow.invoices.get_by_id(invoice_id)
            if invoice is None:
                raise EntityNotFoundError(f"Invoice #{invoice_id} not found")

            if invoice.change_status(new_status):
                uow.invoices.update(invoice)
                uow.commit()
                logger.info("Invoice %s marked %s", invoice.code, new_status.value)

            return render_invoice(uow, invoice)
