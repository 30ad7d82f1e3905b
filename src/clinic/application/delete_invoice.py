"""Application service: Delete Invoice use case.

Puts every invoiced unit back into stock, then removes the invoice and
its items, all in one unit of work.  Voucher usage is not given back.
"""

from __future__ import annotations

import logging

from clinic.domain.exceptions import EntityNotFoundError
from clinic.domain.repository.unit_of_work import UnitOfWork
from clinic.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class DeleteInvoiceHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, invoice_id: int) -> None:
        with self._uow as uow:
            invoice = uow.invoices.get_by_id(invoice_id)
            if invoice is None:
                raise EntityNotFoundError(f"Invoice #{invoice_id} not found")

            # Restore before the record (and its item list) disappears
            StockLedger(uow.products).restore_for_invoice(invoice)
            uow.invoices.delete(invoice_id)
            uow.commit()

        logger.info("Invoice %s deleted, stock restored", invoice.code)
