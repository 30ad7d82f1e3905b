"""Application service: Update Invoice Signature use case."""

from __future__ import annotations

from clinic.application.dto import InvoiceDTO
from clinic.application.show_invoice import render_invoice
from clinic.domain.exceptions import EntityNotFoundError
from clinic.domain.repository.unit_of_work import UnitOfWork


class UpdateInvoiceSignatureHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, invoice_id: int, signature: str) -> InvoiceDTO:
        """Store the signature payload as given (typically a data URL)."""
        with self._uow as uow:
            invoice = uow.invoices.get_by_id(invoice_id)
            if invoice is None:
                raise EntityNotFoundError(f"Invoice #{invoice_id} not found")

            invoice.sign(signature)
            uow.invoices.update(invoice)
            uow.commit()
            return render_invoice(uow, invoice)
