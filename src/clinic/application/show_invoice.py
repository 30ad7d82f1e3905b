"""Application service: Show / List Invoices use cases (queries)."""

from __future__ import annotations

from clinic.application.dto import InvoiceDTO, invoice_to_dto
from clinic.domain.exceptions import EntityNotFoundError, ValidationError
from clinic.domain.model.invoice import Invoice, InvoiceStatus
from clinic.domain.repository.unit_of_work import UnitOfWork


def parse_status(raw: str) -> InvoiceStatus:
    try:
        return InvoiceStatus(raw.strip().upper())
    except ValueError:
        valid = ", ".join(s.value for s in InvoiceStatus)
        raise ValidationError(f"Unknown invoice status '{raw}' (expected one of: {valid})")


def render_invoice(uow: UnitOfWork, invoice: Invoice) -> InvoiceDTO:
    """Build the DTO with the patient and the item products resolved."""
    patient = uow.patients.get_by_id(invoice.patient_id)
    products = {}
    for product_id in invoice.quantities_by_product():
        product = uow.products.get_by_id(product_id)
        if product is not None:
            products[product_id] = product
    return invoice_to_dto(invoice, patient, products)


class ShowInvoiceHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, invoice_id: int) -> InvoiceDTO:
        with self._uow as uow:
            invoice = uow.invoices.get_by_id(invoice_id)
            if invoice is None:
                raise EntityNotFoundError(f"Invoice #{invoice_id} not found")
            return render_invoice(uow, invoice)


class ListInvoicesHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, status: str | None = None, limit: int = 100) -> list[InvoiceDTO]:
        wanted = parse_status(status) if status else None
        with self._uow as uow:
            invoices = uow.invoices.list_recent(status=wanted, limit=limit)
            return [render_invoice(uow, invoice) for invoice in invoices]
