from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from clinic.application.clock import Clock
from clinic.application.create_invoice import CreateInvoiceHandler
from clinic.application.delete_invoice import DeleteInvoiceHandler
from clinic.application.dto import InvoiceDraft, InvoiceItemSpec
from clinic.application.quote_invoice import QuoteInvoiceHandler
from clinic.application.show_invoice import ListInvoicesHandler, ShowInvoiceHandler
from clinic.application.sign_invoice import UpdateInvoiceSignatureHandler
from clinic.application.update_invoice_status import UpdateInvoiceStatusHandler
from clinic.infrastructure.api.dependencies import RowId, camelize, get_clock, get_uow
from clinic.infrastructure.api.schemas import InvoiceIn, SignatureIn, StatusIn

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


def _draft(payload: InvoiceIn) -> InvoiceDraft:
    # unitPrice and voucherDiscount from the client are not used
    return InvoiceDraft(
        patient_id=payload.patient_id,
        items=[InvoiceItemSpec(i.product_id, i.quantity) for i in payload.items],
        invoice_type=payload.type,
        processing_fee=payload.processing_fee,
        shipping_fee=payload.shipping_fee,
        service_fee=payload.service_fee,
        discount=payload.discount,
        voucher_code=payload.voucher_code,
        notes=payload.notes,
        instructions=payload.instructions,
        dosage=payload.dosage,
        follow_up_date=payload.follow_up_date,
    )


@router.get("")
def list_invoices(status: Optional[str] = None, uow=Depends(get_uow)):
    return camelize(ListInvoicesHandler(uow).handle(status=status))


@router.post("/quote")
def quote_invoice(payload: InvoiceIn, uow=Depends(get_uow), clock: Clock = Depends(get_clock)):
    return camelize(QuoteInvoiceHandler(uow, clock).handle(_draft(payload)))


@router.get("/{invoice_id}")
def get_invoice(invoice_id: RowId, uow=Depends(get_uow)):
    return camelize(ShowInvoiceHandler(uow).handle(invoice_id))


@router.post("", status_code=201)
def create_invoice(payload: InvoiceIn, uow=Depends(get_uow), clock: Clock = Depends(get_clock)):
    return camelize(CreateInvoiceHandler(uow, clock).handle(_draft(payload)))


@router.patch("/{invoice_id}/status")
def update_status(invoice_id: RowId, payload: StatusIn, uow=Depends(get_uow)):
    return camelize(UpdateInvoiceStatusHandler(uow).handle(invoice_id, payload.status))


@router.patch("/{invoice_id}/signature")
def update_signature(invoice_id: RowId, payload: SignatureIn, uow=Depends(get_uow)):
    return camelize(UpdateInvoiceSignatureHandler(uow).handle(invoice_id, payload.signature))


@router.delete("/{invoice_id}")
def delete_invoice(invoice_id: RowId, uow=Depends(get_uow)):
    DeleteInvoiceHandler(uow).handle(invoice_id)
    return {"success": True}
