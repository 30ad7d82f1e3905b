"""Tests for showing, listing, paying and signing invoices."""

from datetime import timedelta

import pytest

from clinic.application.create_invoice import CreateInvoiceHandler
from clinic.application.dto import InvoiceDraft, InvoiceItemSpec
from clinic.application.show_invoice import ListInvoicesHandler, ShowInvoiceHandler
from clinic.application.sign_invoice import UpdateInvoiceSignatureHandler
from clinic.application.update_invoice_status import UpdateInvoiceStatusHandler
from clinic.domain.exceptions import EntityNotFoundError, ValidationError
from tests.fakes import NOW, FakeUnitOfWork, fixed_clock, make_patient, make_product


def _setup(count: int = 1) -> tuple[FakeUnitOfWork, list[int]]:
    uow = FakeUnitOfWork(products=[make_product(quantity=20)], patients=[make_patient()])
    ids = []
    for n in range(count):
        handler = CreateInvoiceHandler(uow, clock=fixed_clock(NOW + timedelta(minutes=n)))
        ids.append(handler.handle(InvoiceDraft(patient_id=1, items=[InvoiceItemSpec(1, 1)])).id)
    return uow, ids


class TestShowAndList:

    def test_show(self):
        uow, (invoice_id,) = _setup()
        dto = ShowInvoiceHandler(uow).handle(invoice_id)
        assert dto.id == invoice_id
        assert dto.patient.code == "BN1"
        assert dto.items[0].product_name == "Gọng kính titan"

    def test_show_missing(self):
        uow, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            ShowInvoiceHandler(uow).handle(99)

    def test_list_newest_first(self):
        uow, ids = _setup(3)
        listed = ListInvoicesHandler(uow).handle()
        assert [dto.id for dto in listed] == list(reversed(ids))

    def test_list_filtered_by_status(self):
        uow, ids = _setup(2)
        UpdateInvoiceStatusHandler(uow).handle(ids[0], "PAID")
        assert [d.id for d in ListInvoicesHandler(uow).handle(status="paid")] == [ids[0]]
        assert [d.id for d in ListInvoicesHandler(uow).handle(status="UNPAID")] == [ids[1]]

    def test_list_with_unknown_status(self):
        uow, _ = _setup()
        with pytest.raises(ValidationError, match="Unknown invoice status"):
            ListInvoicesHandler(uow).handle(status="LOST")


class TestUpdateStatus:

    def test_pay(self):
        uow, (invoice_id,) = _setup()
        dto = UpdateInvoiceStatusHandler(uow).handle(invoice_id, "PAID")
        assert dto.status == "PAID"
        assert uow.invoices.get_by_id(invoice_id).status.value == "PAID"

    def test_status_change_leaves_stock_alone(self):
        uow, (invoice_id,) = _setup()
        UpdateInvoiceStatusHandler(uow).handle(invoice_id, "CANCELLED")
        assert uow.products.get_by_id(1).quantity == 19

    def test_same_status_does_not_commit(self):
        uow, (invoice_id,) = _setup()
        before = uow.commits
        UpdateInvoiceStatusHandler(uow).handle(invoice_id, "UNPAID")
        assert uow.commits == before

    def test_paid_cannot_be_reopened(self):
        uow, (invoice_id,) = _setup()
        UpdateInvoiceStatusHandler(uow).handle(invoice_id, "PAID")
        with pytest.raises(ValidationError, match="from PAID to UNPAID"):
            UpdateInvoiceStatusHandler(uow).handle(invoice_id, "UNPAID")

    def test_missing_invoice(self):
        uow, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            UpdateInvoiceStatusHandler(uow).handle(99, "PAID")


class TestSignature:

    def test_sign(self):
        uow, (invoice_id,) = _setup()
        dto = UpdateInvoiceSignatureHandler(uow).handle(invoice_id, "data:image/png;base64,AA")
        assert dto.signature == "data:image/png;base64,AA"
        assert uow.invoices.get_by_id(invoice_id).signature == dto.signature

    def test_blank_signature(self):
        uow, (invoice_id,) = _setup()
        with pytest.raises(ValidationError):
            UpdateInvoiceSignatureHandler(uow).handle(invoice_id, "  ")
