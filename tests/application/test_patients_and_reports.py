"""Tests for the patient and reporting use cases."""

from datetime import datetime, timezone

import pytest

from clinic.application.add_patient import AddPatientHandler
from clinic.application.create_invoice import CreateInvoiceHandler
from clinic.application.dto import InvoiceDraft, InvoiceItemSpec
from clinic.application.revenue_report import (
    MAX_YEAR,
    CategoryBreakdownHandler,
    MonthlyRevenueHandler,
)
from clinic.application.show_patients import ListPatientsHandler, ShowPatientHandler
from clinic.application.update_invoice_status import UpdateInvoiceStatusHandler
from clinic.domain.exceptions import EntityNotFoundError, ValidationError
from clinic.domain.model.product import ProductCategory
from tests.fakes import NOW, FakeUnitOfWork, fixed_clock, make_patient, make_product


class TestPatients:

    def test_add_and_show(self):
        uow = FakeUnitOfWork()
        dto = AddPatientHandler(uow, clock=fixed_clock()).handle("Trần Thị B", "0912345678")
        assert dto.code == f"BN{int(NOW.timestamp() * 1000)}"
        assert ShowPatientHandler(uow).handle(dto.id).full_name == "Trần Thị B"

    def test_name_required(self):
        with pytest.raises(ValidationError):
            AddPatientHandler(FakeUnitOfWork()).handle("  ")

    def test_list(self):
        uow = FakeUnitOfWork(patients=[make_patient("A", "BN1"), make_patient("B", "BN2")])
        assert len(ListPatientsHandler(uow).handle()) == 2

    def test_show_missing(self):
        with pytest.raises(EntityNotFoundError):
            ShowPatientHandler(FakeUnitOfWork()).handle(1)


def _invoice_at(uow: FakeUnitOfWork, when: datetime, paid: bool) -> None:
    dto = CreateInvoiceHandler(uow, clock=fixed_clock(when)).handle(
        InvoiceDraft(patient_id=1, items=[InvoiceItemSpec(1, 1)])
    )
    if paid:
        UpdateInvoiceStatusHandler(uow).handle(dto.id, "PAID")


class TestMonthlyRevenue:

    def test_only_paid_invoices_count(self):
        uow = FakeUnitOfWork(products=[make_product(price=300_000, quantity=10)], patients=[make_patient()])
        _invoice_at(uow, datetime(2024, 3, 5, tzinfo=timezone.utc), paid=True)
        _invoice_at(uow, datetime(2024, 3, 20, tzinfo=timezone.utc), paid=True)
        _invoice_at(uow, datetime(2024, 3, 21, tzinfo=timezone.utc), paid=False)
        _invoice_at(uow, datetime(2024, 11, 30, 23, 59, tzinfo=timezone.utc), paid=True)
        _invoice_at(uow, datetime(2023, 3, 5, tzinfo=timezone.utc), paid=True)

        months = MonthlyRevenueHandler(uow).handle(2024)

        assert [m.month for m in months] == list(range(1, 13))
        assert months[2].total == 2 * 407_000
        assert months[10].total == 407_000
        assert sum(m.total for m in months) == 3 * 407_000

    @pytest.mark.parametrize("year", [0, MAX_YEAR + 1])
    def test_year_out_of_range(self, year):
        with pytest.raises(ValidationError, match="Year must be between"):
            MonthlyRevenueHandler(FakeUnitOfWork()).handle(year)


class TestCategoryBreakdown:

    def test_counts_and_quantities(self):
        uow = FakeUnitOfWork(
            products=[
                make_product("G1", quantity=3),
                make_product("G2", quantity=4),
                make_product("M1", quantity=10, category=ProductCategory.MEDICINE),
            ]
        )
        rows = CategoryBreakdownHandler(uow).handle()
        assert [(r.category, r.count, r.total_quantity) for r in rows] == [
            ("glasses", 2, 7),
            ("medicine", 1, 10),
        ]
