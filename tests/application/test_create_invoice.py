"""Integration tests for the CreateInvoice and DeleteInvoice use cases.

Uses the in-memory fake unit of work — no database.
"""

import pytest

from clinic.application.create_invoice import CreateInvoiceHandler
from clinic.application.delete_invoice import DeleteInvoiceHandler
from clinic.application.delete_product import DeleteProductHandler
from clinic.application.dto import InvoiceDraft, InvoiceItemSpec
from clinic.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ValidationError,
    VoucherRejectedError,
    VoucherRejection,
)
from clinic.domain.model.value_objects import Money
from clinic.domain.model.voucher import VoucherType
from tests.fakes import NOW, FakeUnitOfWork, fixed_clock, make_patient, make_product, make_voucher


def _uow(vouchers=None) -> FakeUnitOfWork:
    return FakeUnitOfWork(
        products=[
            make_product("G001", "Gọng kính", price=300_000, quantity=5),
            make_product("L001", "Tròng kính", price=150_000, quantity=10),
        ],
        vouchers=vouchers,
        patients=[make_patient()],
    )


def _draft(items=None, **overrides) -> InvoiceDraft:
    fields = dict(patient_id=1, items=items or [InvoiceItemSpec(1, 1)])
    fields.update(overrides)
    return InvoiceDraft(**fields)


def _create(uow: FakeUnitOfWork, draft: InvoiceDraft):
    return CreateInvoiceHandler(uow, clock=fixed_clock()).handle(draft)


class TestCreateInvoiceHappyPath:

    def test_totals_with_default_glasses_fees(self):
        dto = _create(_uow(), _draft())
        assert dto.subtotal == 300_000
        assert dto.processing_fee == 50_000
        assert dto.service_fee == 20_000
        assert dto.tax == 37_000
        assert dto.total == 407_000
        assert dto.status == "UNPAID"

    def test_examination_has_no_processing_fee(self):
        dto = _create(_uow(), _draft(invoice_type="examination"))
        assert dto.processing_fee == 0
        assert dto.code.startswith("HT-2024")

    def test_explicit_fees_override_defaults(self):
        dto = _create(_uow(), _draft(processing_fee=0, service_fee=0, shipping_fee=30_000))
        assert dto.total == 330_000 + 33_000

    def test_persists_invoice_and_commits_once(self):
        uow = _uow()
        dto = _create(uow, _draft())
        saved = uow.invoices.get_by_id(dto.id)
        assert saved.code == dto.code
        assert saved.created_at == NOW
        assert uow.commits == 1

    def test_dto_resolves_patient_and_products(self):
        dto = _create(_uow(), _draft([InvoiceItemSpec(2, 2)]))
        assert dto.patient.full_name == "Nguyễn Văn A"
        assert dto.items[0].product_code == "L001"
        assert dto.items[0].total_price == 300_000


class TestCreateInvoicePriceSnapshot:

    def test_price_change_does_not_touch_existing_invoice(self):
        uow = _uow()
        dto = _create(uow, _draft())

        frame = uow.products.get_by_id(1)
        frame.update_price(Money(999_000))
        uow.products.save(frame)

        saved = uow.invoices.get_by_id(dto.id)
        assert saved.items[0].unit_price == Money(300_000)
        assert saved.total == Money(407_000)


class TestCreateInvoiceStock:

    def test_create_then_delete_restores_quantity(self):
        uow = _uow()
        dto = _create(uow, _draft([InvoiceItemSpec(1, 2)]))
        assert uow.products.get_by_id(1).quantity == 3

        DeleteInvoiceHandler(uow).handle(dto.id)
        assert uow.products.get_by_id(1).quantity == 5
        assert uow.invoices.get_by_id(dto.id) is None

    def test_insufficient_stock_rolls_everything_back(self):
        uow = _uow()
        with pytest.raises(ConflictError, match="Insufficient stock"):
            _create(uow, _draft([InvoiceItemSpec(2, 1), InvoiceItemSpec(1, 6)]))
        assert uow.products.get_by_id(2).quantity == 10
        assert uow.invoices.list_recent() == []
        assert uow.commits == 0


class TestCreateInvoiceVoucher:

    def test_discount_is_computed_server_side(self):
        uow = _uow([make_voucher(value=10, max_discount=20_000)])
        dto = _create(uow, _draft(voucher_code="sale10"))
        assert dto.voucher_code == "SALE10"
        assert dto.voucher_discount == 20_000
        assert dto.total == 407_000 - 20_000

    def test_voucher_is_checked_against_subtotal(self):
        uow = _uow([make_voucher(min_amount=350_000)])
        with pytest.raises(VoucherRejectedError) as info:
            _create(uow, _draft(voucher_code="SALE10"))
        assert info.value.reason is VoucherRejection.BELOW_MINIMUM

    def test_usage_incremented_exactly_once(self):
        uow = _uow([make_voucher(usage_limit=3)])
        _create(uow, _draft(voucher_code="SALE10"))
        assert uow.vouchers.get_by_code("SALE10").usage_count == 1

    def test_last_use_then_exhausted(self):
        uow = _uow([make_voucher(usage_limit=1)])
        _create(uow, _draft(voucher_code="SALE10"))
        with pytest.raises(VoucherRejectedError) as info:
            _create(uow, _draft(voucher_code="SALE10"))
        assert info.value.reason is VoucherRejection.USAGE_EXCEEDED
        assert uow.products.get_by_id(1).quantity == 4

    def test_delete_does_not_give_usage_back(self):
        uow = _uow([make_voucher(usage_limit=3)])
        dto = _create(uow, _draft(voucher_code="SALE10"))
        DeleteInvoiceHandler(uow).handle(dto.id)
        assert uow.vouchers.get_by_code("SALE10").usage_count == 1

    def test_fixed_voucher_larger_than_bill_is_rejected_by_total_rule(self):
        uow = _uow([make_voucher(code="BIG", type=VoucherType.FIXED, value=500_000)])
        with pytest.raises(ValidationError, match="total must be positive"):
            _create(uow, _draft(voucher_code="BIG"))
        assert uow.vouchers.get_by_code("BIG").usage_count == 0


class TestCreateInvoiceValidation:

    def test_patient_required(self):
        with pytest.raises(ValidationError, match="Patient is required"):
            _create(_uow(), _draft(patient_id=None))

    def test_unknown_patient(self):
        with pytest.raises(EntityNotFoundError, match="Patient #42"):
            _create(_uow(), _draft(patient_id=42))

    def test_empty_cart(self):
        with pytest.raises(ValidationError, match="at least one item"):
            _create(_uow(), InvoiceDraft(patient_id=1, items=[]))

    def test_unknown_product(self):
        with pytest.raises(EntityNotFoundError, match="Product #7"):
            _create(_uow(), _draft([InvoiceItemSpec(7, 1)]))

    def test_zero_quantity(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _create(_uow(), _draft([InvoiceItemSpec(1, 0)]))

    def test_unknown_type(self):
        with pytest.raises(ValidationError, match="Unknown invoice type"):
            _create(_uow(), _draft(invoice_type="surgery"))

    def test_discount_wiping_out_total(self):
        with pytest.raises(ValidationError, match="total must be positive"):
            _create(_uow(), _draft(discount=407_000))


class TestInvoiceCode:

    def test_colliding_code_steps_forward(self):
        uow = _uow()
        first = _create(uow, _draft())
        second = _create(uow, _draft())
        assert first.code != second.code
        assert int(second.code[-9:]) == int(first.code[-9:]) + 1


class TestDeleteInvoice:

    def test_missing_invoice(self):
        with pytest.raises(EntityNotFoundError, match="Invoice #5"):
            DeleteInvoiceHandler(_uow()).handle(5)

    def test_product_removed_after_sale_is_skipped(self):
        uow = _uow()
        dto = _create(uow, _draft([InvoiceItemSpec(1, 1), InvoiceItemSpec(2, 2)]))
        DeleteProductHandler(uow).handle(1)

        DeleteInvoiceHandler(uow).handle(dto.id)

        assert uow.products.get_by_id(2).quantity == 10
        assert uow.invoices.get_by_id(dto.id) is None
