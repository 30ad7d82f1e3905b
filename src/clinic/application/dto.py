"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the delivery layers (CLI, HTTP API) and the
application layer without exposing domain internals to the outside
world.  Amounts are plain integers in dong; dates are ISO-8601 strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from clinic.domain.model.invoice import Invoice
from clinic.domain.model.patient import Patient
from clinic.domain.model.product import Product
from clinic.domain.model.voucher import Voucher

# --- Inputs ------------------------------------------------------------------


@dataclass(frozen=True)
class InvoiceItemSpec:
    """Input: which product and how many units."""

    product_id: int
    quantity: int = 1


@dataclass(frozen=True)
class InvoiceDraft:
    """Input: everything the cashier entered for a new invoice.

    A fee left as None takes the default for the invoice type.
    """

    items: list[InvoiceItemSpec]
    patient_id: int | None = None
    invoice_type: str = "glasses"
    processing_fee: int | None = None
    shipping_fee: int | None = None
    service_fee: int | None = None
    discount: int = 0
    voucher_code: str | None = None
    notes: str | None = None
    instructions: str | None = None
    dosage: str | None = None
    follow_up_date: date | None = None


# --- Outputs -----------------------------------------------------------------


@dataclass(frozen=True)
class PatientDTO:
    id: int
    code: str
    full_name: str
    phone: str | None
    created_at: str


@dataclass(frozen=True)
class ProductDTO:
    id: int
    code: str
    name: str
    category: str
    manufacturer: str | None
    material: str | None
    sph_range: str | None
    cyl_range: str | None
    price: int
    quantity: int
    min_stock: int
    is_low_stock: bool
    expires_at: str | None
    image_url: str | None
    created_at: str


@dataclass(frozen=True)
class InvoiceItemDTO:
    id: int | None
    product_id: int
    product_code: str | None  # None once the product has been deleted
    product_name: str
    quantity: int
    unit_price: int
    total_price: int


@dataclass(frozen=True)
class InvoiceDTO:
    id: int
    code: str
    type: str
    status: str
    patient_id: int
    patient: PatientDTO | None
    items: list[InvoiceItemDTO]
    subtotal: int
    processing_fee: int
    shipping_fee: int
    service_fee: int
    tax: int
    discount: int
    voucher_code: str | None
    voucher_discount: int
    total: int
    signature: str | None
    notes: str | None
    instructions: str | None
    dosage: str | None
    follow_up_date: str | None
    created_at: str


@dataclass(frozen=True)
class VoucherDTO:
    id: int
    code: str
    description: str | None
    type: str
    value: int
    min_amount: int
    max_discount: int | None
    start_date: str
    end_date: str
    usage_limit: int | None
    usage_count: int
    is_active: bool


@dataclass(frozen=True)
class VoucherQuoteDTO:
    voucher: VoucherDTO
    discount: int
    message: str


@dataclass(frozen=True)
class QuoteDTO:
    """Output: a priced draft invoice that has not been saved."""

    subtotal: int
    processing_fee: int
    shipping_fee: int
    service_fee: int
    fees: int
    total_before_tax: int
    tax: int
    discount: int
    voucher_code: str | None
    voucher_discount: int
    total: int
    voucher_message: str | None = None
    voucher_reason: str | None = None
    lines: list[InvoiceItemDTO] = field(default_factory=list)


# --- Mapping -----------------------------------------------------------------


def patient_to_dto(patient: Patient) -> PatientDTO:
    return PatientDTO(
        id=patient.id,  # type: ignore[arg-type]
        code=patient.code,
        full_name=patient.full_name,
        phone=patient.phone,
        created_at=patient.created_at.isoformat(),
    )


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,  # type: ignore[arg-type]
        code=product.code,
        name=product.name,
        category=product.category.value,
        manufacturer=product.manufacturer,
        material=product.material,
        sph_range=product.sph_range,
        cyl_range=product.cyl_range,
        price=product.price.amount,
        quantity=product.quantity,
        min_stock=product.min_stock,
        is_low_stock=product.is_low_stock,
        expires_at=product.expires_at.isoformat() if product.expires_at else None,
        image_url=product.image_url,
        created_at=product.created_at.isoformat(),
    )


def voucher_to_dto(voucher: Voucher) -> VoucherDTO:
    return VoucherDTO(
        id=voucher.id,  # type: ignore[arg-type]
        code=voucher.code,
        description=voucher.description,
        type=voucher.type.value,
        value=voucher.value,
        min_amount=voucher.min_amount.amount,
        max_discount=voucher.max_discount.amount if voucher.max_discount else None,
        start_date=voucher.start_date.isoformat(),
        end_date=voucher.end_date.isoformat(),
        usage_limit=voucher.usage_limit,
        usage_count=voucher.usage_count,
        is_active=voucher.is_active,
    )


def invoice_to_dto(
    invoice: Invoice,
    patient: Patient | None,
    products: dict[int, Product],
) -> InvoiceDTO:
    """Map an invoice, resolving its patient and item products when known."""
    items = []
    for item in invoice.items:
        product = products.get(item.product_id)
        items.append(
            InvoiceItemDTO(
                id=item.id,
                product_id=item.product_id,
                product_code=product.code if product else None,
                product_name=product.name if product else item.product_name,
                quantity=item.quantity.value,
                unit_price=item.unit_price.amount,
                total_price=item.total_price.amount,
            )
        )
    return InvoiceDTO(
        id=invoice.id,  # type: ignore[arg-type]
        code=invoice.code,
        type=invoice.type.value,
        status=invoice.status.value,
        patient_id=invoice.patient_id,
        patient=patient_to_dto(patient) if patient else None,
        items=items,
        subtotal=invoice.subtotal.amount,
        processing_fee=invoice.processing_fee.amount,
        shipping_fee=invoice.shipping_fee.amount,
        service_fee=invoice.service_fee.amount,
        tax=invoice.tax.amount,
        discount=invoice.discount.amount,
        voucher_code=invoice.voucher_code,
        voucher_discount=invoice.voucher_discount.amount,
        total=invoice.total.amount,
        signature=invoice.signature,
        notes=invoice.notes,
        instructions=invoice.instructions,
        dosage=invoice.dosage,
        follow_up_date=invoice.follow_up_date.isoformat() if invoice.follow_up_date else None,
        created_at=invoice.created_at.isoformat(),
    )
