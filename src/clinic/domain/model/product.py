"""Product aggregate.

Products live independently of invoices. They have their own lifecycle:
prices change, stock is counted in and sold out, medicine expires.
The ``quantity`` field is the stock ledger counter that invoices
decrement and restore.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum

from clinic.domain.exceptions import ValidationError
from clinic.domain.model.value_objects import MAX_INTEGER, Money, PrescriptionRange

DEFAULT_MIN_STOCK = 5
EXPIRY_WARNING_DAYS = 30


class ProductCategory(Enum):
    GLASSES = "glasses"
    LENSES = "lenses"
    MEDICINE = "medicine"


@dataclass
class Product:
    """A product in the catalog.

    Invariants:
    - ``quantity`` is never negative
    - ``min_stock`` is never negative
    """

    id: int | None
    code: str
    name: str
    price: Money
    category: ProductCategory = ProductCategory.GLASSES
    quantity: int = 0
    min_stock: int = DEFAULT_MIN_STOCK
    manufacturer: str | None = None
    material: str | None = None
    sph_range: str | None = None
    cyl_range: str | None = None
    expires_at: date | None = None
    image_url: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW products only) ---------------------------------

    @staticmethod
    def create(
        code: str,
        name: str,
        price: Money,
        category: ProductCategory = ProductCategory.GLASSES,
        quantity: int = 0,
        min_stock: int = DEFAULT_MIN_STOCK,
        **details,
    ) -> Product:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if not code or not code.strip():
            raise ValidationError("Product code is required")
        _check_count("Quantity", quantity)
        _check_count("Minimum stock", min_stock)
        return Product(
            id=None,
            code=code.strip(),
            name=name.strip(),
            price=price,
            category=category,
            quantity=quantity,
            min_stock=min_stock,
            **details,
        )

    # --- Inventory edits ------------------------------------------------------

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        Existing invoices keep the unit price captured when they were made.
        """
        self.price = new_price

    def set_quantity(self, quantity: int) -> None:
        """Overwrite the counted stock (direct inventory edit)."""
        _check_count("Quantity", quantity)
        self.quantity = quantity

    def set_min_stock(self, min_stock: int) -> None:
        _check_count("Minimum stock", min_stock)
        self.min_stock = min_stock

    def can_supply(self, quantity: int) -> bool:
        return 0 < quantity <= self.quantity

    # --- Flags ----------------------------------------------------------------

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_stock

    def is_expired(self, today: date) -> bool:
        return self.expires_at is not None and self.expires_at < today

    def is_expiring(self, today: date, days: int = EXPIRY_WARNING_DAYS) -> bool:
        """True if the product expires within *days* but has not expired yet."""
        if self.expires_at is None:
            return False
        return today <= self.expires_at <= today + timedelta(days=days)

    # --- Prescription matching ------------------------------------------------

    def accepts_prescription(self, sph: list[Decimal], cyl: list[Decimal]) -> bool:
        """True if every given SPH and CYL value falls inside this product's ranges.

        A missing or unparsable range accepts any value.
        """
        sph_range = PrescriptionRange.parse(self.sph_range)
        cyl_range = PrescriptionRange.parse(self.cyl_range)
        if sph_range is not None and not all(sph_range.contains(v) for v in sph):
            return False
        if cyl_range is not None and not all(cyl_range.contains(v) for v in cyl):
            return False
        return True


def _check_count(label: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{label} must be an integer")
    if value < 0:
        raise ValidationError(f"{label} cannot be negative")
    if value > MAX_INTEGER:
        raise ValidationError(f"{label} is too large")
