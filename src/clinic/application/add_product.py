"""Application service: Add Product use case."""

from __future__ import annotations

from datetime import date

from clinic.application.clock import Clock, millis_code, utcnow
from clinic.application.dto import ProductDTO, product_to_dto
from clinic.domain.exceptions import ConflictError, ValidationError
from clinic.domain.model.product import DEFAULT_MIN_STOCK, Product, ProductCategory
from clinic.domain.model.value_objects import Money
from clinic.domain.repository.unit_of_work import UnitOfWork


def parse_category(raw: str | None) -> ProductCategory:
    if not raw:
        return ProductCategory.GLASSES
    try:
        return ProductCategory(raw.strip().lower())
    except ValueError:
        valid = ", ".join(c.value for c in ProductCategory)
        raise ValidationError(f"Unknown product category '{raw}' (expected one of: {valid})")


class AddProductHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def handle(
        self,
        name: str,
        price: int,
        code: str | None = None,
        category: str | None = None,
        quantity: int = 0,
        min_stock: int = DEFAULT_MIN_STOCK,
        manufacturer: str | None = None,
        material: str | None = None,
        sph_range: str | None = None,
        cyl_range: str | None = None,
        expires_at: date | None = None,
        image_url: str | None = None,
    ) -> ProductDTO:
        """Add a new product to the catalog.

        Without a code one is generated as ``PRD<epoch-ms>``.
        """
        product = Product.create(
            code=code or millis_code("PRD", self._clock()),
            name=name,
            price=Money(price),
            category=parse_category(category),
            quantity=quantity,
            min_stock=min_stock,
            manufacturer=manufacturer,
            material=material,
            sph_range=sph_range,
            cyl_range=cyl_range,
            expires_at=expires_at,
            image_url=image_url,
        )

        with self._uow as uow:
            if uow.products.get_by_code(product.code) is not None:
                raise ConflictError(f"Product code '{product.code}' already exists")
            uow.products.save(product)
            uow.commit()

        return product_to_dto(product)
