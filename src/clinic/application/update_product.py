"""Application service: Update Product use case.

A direct inventory edit: any of price, stock count, minimum stock and
descriptive fields.  Existing invoices are not affected because they
captured a price snapshot at creation time.
"""

from __future__ import annotations

from typing import Any

from clinic.application.add_product import parse_category
from clinic.application.dto import ProductDTO, product_to_dto
from clinic.domain.exceptions import EntityNotFoundError, ValidationError
from clinic.domain.model.value_objects import Money
from clinic.domain.repository.unit_of_work import UnitOfWork

DESCRIPTIVE_FIELDS = {
    "name",
    "manufacturer",
    "material",
    "sph_range",
    "cyl_range",
    "expires_at",
    "image_url",
}
EDITABLE_FIELDS = DESCRIPTIVE_FIELDS | {"category", "price", "quantity", "min_stock"}


class UpdateProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int, changes: dict[str, Any]) -> ProductDTO:
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot edit product field(s): {', '.join(sorted(unknown))}")
        if "name" in changes and not (changes["name"] or "").strip():
            raise ValidationError("Product name is required")
        for name in ("category", "price", "quantity", "min_stock"):
            if name in changes and changes[name] is None:
                raise ValidationError(f"Product {name} cannot be empty")

        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product #{product_id} not found")

            for name in DESCRIPTIVE_FIELDS & set(changes):
                setattr(product, name, changes[name])
            if "category" in changes:
                product.category = parse_category(changes["category"])
            if "price" in changes:
                product.update_price(Money(changes["price"]))
            if "quantity" in changes:
                product.set_quantity(changes["quantity"])
            if "min_stock" in changes:
                product.set_min_stock(changes["min_stock"])

            uow.products.save(product)
            uow.commit()
            return product_to_dto(product)
