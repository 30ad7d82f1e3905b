"""Application service: Recommend Products use case (query).

Given a refraction result (SPH and CYL for the right and left eye),
returns the products whose SPH and CYL ranges accommodate both eyes,
most specialised (narrowest SPH range) first.  Products without a
parsable range accept any prescription and are listed last.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from clinic.application.add_product import parse_category
from clinic.application.dto import ProductDTO, product_to_dto
from clinic.domain.exceptions import ValidationError
from clinic.domain.model.product import Product
from clinic.domain.model.value_objects import PrescriptionRange
from clinic.domain.repository.unit_of_work import UnitOfWork


def parse_dioptre(raw: str | float | None) -> Decimal | None:
    if raw is None or str(raw).strip() == "":
        return None
    try:
        return Decimal(str(raw).strip())
    except InvalidOperation:
        raise ValidationError(f"Invalid dioptre value: {raw!r}")


class RecommendProductsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        od_sph: str | None = None,
        os_sph: str | None = None,
        od_cyl: str | None = None,
        os_cyl: str | None = None,
        category: str | None = None,
    ) -> list[ProductDTO]:
        # an eye with no reading counts as plano (0.00)
        sph = [parse_dioptre(v) or Decimal("0") for v in (od_sph, os_sph)]
        cyl = [parse_dioptre(v) or Decimal("0") for v in (od_cyl, os_cyl)]

        with self._uow as uow:
            products = uow.products.list_all(
                category=parse_category(category) if category else None
            )

        matched = [p for p in products if p.accepts_prescription(sph, cyl)]
        matched.sort(key=_specialisation)
        return [product_to_dto(p) for p in matched]


def _specialisation(product: Product) -> tuple[int, Decimal]:
    sph_range = PrescriptionRange.parse(product.sph_range)
    if sph_range is None:
        return (1, Decimal("0"))
    return (0, sph_range.width)
