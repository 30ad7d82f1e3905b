"""Application service: Show / List Products use cases (queries)."""

from __future__ import annotations

from clinic.application.add_product import parse_category
from clinic.application.dto import ProductDTO, product_to_dto
from clinic.domain.exceptions import EntityNotFoundError
from clinic.domain.repository.unit_of_work import UnitOfWork


class ShowProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int) -> ProductDTO:
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product #{product_id} not found")
        return product_to_dto(product)


class ListProductsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, category: str | None = None, search: str | None = None) -> list[ProductDTO]:
        wanted = parse_category(category) if category else None
        with self._uow as uow:
            products = uow.products.list_all(category=wanted, search=(search or "").strip() or None)
        return [product_to_dto(p) for p in products]
