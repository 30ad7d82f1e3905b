"""Application service: Delete Product use case.

Invoices already issued keep the product's id, name and unit price on
their items; deleting them later puts back stock only for products that
still exist.
"""

from __future__ import annotations

import logging

from clinic.domain.exceptions import EntityNotFoundError
from clinic.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class DeleteProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int) -> None:
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product #{product_id} not found")
            uow.products.delete(product_id)
            uow.commit()

        logger.info("Product %s (%s) deleted", product.code, product.name)
