"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (SQLite, in-memory)
live in the infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from clinic.domain.model.product import Product, ProductCategory


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_code(self, code: str) -> Product | None:
        """Return a product by its unique code, or None if not found."""

    @abstractmethod
    def list_all(
        self,
        category: ProductCategory | None = None,
        search: str | None = None,
    ) -> list[Product]:
        """Return products, newest first, optionally filtered by category
        and by a case-insensitive substring of name or code."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product (assigns ``id`` on insert)."""

    @abstractmethod
    def delete(self, product_id: int) -> None:
        """Remove a product.  Invoice items keep its id and name."""

    @abstractmethod
    def adjust_quantity(self, product_id: int, delta: int) -> bool:
        """Atomically add *delta* (may be negative) to a product's stock.

        The update only applies if the product exists and the resulting
        quantity is not negative.  Returns True if it was applied.
        """
