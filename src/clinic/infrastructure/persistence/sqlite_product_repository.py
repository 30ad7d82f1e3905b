"""SQLite-backed implementation of ProductRepository."""

from __future__ import annotations

import sqlite3

from clinic.domain.exceptions import ConflictError
from clinic.domain.model.product import Product, ProductCategory
from clinic.domain.model.value_objects import Money
from clinic.domain.repository.product_repository import ProductRepository
from clinic.infrastructure.persistence.database import (
    from_db_date,
    from_db_datetime,
    to_db_date,
    to_db_datetime,
)

_COLUMNS = (
    "code, name, category, manufacturer, material, sph_range, cyl_range, "
    "price, quantity, min_stock, expires_at, image_url, created_at"
)


class SqliteProductRepository(ProductRepository):

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: int) -> Product | None:
        row = self._conn.execute(
            "SELECT * FROM products WHERE id = ?", (product_id,)
        ).fetchone()
        return self._to_domain(row) if row else None

    def get_by_code(self, code: str) -> Product | None:
        row = self._conn.execute(
            "SELECT * FROM products WHERE code = ?", (code,)
        ).fetchone()
        return self._to_domain(row) if row else None

    def list_all(
        self,
        category: ProductCategory | None = None,
        search: str | None = None,
    ) -> list[Product]:
        sql = "SELECT * FROM products WHERE 1 = 1"
        params: list = []
        if category is not None:
            sql += " AND category = ?"
            params.append(category.value)
        if search:
            sql += " AND (name LIKE ? OR code LIKE ?)"
            pattern = f"%{search}%"
            params.extend([pattern, pattern])
        sql += " ORDER BY created_at DESC, id DESC"
        return [self._to_domain(row) for row in self._conn.execute(sql, params)]

    def save(self, product: Product) -> None:
        values = self._to_row(product)
        try:
            if product.id is None:
                cursor = self._conn.execute(
                    f"INSERT INTO products ({_COLUMNS}) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    values,
                )
                product.id = cursor.lastrowid
            else:
                assignments = ", ".join(f"{c.strip()} = ?" for c in _COLUMNS.split(","))
                self._conn.execute(
                    f"UPDATE products SET {assignments} WHERE id = ?",
                    (*values, product.id),
                )
        except sqlite3.IntegrityError as exc:
            raise ConflictError(f"Product code '{product.code}' already exists") from exc

    def delete(self, product_id: int) -> None:
        self._conn.execute("DELETE FROM products WHERE id = ?", (product_id,))

    def adjust_quantity(self, product_id: int, delta: int) -> bool:
        cursor = self._conn.execute(
            "UPDATE products SET quantity = quantity + ? "
            "WHERE id = ? AND quantity + ? >= 0",
            (delta, product_id, delta),
        )
        return cursor.rowcount == 1

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(product: Product) -> tuple:
        return (
            product.code,
            product.name,
            product.category.value,
            product.manufacturer,
            product.material,
            product.sph_range,
            product.cyl_range,
            product.price.amount,
            product.quantity,
            product.min_stock,
            to_db_date(product.expires_at),
            product.image_url,
            to_db_datetime(product.created_at),
        )

    @staticmethod
    def _to_domain(row: sqlite3.Row) -> Product:
        return Product(
            id=row["id"],
            code=row["code"],
            name=row["name"],
            price=Money(row["price"]),
            category=ProductCategory(row["category"]),
            quantity=row["quantity"],
            min_stock=row["min_stock"],
            manufacturer=row["manufacturer"],
            material=row["material"],
            sph_range=row["sph_range"],
            cyl_range=row["cyl_range"],
            expires_at=from_db_date(row["expires_at"]),
            image_url=row["image_url"],
            created_at=from_db_datetime(row["created_at"]),
        )
