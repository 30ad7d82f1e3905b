"""SQLite-backed implementation of InvoiceRepository."""

from __future__ import annotations

import sqlite3
from datetime import datetime

from clinic.domain.exceptions import ConflictError
from clinic.domain.model.invoice import Invoice, InvoiceItem, InvoiceStatus, InvoiceType
from clinic.domain.model.value_objects import Money, Quantity
from clinic.domain.repository.invoice_repository import InvoiceRepository
from clinic.infrastructure.persistence.database import (
    from_db_date,
    from_db_datetime,
    to_db_date,
    to_db_datetime,
)


class SqliteInvoiceRepository(InvoiceRepository):

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # --- InvoiceRepository interface ------------------------------------------

    def get_by_id(self, invoice_id: int) -> Invoice | None:
        row = self._conn.execute(
            "SELECT * FROM invoices WHERE id = ?", (invoice_id,)
        ).fetchone()
        return self._load(row) if row else None

    def code_exists(self, code: str) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM invoices WHERE code = ?", (code,)
        ).fetchone()
        return row is not None

    def list_recent(
        self, status: InvoiceStatus | None = None, limit: int = 100
    ) -> list[Invoice]:
        if status is None:
            rows = self._conn.execute(
                "SELECT * FROM invoices ORDER BY created_at DESC, id DESC LIMIT ?",
                (limit,),
            )
        else:
            rows = self._conn.execute(
                "SELECT * FROM invoices WHERE status = ? "
                "ORDER BY created_at DESC, id DESC LIMIT ?",
                (status.value, limit),
            )
        return [self._load(row) for row in rows.fetchall()]

    def list_created_between(
        self, start: datetime, end: datetime, status: InvoiceStatus | None = None
    ) -> list[Invoice]:
        sql = "SELECT * FROM invoices WHERE created_at >= ? AND created_at < ?"
        params: list = [to_db_datetime(start), to_db_datetime(end)]
        if status is not None:
            sql += " AND status = ?"
            params.append(status.value)
        sql += " ORDER BY created_at"
        return [self._load(row) for row in self._conn.execute(sql, params).fetchall()]

    def add(self, invoice: Invoice) -> None:
        try:
            cursor = self._conn.execute(
                "INSERT INTO invoices (code, patient_id, type, status, subtotal, "
                "processing_fee, shipping_fee, service_fee, tax, discount, voucher_code, "
                "voucher_discount, total, signature, notes, instructions, dosage, "
                "follow_up_date, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    invoice.code,
                    invoice.patient_id,
                    invoice.type.value,
                    invoice.status.value,
                    invoice.subtotal.amount,
                    invoice.processing_fee.amount,
                    invoice.shipping_fee.amount,
                    invoice.service_fee.amount,
                    invoice.tax.amount,
                    invoice.discount.amount,
                    invoice.voucher_code,
                    invoice.voucher_discount.amount,
                    invoice.total.amount,
                    invoice.signature,
                    invoice.notes,
                    invoice.instructions,
                    invoice.dosage,
                    to_db_date(invoice.follow_up_date),
                    to_db_datetime(invoice.created_at),
                ),
            )
        except sqlite3.IntegrityError as exc:
            raise ConflictError(f"Invoice code {invoice.code} already exists") from exc
        invoice.id = cursor.lastrowid

        for item in invoice.items:
            cursor = self._conn.execute(
                "INSERT INTO invoice_items (invoice_id, product_id, product_name, "
                "quantity, unit_price, total_price) VALUES (?, ?, ?, ?, ?, ?)",
                (
                    invoice.id,
                    item.product_id,
                    item.product_name,
                    item.quantity.value,
                    item.unit_price.amount,
                    item.total_price.amount,
                ),
            )
            item.id = cursor.lastrowid

    def update(self, invoice: Invoice) -> None:
        self._conn.execute(
            "UPDATE invoices SET status = ?, signature = ? WHERE id = ?",
            (invoice.status.value, invoice.signature, invoice.id),
        )

    def delete(self, invoice_id: int) -> None:
        self._conn.execute("DELETE FROM invoice_items WHERE invoice_id = ?", (invoice_id,))
        self._conn.execute("DELETE FROM invoices WHERE id = ?", (invoice_id,))

    # --- Serialization --------------------------------------------------------

    def _load(self, row: sqlite3.Row) -> Invoice:
        item_rows = self._conn.execute(
            "SELECT * FROM invoice_items WHERE invoice_id = ? ORDER BY id", (row["id"],)
        ).fetchall()
        items = [
            InvoiceItem(
                id=i["id"],
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(i["unit_price"]),
            )
            for i in item_rows
        ]
        return Invoice(
            id=row["id"],
            code=row["code"],
            patient_id=row["patient_id"],
            type=InvoiceType(row["type"]),
            items=items,
            subtotal=Money(row["subtotal"]),
            processing_fee=Money(row["processing_fee"]),
            shipping_fee=Money(row["shipping_fee"]),
            service_fee=Money(row["service_fee"]),
            tax=Money(row["tax"]),
            discount=Money(row["discount"]),
            voucher_discount=Money(row["voucher_discount"]),
            total=Money(row["total"]),
            voucher_code=row["voucher_code"],
            status=InvoiceStatus(row["status"]),
            signature=row["signature"],
            notes=row["notes"],
            instructions=row["instructions"],
            dosage=row["dosage"],
            follow_up_date=from_db_date(row["follow_up_date"]),
            created_at=from_db_datetime(row["created_at"]),
        )
