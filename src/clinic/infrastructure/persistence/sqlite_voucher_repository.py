"""SQLite-backed implementation of VoucherRepository."""

from __future__ import annotations

import sqlite3

from clinic.domain.exceptions import ConflictError
from clinic.domain.model.value_objects import Money
from clinic.domain.model.voucher import Voucher, VoucherType
from clinic.domain.repository.voucher_repository import VoucherRepository
from clinic.infrastructure.persistence.database import from_db_datetime, to_db_datetime

_COLUMNS = (
    "code, description, type, value, min_amount, max_discount, start_date, "
    "end_date, usage_limit, usage_count, is_active, created_at"
)


class SqliteVoucherRepository(VoucherRepository):

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    # --- VoucherRepository interface ------------------------------------------

    def get_by_id(self, voucher_id: int) -> Voucher | None:
        row = self._conn.execute(
            "SELECT * FROM vouchers WHERE id = ?", (voucher_id,)
        ).fetchone()
        return self._to_domain(row) if row else None

    def get_by_code(self, code: str) -> Voucher | None:
        row = self._conn.execute(
            "SELECT * FROM vouchers WHERE code = ?", (code,)
        ).fetchone()
        return self._to_domain(row) if row else None

    def list_all(self) -> list[Voucher]:
        rows = self._conn.execute("SELECT * FROM vouchers ORDER BY created_at DESC, id DESC")
        return [self._to_domain(row) for row in rows]

    def save(self, voucher: Voucher) -> None:
        values = self._to_row(voucher)
        try:
            if voucher.id is None:
                cursor = self._conn.execute(
                    f"INSERT INTO vouchers ({_COLUMNS}) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    values,
                )
                voucher.id = cursor.lastrowid
            else:
                assignments = ", ".join(f"{c.strip()} = ?" for c in _COLUMNS.split(","))
                self._conn.execute(
                    f"UPDATE vouchers SET {assignments} WHERE id = ?",
                    (*values, voucher.id),
                )
        except sqlite3.IntegrityError as exc:
            raise ConflictError(f"Voucher {voucher.code} already exists") from exc

    def delete(self, voucher_id: int) -> None:
        self._conn.execute("DELETE FROM vouchers WHERE id = ?", (voucher_id,))

    def increment_usage(self, voucher_id: int) -> bool:
        cursor = self._conn.execute(
            "UPDATE vouchers SET usage_count = usage_count + 1 "
            "WHERE id = ? AND (usage_limit IS NULL OR usage_count < usage_limit)",
            (voucher_id,),
        )
        return cursor.rowcount == 1

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(voucher: Voucher) -> tuple:
        return (
            voucher.code,
            voucher.description,
            voucher.type.value,
            voucher.value,
            voucher.min_amount.amount,
            voucher.max_discount.amount if voucher.max_discount else None,
            to_db_datetime(voucher.start_date),
            to_db_datetime(voucher.end_date),
            voucher.usage_limit,
            voucher.usage_count,
            int(voucher.is_active),
            to_db_datetime(voucher.created_at),
        )

    @staticmethod
    def _to_domain(row: sqlite3.Row) -> Voucher:
        return Voucher(
            id=row["id"],
            code=row["code"],
            description=row["description"],
            type=VoucherType(row["type"]),
            value=row["value"],
            min_amount=Money(row["min_amount"]),
            max_discount=Money(row["max_discount"]) if row["max_discount"] is not None else None,
            start_date=from_db_datetime(row["start_date"]),
            end_date=from_db_datetime(row["end_date"]),
            usage_limit=row["usage_limit"],
            usage_count=row["usage_count"],
            is_active=bool(row["is_active"]),
            created_at=from_db_datetime(row["created_at"]),
        )
