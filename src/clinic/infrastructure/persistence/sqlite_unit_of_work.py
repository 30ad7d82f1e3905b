"""SQLite implementation of the unit of work.

Each ``with uow:`` block gets its own connection and an immediate
(write-locking) transaction, so concurrent requests serialise on the
database instead of interleaving their read-then-write steps.
"""

from __future__ import annotations

import sqlite3

from clinic.domain.repository.unit_of_work import UnitOfWork
from clinic.infrastructure.persistence.database import Database
from clinic.infrastructure.persistence.sqlite_invoice_repository import (
    SqliteInvoiceRepository,
)
from clinic.infrastructure.persistence.sqlite_patient_repository import (
    SqlitePatientRepository,
)
from clinic.infrastructure.persistence.sqlite_product_repository import (
    SqliteProductRepository,
)
from clinic.infrastructure.persistence.sqlite_voucher_repository import (
    SqliteVoucherRepository,
)


class SqliteUnitOfWork(UnitOfWork):

    def __init__(self, database: Database) -> None:
        self._database = database
        self._conn: sqlite3.Connection | None = None

    def __enter__(self) -> SqliteUnitOfWork:
        if self._conn is not None:
            raise RuntimeError("Unit of work is already in use")
        conn = self._database.connect()
        conn.execute("BEGIN IMMEDIATE")
        self._conn = conn
        self.products = SqliteProductRepository(conn)
        self.invoices = SqliteInvoiceRepository(conn)
        self.vouchers = SqliteVoucherRepository(conn)
        self.patients = SqlitePatientRepository(conn)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            super().__exit__(exc_type, exc, tb)
        finally:
            if self._conn is not None:
                self._conn.close()
            self._conn = None

    def commit(self) -> None:
        self._require_conn().execute("COMMIT")

    def rollback(self) -> None:
        if self._conn is not None and self._conn.in_transaction:
            self._conn.execute("ROLLBACK")

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Unit of work used outside a 'with' block")
        return self._conn
