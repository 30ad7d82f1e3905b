"""SQLite database handle.

The ``Database`` object is constructed explicitly by the composition
root and opened once at process start, which creates the schema.  It
holds no pooled connection: each unit of work gets its own connection
and closes it when its block ends.  Connections run in autocommit mode
so the unit of work controls transactions with explicit
``BEGIN IMMEDIATE`` / ``COMMIT`` / ``ROLLBACK``.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from datetime import date, datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS patients (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    code TEXT NOT NULL UNIQUE,
    full_name TEXT NOT NULL,
    phone TEXT,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    code TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL,
    category TEXT NOT NULL DEFAULT 'glasses'
        CHECK (category IN ('glasses', 'lenses', 'medicine')),
    manufacturer TEXT,
    material TEXT,
    sph_range TEXT,
    cyl_range TEXT,
    price INTEGER NOT NULL CHECK (price >= 0),
    quantity INTEGER NOT NULL DEFAULT 0 CHECK (quantity >= 0),
    min_stock INTEGER NOT NULL DEFAULT 5 CHECK (min_stock >= 0),
    expires_at TEXT,
    image_url TEXT,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS vouchers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    code TEXT NOT NULL UNIQUE,
    description TEXT,
    type TEXT NOT NULL CHECK (type IN ('percent', 'fixed')),
    value INTEGER NOT NULL,
    min_amount INTEGER NOT NULL DEFAULT 0,
    max_discount INTEGER,
    start_date TEXT NOT NULL,
    end_date TEXT NOT NULL,
    usage_limit INTEGER,
    usage_count INTEGER NOT NULL DEFAULT 0,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS invoices (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    code TEXT NOT NULL UNIQUE,
    patient_id INTEGER NOT NULL REFERENCES patients(id),
    type TEXT NOT NULL CHECK (type IN ('glasses', 'examination', 'medicine')),
    status TEXT NOT NULL DEFAULT 'UNPAID'
        CHECK (status IN ('UNPAID', 'PAID', 'CANCELLED')),
    subtotal INTEGER NOT NULL,
    processing_fee INTEGER NOT NULL DEFAULT 0,
    shipping_fee INTEGER NOT NULL DEFAULT 0,
    service_fee INTEGER NOT NULL DEFAULT 0,
    tax INTEGER NOT NULL,
    discount INTEGER NOT NULL DEFAULT 0,
    voucher_code TEXT,
    voucher_discount INTEGER NOT NULL DEFAULT 0,
    total INTEGER NOT NULL,
    signature TEXT,
    notes TEXT,
    instructions TEXT,
    dosage TEXT,
    follow_up_date TEXT,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS ix_invoices_created_at ON invoices (created_at);

-- product_id carries no foreign key: products may be deleted after a sale
CREATE TABLE IF NOT EXISTS invoice_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    invoice_id INTEGER NOT NULL REFERENCES invoices(id) ON DELETE CASCADE,
    product_id INTEGER NOT NULL,
    product_name TEXT NOT NULL,
    quantity INTEGER NOT NULL CHECK (quantity >= 1),
    unit_price INTEGER NOT NULL,
    total_price INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS ix_invoice_items_invoice_id ON invoice_items (invoice_id);
"""


class Database:
    """Owns the location of the SQLite file and the schema."""

    def __init__(self, path: Path | str, timeout: float = 5.0) -> None:
        self.path = Path(path)
        self._timeout = timeout
        self._is_open = False

    @property
    def is_open(self) -> bool:
        return self._is_open

    def open(self) -> None:
        """Create the file and schema if needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with closing(self._connect()) as conn:
            conn.executescript(SCHEMA)
        self._is_open = True
        logger.info("Database ready at %s", self.path)

    def close(self) -> None:
        """Refuse further units of work.

        There is no shared handle to release; connections already handed
        out are closed by their unit of work.
        """
        self._is_open = False
        logger.info("Database %s closed", self.path)

    def connect(self) -> sqlite3.Connection:
        """Return a fresh connection for one unit of work."""
        if not self._is_open:
            raise RuntimeError("Database is not open")
        return self._connect()

    def __enter__(self) -> Database:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            self.path,
            timeout=self._timeout,
            isolation_level=None,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row  # access columns by name
        conn.execute("PRAGMA foreign_keys = ON")
        return conn


# --- Column codecs -----------------------------------------------------------


def to_db_datetime(value: datetime) -> str:
    """UTC ISO-8601 with fixed precision, so text order is time order."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_db_datetime(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_db_date(value: date | None) -> str | None:
    return value.isoformat() if value else None


def from_db_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None
