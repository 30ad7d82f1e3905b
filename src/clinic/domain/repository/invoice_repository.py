"""Abstract repository for Invoice aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from clinic.domain.model.invoice import Invoice, InvoiceStatus


class InvoiceRepository(ABC):

    @abstractmethod
    def get_by_id(self, invoice_id: int) -> Invoice | None:
        """Return an invoice with its items, or None if not found."""

    @abstractmethod
    def code_exists(self, code: str) -> bool:
        """True if an invoice already uses *code*."""

    @abstractmethod
    def list_recent(
        self, status: InvoiceStatus | None = None, limit: int = 100
    ) -> list[Invoice]:
        """Return invoices newest first, optionally filtered by status."""

    @abstractmethod
    def list_created_between(
        self, start: datetime, end: datetime, status: InvoiceStatus | None = None
    ) -> list[Invoice]:
        """Return invoices with ``start <= created_at < end``."""

    @abstractmethod
    def add(self, invoice: Invoice) -> None:
        """Insert a new invoice and its items (assigns ids)."""

    @abstractmethod
    def update(self, invoice: Invoice) -> None:
        """Persist the mutable fields (status, signature) of an invoice."""

    @abstractmethod
    def delete(self, invoice_id: int) -> None:
        """Remove an invoice together with its items."""
