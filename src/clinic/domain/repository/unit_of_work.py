"""Abstract unit of work.

A unit of work is one transaction scope.  Application handlers open it
with ``with uow:``, reach every aggregate through its repositories, and
call ``commit()`` once all writes for the use case are done.  Leaving the
block without committing (including by an exception) rolls everything
back, so an invoice is never saved without its stock movements or the
other way round.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from clinic.domain.repository.invoice_repository import InvoiceRepository
from clinic.domain.repository.patient_repository import PatientRepository
from clinic.domain.repository.product_repository import ProductRepository
from clinic.domain.repository.voucher_repository import VoucherRepository


class UnitOfWork(ABC):

    products: ProductRepository
    invoices: InvoiceRepository
    vouchers: VoucherRepository
    patients: PatientRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # no-op after a successful commit
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every write since the block was entered permanent."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every uncommitted write."""
