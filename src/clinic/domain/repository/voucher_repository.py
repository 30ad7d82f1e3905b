"""Abstract repository for Voucher aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from clinic.domain.model.voucher import Voucher


class VoucherRepository(ABC):

    @abstractmethod
    def get_by_id(self, voucher_id: int) -> Voucher | None:
        """Return a voucher by its ID, or None if not found."""

    @abstractmethod
    def get_by_code(self, code: str) -> Voucher | None:
        """Return a voucher by its (upper-case) code, or None."""

    @abstractmethod
    def list_all(self) -> list[Voucher]:
        """Return every voucher, newest first."""

    @abstractmethod
    def save(self, voucher: Voucher) -> None:
        """Persist a new or updated voucher (assigns ``id`` on insert)."""

    @abstractmethod
    def delete(self, voucher_id: int) -> None:
        """Remove a voucher."""

    @abstractmethod
    def increment_usage(self, voucher_id: int) -> bool:
        """Atomically add one redemption.

        Only applies while ``usage_limit`` is unset or not yet reached.
        Returns True if it was applied.
        """
