"""Domain service: Voucher Validator.

Looks a voucher up by code and decides whether an order of a given
amount may use it right now, and for how much.  Strictly read-only:
redemption is recorded by the invoice creation use case, so a voucher
can be checked any number of times without consuming it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from clinic.domain.exceptions import VoucherRejectedError, VoucherRejection
from clinic.domain.model.value_objects import Money
from clinic.domain.model.voucher import Voucher, normalize_code
from clinic.domain.repository.voucher_repository import VoucherRepository


@dataclass(frozen=True)
class VoucherQuote:
    voucher: Voucher
    discount: Money


class VoucherValidator:

    def __init__(self, voucher_repo: VoucherRepository) -> None:
        self._voucher_repo = voucher_repo

    def validate(self, code: str, amount: Money, now: datetime) -> VoucherQuote:
        """Return the voucher and its discount for *amount*.

        Checks, in order: exists, active, started, not ended, uses left,
        minimum amount.  The first failing check raises
        ``VoucherRejectedError`` with the matching ``VoucherRejection``.
        """
        normalized = normalize_code(code or "")
        voucher = self._voucher_repo.get_by_code(normalized) if normalized else None
        if voucher is None:
            raise VoucherRejectedError(
                VoucherRejection.NOT_FOUND, f"Voucher '{normalized}' does not exist"
            )

        voucher.ensure_redeemable(amount, now)
        return VoucherQuote(voucher=voucher, discount=voucher.discount_for(amount))
