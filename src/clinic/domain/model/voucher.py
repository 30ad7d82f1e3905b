"""Voucher aggregate — a redeemable discount code.

A voucher is valid inside its usage window (``start_date`` .. ``end_date``)
and, when ``usage_limit`` is set, until it has been redeemed that many
times. Redemption (``usage_count``) is recorded only when an invoice is
created with the voucher; checking a voucher never consumes it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from clinic.domain.exceptions import (
    ValidationError,
    VoucherRejectedError,
    VoucherRejection,
)
from clinic.domain.model.value_objects import MAX_INTEGER, Money


class VoucherType(Enum):
    PERCENT = "percent"
    FIXED = "fixed"


def normalize_code(code: str) -> str:
    return code.strip().upper()


@dataclass
class Voucher:
    """Aggregate root for discount vouchers.

    ``value`` is a percentage (1..100) for PERCENT vouchers and an amount
    in dong for FIXED vouchers.
    """

    id: int | None
    code: str
    type: VoucherType
    value: int
    start_date: datetime
    end_date: datetime
    min_amount: Money = field(default_factory=Money.zero)
    max_discount: Money | None = None
    usage_limit: int | None = None
    usage_count: int = 0
    is_active: bool = True
    description: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW vouchers only) ---------------------------------

    @staticmethod
    def create(
        code: str,
        type: VoucherType,
        value: int,
        start_date: datetime,
        end_date: datetime,
        min_amount: Money | None = None,
        max_discount: Money | None = None,
        usage_limit: int | None = None,
        description: str | None = None,
    ) -> Voucher:
        """Create a new voucher, enforcing all invariants."""
        if not code or not code.strip():
            raise ValidationError("Voucher code is required")

        voucher = Voucher(
            id=None,
            code=normalize_code(code),
            type=type,
            value=value,
            start_date=start_date,
            end_date=end_date,
            min_amount=min_amount or Money.zero(),
            max_discount=max_discount,
            usage_limit=usage_limit,
            description=description,
        )
        voucher.check_terms()
        return voucher

    def check_terms(self) -> None:
        """Validate value, window and limit after creation or an edit."""
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError("Voucher value must be an integer")
        if self.type is VoucherType.PERCENT and not 0 < self.value <= 100:
            raise ValidationError("Percent voucher value must be between 1 and 100")
        if self.type is VoucherType.FIXED and not 0 < self.value <= MAX_INTEGER:
            raise ValidationError("Fixed voucher value must be a positive amount")
        if self.start_date > self.end_date:
            raise ValidationError("Voucher start date must not be after its end date")
        if self.usage_limit is not None and not 0 < self.usage_limit <= MAX_INTEGER:
            raise ValidationError("Voucher usage limit must be a positive count")

    # --- Redemption rules -----------------------------------------------------

    def ensure_redeemable(self, amount: Money, now: datetime) -> None:
        """Run the redemption checks in order; the first failure raises.

        Never changes ``usage_count``.
        """
        if not self.is_active:
            raise VoucherRejectedError(
                VoucherRejection.DISABLED, f"Voucher {self.code} is disabled"
            )
        if now < self.start_date:
            raise VoucherRejectedError(
                VoucherRejection.NOT_YET_ACTIVE,
                f"Voucher {self.code} is not active until {self.start_date:%Y-%m-%d}",
            )
        if now > self.end_date:
            raise VoucherRejectedError(
                VoucherRejection.EXPIRED, f"Voucher {self.code} has expired"
            )
        if not self.has_uses_left:
            raise VoucherRejectedError(
                VoucherRejection.USAGE_EXCEEDED,
                f"Voucher {self.code} has no uses left",
            )
        if amount < self.min_amount:
            raise VoucherRejectedError(
                VoucherRejection.BELOW_MINIMUM,
                f"Order must be at least {self.min_amount} to use voucher {self.code}",
            )

    def discount_for(self, amount: Money) -> Money:
        """Discount granted on an order of *amount*.

        Fixed vouchers grant their face value even when it exceeds the order.
        """
        if self.type is VoucherType.FIXED:
            return Money(self.value)
        discount = amount.percent(self.value)
        if self.max_discount is not None and discount > self.max_discount:
            return self.max_discount
        return discount

    @property
    def has_uses_left(self) -> bool:
        return self.usage_limit is None or self.usage_count < self.usage_limit

    # --- Administration -------------------------------------------------------

    def deactivate(self) -> None:
        self.is_active = False

    def activate(self) -> None:
        self.is_active = True
