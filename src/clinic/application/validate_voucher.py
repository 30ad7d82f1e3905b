"""Application service: Validate Voucher use case (query).

Answers "may an order of this amount use this code right now, and for
how much?".  Never records a redemption.
"""

from __future__ import annotations

from clinic.application.clock import Clock, utcnow
from clinic.application.dto import VoucherQuoteDTO, voucher_to_dto
from clinic.domain.model.value_objects import Money
from clinic.domain.repository.unit_of_work import UnitOfWork
from clinic.domain.service.voucher_validator import VoucherValidator


class ValidateVoucherHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, code: str, amount: int) -> VoucherQuoteDTO:
        """Raises VoucherRejectedError when the voucher cannot be used."""
        with self._uow as uow:
            quote = VoucherValidator(uow.vouchers).validate(
                code, Money(amount), self._clock()
            )
        return VoucherQuoteDTO(
            voucher=voucher_to_dto(quote.voucher),
            discount=quote.discount.amount,
            message=f"Discount {quote.discount}",
        )
