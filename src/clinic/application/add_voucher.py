"""Application service: Add Voucher use case."""

from __future__ import annotations

import logging
from datetime import datetime

from clinic.application.dto import VoucherDTO, voucher_to_dto
from clinic.domain.exceptions import ConflictError, ValidationError
from clinic.domain.model.value_objects import Money
from clinic.domain.model.voucher import Voucher, VoucherType, normalize_code
from clinic.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def parse_voucher_type(raw: str) -> VoucherType:
    try:
        return VoucherType(raw.strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown voucher type '{raw}' (expected percent or fixed)")


class AddVoucherHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        code: str,
        voucher_type: str,
        value: int,
        start_date: datetime,
        end_date: datetime,
        min_amount: int = 0,
        max_discount: int | None = None,
        usage_limit: int | None = None,
        description: str | None = None,
    ) -> VoucherDTO:
        voucher = Voucher.create(
            code=code,
            type=parse_voucher_type(voucher_type),
            value=value,
            start_date=start_date,
            end_date=end_date,
            min_amount=Money(min_amount),
            max_discount=Money(max_discount) if max_discount else None,
            usage_limit=usage_limit or None,
            description=description,
        )

        with self._uow as uow:
            if uow.vouchers.get_by_code(normalize_code(code)) is not None:
                raise ConflictError(f"Voucher {voucher.code} already exists")
            uow.vouchers.save(voucher)
            uow.commit()

        logger.info("Voucher %s created (%s %s)", voucher.code, voucher.type.value, voucher.value)
        return voucher_to_dto(voucher)
