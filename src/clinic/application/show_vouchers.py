"""Application service: List Vouchers use case (query)."""

from __future__ import annotations

from clinic.application.dto import VoucherDTO, voucher_to_dto
from clinic.domain.repository.unit_of_work import UnitOfWork


class ListVouchersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[VoucherDTO]:
        with self._uow as uow:
            return [voucher_to_dto(v) for v in uow.vouchers.list_all()]
