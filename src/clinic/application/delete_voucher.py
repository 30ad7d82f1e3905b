"""Application service: Delete Voucher use case.

Invoices keep the voucher code they were issued with.
"""

from __future__ import annotations

from clinic.domain.exceptions import EntityNotFoundError
from clinic.domain.repository.unit_of_work import UnitOfWork


class DeleteVoucherHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, voucher_id: int) -> None:
        with self._uow as uow:
            if uow.vouchers.get_by_id(voucher_id) is None:
                raise EntityNotFoundError(f"Voucher #{voucher_id} not found")
            uow.vouchers.delete(voucher_id)
            uow.commit()
