"""Application service: Update Voucher use case.

Applies a partial edit.  The code and the usage count cannot be edited;
``max_discount`` and ``usage_limit`` may be set to None to remove them.
"""

from __future__ import annotations

from typing import Any

from clinic.application.add_voucher import parse_voucher_type
from clinic.application.dto import VoucherDTO, voucher_to_dto
from clinic.domain.exceptions import EntityNotFoundError, ValidationError
from clinic.domain.model.value_objects import Money
from clinic.domain.repository.unit_of_work import UnitOfWork

EDITABLE_FIELDS = {
    "description",
    "type",
    "value",
    "min_amount",
    "max_discount",
    "start_date",
    "end_date",
    "usage_limit",
    "is_active",
}


class UpdateVoucherHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, voucher_id: int, changes: dict[str, Any]) -> VoucherDTO:
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot edit voucher field(s): {', '.join(sorted(unknown))}")
        for name in ("type", "value", "start_date", "end_date", "is_active"):
            if name in changes and changes[name] is None:
                raise ValidationError(f"Voucher {name} cannot be empty")

        with self._uow as uow:
            voucher = uow.vouchers.get_by_id(voucher_id)
            if voucher is None:
                raise EntityNotFoundError(f"Voucher #{voucher_id} not found")

            if "description" in changes:
                voucher.description = changes["description"]
            if "type" in changes:
                voucher.type = parse_voucher_type(changes["type"])
            if "value" in changes:
                voucher.value = changes["value"]
            if "min_amount" in changes:
                voucher.min_amount = Money(changes["min_amount"] or 0)
            if "max_discount" in changes:
                cap = changes["max_discount"]
                voucher.max_discount = Money(cap) if cap else None
            if "start_date" in changes:
                voucher.start_date = changes["start_date"]
            if "end_date" in changes:
                voucher.end_date = changes["end_date"]
            if "usage_limit" in changes:
                voucher.usage_limit = changes["usage_limit"] or None
            if "is_active" in changes:
                if changes["is_active"]:
                    voucher.activate()
                else:
                    voucher.deactivate()

            voucher.check_terms()
            uow.vouchers.save(voucher)
            uow.commit()
            return voucher_to_dto(voucher)
