from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from clinic.application.add_voucher import AddVoucherHandler
from clinic.application.clock import Clock
from clinic.application.delete_voucher import DeleteVoucherHandler
from clinic.application.show_vouchers import ListVouchersHandler
from clinic.application.update_voucher import UpdateVoucherHandler
from clinic.application.validate_voucher import ValidateVoucherHandler
from clinic.domain.exceptions import DomainException
from clinic.infrastructure.api.errors import status_for
from clinic.infrastructure.api.dependencies import RowId, camelize, get_clock, get_uow
from clinic.infrastructure.api.schemas import VoucherCheckIn, VoucherIn, VoucherUpdateIn

router = APIRouter(prefix="/api/vouchers", tags=["vouchers"])


@router.get("")
def list_vouchers(uow=Depends(get_uow)):
    return camelize(ListVouchersHandler(uow).handle())


@router.post("/validate")
def validate_voucher(payload: VoucherCheckIn, uow=Depends(get_uow), clock: Clock = Depends(get_clock)):
    """Check a code against an order amount; never redeems it."""
    try:
        quote = ValidateVoucherHandler(uow, clock).handle(payload.code, payload.amount)
    except DomainException as exc:
        body = {"valid": False, "message": str(exc)}
        reason = getattr(exc, "reason", None)
        if reason is not None:
            body["reason"] = reason.value
        return JSONResponse(status_code=status_for(exc), content=body)
    return {
        "valid": True,
        "voucher": camelize(quote.voucher),
        "discount": quote.discount,
        "message": quote.message,
    }


@router.post("", status_code=201)
def create_voucher(payload: VoucherIn, uow=Depends(get_uow)):
    dto = AddVoucherHandler(uow).handle(
        code=payload.code,
        voucher_type=payload.type,
        value=payload.value,
        start_date=payload.start_date,
        end_date=payload.end_date,
        min_amount=payload.min_amount,
        max_discount=payload.max_discount,
        usage_limit=payload.usage_limit,
        description=payload.description,
    )
    return camelize(dto)


@router.put("/{voucher_id}")
def update_voucher(voucher_id: RowId, payload: VoucherUpdateIn, uow=Depends(get_uow)):
    changes = payload.model_dump(exclude_unset=True)
    return camelize(UpdateVoucherHandler(uow).handle(voucher_id, changes))


@router.delete("/{voucher_id}")
def delete_voucher(voucher_id: RowId, uow=Depends(get_uow)):
    DeleteVoucherHandler(uow).handle(voucher_id)
    return {"success": True}
