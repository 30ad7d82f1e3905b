from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from clinic.application.clock import Clock
from clinic.application.revenue_report import CategoryBreakdownHandler, MonthlyRevenueHandler
from clinic.infrastructure.api.dependencies import camelize, get_clock, get_uow

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/revenue/monthly")
def monthly_revenue(year: Optional[int] = None, uow=Depends(get_uow), clock: Clock = Depends(get_clock)):
    return camelize(MonthlyRevenueHandler(uow).handle(year or clock().year))


@router.get("/products/categories")
def product_categories(uow=Depends(get_uow)):
    return camelize(CategoryBreakdownHandler(uow).handle())
