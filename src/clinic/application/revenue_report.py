"""Application service: reporting queries.

Revenue only counts PAID invoices, attributed to the month they were
created in (UTC).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from clinic.domain.exceptions import ValidationError
from clinic.domain.model.invoice import InvoiceStatus
from clinic.domain.repository.unit_of_work import UnitOfWork

MAX_YEAR = 9998


@dataclass(frozen=True)
class MonthRevenueDTO:
    month: int
    total: int


@dataclass(frozen=True)
class CategoryStockDTO:
    category: str
    count: int
    total_quantity: int


class MonthlyRevenueHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, year: int) -> list[MonthRevenueDTO]:
        if not 1 <= year <= MAX_YEAR:
            raise ValidationError(f"Year must be between 1 and {MAX_YEAR}, got {year}")
        start = datetime(year, 1, 1, tzinfo=timezone.utc)
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
        with self._uow as uow:
            invoices = uow.invoices.list_created_between(start, end, status=InvoiceStatus.PAID)

        totals = {month: 0 for month in range(1, 13)}
        for invoice in invoices:
            totals[invoice.created_at.astimezone(timezone.utc).month] += invoice.total.amount
        return [MonthRevenueDTO(month=m, total=t) for m, t in totals.items()]


class CategoryBreakdownHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[CategoryStockDTO]:
        with self._uow as uow:
            products = uow.products.list_all()

        counts: dict[str, list[int]] = {}
        for product in products:
            entry = counts.setdefault(product.category.value, [0, 0])
            entry[0] += 1
            entry[1] += product.quantity
        return [
            CategoryStockDTO(category=c, count=n, total_quantity=q)
            for c, (n, q) in sorted(counts.items())
        ]
