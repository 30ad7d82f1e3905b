"""Application service: Stock Alerts use case (query).

Low stock means ``quantity <= min_stock``.  Expiry alerts only concern
products with an expiry date (medicine): "expiring" is within the next
30 days, "expired" is already past.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from clinic.application.clock import Clock, utcnow
from clinic.application.dto import ProductDTO, product_to_dto
from clinic.domain.exceptions import ValidationError
from clinic.domain.model.product import EXPIRY_WARNING_DAYS
from clinic.domain.repository.unit_of_work import UnitOfWork

MAX_EXPIRY_DAYS = 3650


@dataclass(frozen=True)
class StockAlertsDTO:
    low_stock: list[ProductDTO]
    expiring: list[ProductDTO]
    expired: list[ProductDTO]


class StockAlertsHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, expiry_days: int = EXPIRY_WARNING_DAYS) -> StockAlertsDTO:
        if not 0 <= expiry_days <= MAX_EXPIRY_DAYS:
            raise ValidationError(f"Days must be between 0 and {MAX_EXPIRY_DAYS}")
        today: date = self._clock().date()
        with self._uow as uow:
            products = uow.products.list_all()

        low = sorted((p for p in products if p.is_low_stock), key=lambda p: p.quantity)
        dated = sorted(
            (p for p in products if p.expires_at is not None), key=lambda p: p.expires_at
        )
        return StockAlertsDTO(
            low_stock=[product_to_dto(p) for p in low],
            expiring=[product_to_dto(p) for p in dated if p.is_expiring(today, expiry_days)],
            expired=[product_to_dto(p) for p in dated if p.is_expired(today)],
        )
