"""Patient record, reduced to what billing needs to reference."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from clinic.domain.exceptions import ValidationError


@dataclass
class Patient:

    id: int | None
    code: str
    full_name: str
    phone: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(code: str, full_name: str, phone: str | None = None) -> Patient:
        if not full_name or not full_name.strip():
            raise ValidationError("Patient name is required")
        return Patient(
            id=None,
            code=code,
            full_name=full_name.strip(),
            phone=phone.strip() if phone else None,
        )
