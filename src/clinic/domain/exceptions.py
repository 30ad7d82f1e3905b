"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI and HTTP layers can catch them uniformly and map them to
user-facing messages and status codes.
"""

from __future__ import annotations

from enum import Enum


class DomainException(Exception):
    """Base class for all domain errors."""

    kind = "domain_error"


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    kind = "validation_error"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    kind = "not_found"


class ConflictError(DomainException):
    """A guarded counter update was refused (stock underflow, usage overshoot,
    duplicate unique code)."""

    kind = "conflict"


class VoucherRejection(Enum):
    NOT_FOUND = "NOT_FOUND"
    DISABLED = "DISABLED"
    NOT_YET_ACTIVE = "NOT_YET_ACTIVE"
    EXPIRED = "EXPIRED"
    USAGE_EXCEEDED = "USAGE_EXCEEDED"
    BELOW_MINIMUM = "BELOW_MINIMUM"


class VoucherRejectedError(ValidationError):
    """A voucher cannot be redeemed; ``reason`` tells which check failed."""

    kind = "voucher_rejected"

    def __init__(self, reason: VoucherRejection, message: str) -> None:
        super().__init__(message)
        self.reason = reason
