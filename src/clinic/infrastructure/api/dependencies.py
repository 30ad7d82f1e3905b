"""Per-request dependencies: one unit of work per request, shared clock."""

from __future__ import annotations

import dataclasses
from typing import Annotated, Any

from fastapi import Path, Request
from pydantic.alias_generators import to_camel

from clinic.application.clock import Clock
from clinic.domain.model.value_objects import MAX_INTEGER
from clinic.infrastructure import bootstrap
from clinic.infrastructure.persistence.sqlite_unit_of_work import SqliteUnitOfWork

# Row ids in the path share the SQLite INTEGER range
RowId = Annotated[int, Path(le=MAX_INTEGER)]


def get_uow(request: Request) -> SqliteUnitOfWork:
    return bootstrap.unit_of_work(request.app.state.database)


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def camelize(value: Any) -> Any:
    """DTO (or list of DTOs) -> JSON-ready structure with camelCase keys."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)
    if isinstance(value, dict):
        return {to_camel(str(k)): camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [camelize(v) for v in value]
    return value
