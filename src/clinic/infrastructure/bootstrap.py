"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from clinic.infrastructure.config import Settings
from clinic.infrastructure.persistence.database import Database
from clinic.infrastructure.persistence.sqlite_unit_of_work import SqliteUnitOfWork


def database(settings: Settings) -> Database:
    return Database(settings.db_path)


def unit_of_work(db: Database) -> SqliteUnitOfWork:
    return SqliteUnitOfWork(db)
