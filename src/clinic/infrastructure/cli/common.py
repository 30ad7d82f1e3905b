"""Shared plumbing for the CLI commands."""

from __future__ import annotations

from datetime import date, datetime, time, timezone

import click

from clinic.infrastructure import bootstrap
from clinic.infrastructure.config import Settings
from clinic.infrastructure.persistence.database import Database
from clinic.infrastructure.persistence.sqlite_unit_of_work import SqliteUnitOfWork


class CliContext:
    """Carries settings and the (lazily opened) database between commands."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._database: Database | None = None

    @property
    def database(self) -> Database:
        if self._database is None:
            self._database = bootstrap.database(self.settings)
            self._database.open()
        return self._database

    def uow(self) -> SqliteUnitOfWork:
        return bootstrap.unit_of_work(self.database)

    def close(self) -> None:
        if self._database is not None:
            self._database.close()
            self._database = None


pass_cli = click.make_pass_decorator(CliContext)


def vnd(amount: int) -> str:
    return f"{amount:,}đ"


def parse_date(raw: str | None, param: str) -> date | None:
    if raw is None:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise click.BadParameter(f"Expected YYYY-MM-DD, got '{raw}'", param_hint=param)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=timezone.utc)
