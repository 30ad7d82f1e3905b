"""CLI commands for reports."""

from __future__ import annotations

from datetime import date

import click

from clinic.application.revenue_report import CategoryBreakdownHandler, MonthlyRevenueHandler
from clinic.domain.exceptions import DomainException
from clinic.infrastructure.cli.common import CliContext, pass_cli, vnd


@click.command("revenue")
@click.option("--year", type=int, default=None, help="Defaults to the current year.")
@pass_cli
def report_revenue(ctx: CliContext, year: int | None) -> None:
    """Monthly revenue of paid invoices."""
    year = year or date.today().year
    handler = MonthlyRevenueHandler(ctx.uow())

    try:
        months = handler.handle(year)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Revenue {year}")
    for entry in months:
        click.echo(f"  {entry.month:>2}  {vnd(entry.total):>16}")
    click.echo(f"  {'':>2}  {vnd(sum(m.total for m in months)):>16}")


@click.command("categories")
@pass_cli
def report_categories(ctx: CliContext) -> None:
    """Products and units in stock per category."""
    rows = CategoryBreakdownHandler(ctx.uow()).handle()

    if not rows:
        click.echo("No products found.")
        return

    click.echo(f"{'Category':<10} {'Products':>9} {'Units':>9}")
    for row in rows:
        click.echo(f"{row.category:<10} {row.count:>9} {row.total_quantity:>9}")
