"""CLI commands for the Voucher aggregate."""

from __future__ import annotations

from typing import Any

import click

from clinic.application.add_voucher import AddVoucherHandler
from clinic.application.delete_voucher import DeleteVoucherHandler
from clinic.application.show_vouchers import ListVouchersHandler
from clinic.application.update_voucher import UpdateVoucherHandler
from clinic.application.validate_voucher import ValidateVoucherHandler
from clinic.domain.exceptions import DomainException
from clinic.infrastructure.cli.common import (
    CliContext,
    end_of_day,
    parse_date,
    pass_cli,
    start_of_day,
    vnd,
)


@click.command("add")
@click.option("--code", required=True, help="Voucher code (stored upper-case).")
@click.option("--type", "voucher_type", required=True, type=click.Choice(["percent", "fixed"]))
@click.option("--value", required=True, type=int, help="Percent (1-100) or amount in dong.")
@click.option("--start", required=True, help="First valid day (YYYY-MM-DD).")
@click.option("--end", required=True, help="Last valid day (YYYY-MM-DD).")
@click.option("--min-amount", type=int, default=0, show_default=True)
@click.option("--max-discount", type=int, default=None, help="Cap for percent vouchers.")
@click.option("--usage-limit", type=int, default=None)
@click.option("--description", default=None)
@pass_cli
def voucher_add(
    ctx: CliContext,
    code: str,
    voucher_type: str,
    value: int,
    start: str,
    end: str,
    min_amount: int,
    max_discount: int | None,
    usage_limit: int | None,
    description: str | None,
) -> None:
    """Create a new voucher."""
    handler = AddVoucherHandler(ctx.uow())

    try:
        dto = handler.handle(
            code=code,
            voucher_type=voucher_type,
            value=value,
            start_date=start_of_day(parse_date(start, "--start")),
            end_date=end_of_day(parse_date(end, "--end")),
            min_amount=min_amount,
            max_discount=max_discount,
            usage_limit=usage_limit,
            description=description,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Voucher #{dto.id} {dto.code} created.")


@click.command("list")
@pass_cli
def voucher_list(ctx: CliContext) -> None:
    """List all vouchers."""
    vouchers = ListVouchersHandler(ctx.uow()).handle()

    if not vouchers:
        click.echo("No vouchers found.")
        return

    click.echo(f"{'ID':<6} {'Code':<14} {'Value':>12} {'Window':<23} {'Used':>9} {'Active':<6}")
    click.echo("-" * 76)
    for v in vouchers:
        value = f"{v.value}%" if v.type == "percent" else vnd(v.value)
        used = f"{v.usage_count}/{v.usage_limit}" if v.usage_limit else str(v.usage_count)
        window = f"{v.start_date[:10]}..{v.end_date[:10]}"
        click.echo(
            f"{v.id:<6} {v.code:<14} {value:>12} {window:<23} {used:>9} "
            f"{'yes' if v.is_active else 'no':<6}"
        )


@click.command("validate")
@click.option("--code", required=True, help="Voucher code.")
@click.option("--amount", required=True, type=int, help="Order amount in dong.")
@pass_cli
def voucher_validate(ctx: CliContext, code: str, amount: int) -> None:
    """Check whether a voucher applies to an order amount (does not redeem it)."""
    handler = ValidateVoucherHandler(ctx.uow())

    try:
        quote = handler.handle(code, amount)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Voucher {quote.voucher.code} is valid: {quote.message}")


@click.command("update")
@click.option("--id", "voucher_id", required=True, type=int, help="Voucher ID.")
@click.option("--value", type=int, default=None)
@click.option("--min-amount", type=int, default=None)
@click.option("--max-discount", type=int, default=None, help="0 removes the cap.")
@click.option("--start", default=None, help="YYYY-MM-DD")
@click.option("--end", default=None, help="YYYY-MM-DD")
@click.option("--usage-limit", type=int, default=None, help="0 removes the limit.")
@click.option("--description", default=None)
@click.option("--active/--inactive", "is_active", default=None)
@pass_cli
def voucher_update(
    ctx: CliContext,
    voucher_id: int,
    value: int | None,
    min_amount: int | None,
    max_discount: int | None,
    start: str | None,
    end: str | None,
    usage_limit: int | None,
    description: str | None,
    is_active: bool | None,
) -> None:
    """Edit a voucher's terms or switch it on or off."""
    changes: dict[str, Any] = {}
    for name, given in [
        ("value", value),
        ("min_amount", min_amount),
        ("max_discount", max_discount),
        ("usage_limit", usage_limit),
        ("description", description),
        ("is_active", is_active),
    ]:
        if given is not None:
            changes[name] = given
    if start is not None:
        changes["start_date"] = start_of_day(parse_date(start, "--start"))
    if end is not None:
        changes["end_date"] = end_of_day(parse_date(end, "--end"))
    if not changes:
        raise click.UsageError("Nothing to update.")

    handler = UpdateVoucherHandler(ctx.uow())

    try:
        dto = handler.handle(voucher_id, changes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Voucher {dto.code} updated.")


@click.command("delete")
@click.option("--id", "voucher_id", required=True, type=int, help="Voucher ID.")
@pass_cli
def voucher_delete(ctx: CliContext, voucher_id: int) -> None:
    """Delete a voucher."""
    handler = DeleteVoucherHandler(ctx.uow())

    try:
        handler.handle(voucher_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Voucher #{voucher_id} deleted.")
