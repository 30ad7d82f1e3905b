"""CLI commands for the Invoice aggregate."""

from __future__ import annotations

from pathlib import Path

import click

from clinic.application.create_invoice import CreateInvoiceHandler
from clinic.application.delete_invoice import DeleteInvoiceHandler
from clinic.application.dto import InvoiceDraft, InvoiceDTO, InvoiceItemSpec
from clinic.application.quote_invoice import QuoteInvoiceHandler
from clinic.application.show_invoice import ListInvoicesHandler, ShowInvoiceHandler
from clinic.application.sign_invoice import UpdateInvoiceSignatureHandler
from clinic.application.update_invoice_status import UpdateInvoiceStatusHandler
from clinic.domain.exceptions import DomainException
from clinic.infrastructure.cli.common import CliContext, parse_date, pass_cli, vnd


def _parse_items(raw: str) -> list[InvoiceItemSpec]:
    """Parse '3:1,7:2' (productId:quantity) into InvoiceItemSpec list.

    A bare product id means one unit.
    """
    specs: list[InvoiceItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        product_str, _, qty_str = pair.partition(":")
        try:
            product_id = int(product_str)
            qty = int(qty_str) if qty_str else 1
        except ValueError:
            raise click.BadParameter(
                f"Invalid item '{pair}'. Expected 'ProductId:Quantity'.",
                param_hint="--items",
            )
        specs.append(InvoiceItemSpec(product_id=product_id, quantity=qty))
    return specs


def _draft_options(func):
    """Options shared by 'create' and 'quote'."""
    options = [
        click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'."),
        click.option(
            "--type",
            "invoice_type",
            default="glasses",
            show_default=True,
            type=click.Choice(["glasses", "examination", "medicine"]),
        ),
        click.option("--processing-fee", type=int, default=None, help="Defaults by type."),
        click.option("--shipping-fee", type=int, default=None),
        click.option("--service-fee", type=int, default=None),
        click.option("--discount", type=int, default=0, show_default=True),
        click.option("--voucher", "voucher_code", default=None, help="Voucher code."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _display_invoice(dto: InvoiceDTO) -> None:
    """Shared formatting for displaying an invoice."""
    click.echo(f"Invoice {dto.code}  (#{dto.id}, {dto.type}, status={dto.status})")
    if dto.patient is not None:
        click.echo(f"Patient: {dto.patient.full_name} ({dto.patient.code})")
    click.echo(f"Created: {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*60}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<24} {item.quantity:>5} "
            f"{vnd(item.unit_price):>14} {vnd(item.total_price):>14}"
        )
    click.echo(f"  {'-'*60}")
    rows = [
        ("Subtotal", dto.subtotal),
        ("Processing fee", dto.processing_fee),
        ("Shipping fee", dto.shipping_fee),
        ("Service fee", dto.service_fee),
        ("VAT 10%", dto.tax),
        ("Discount", -dto.discount),
        (f"Voucher {dto.voucher_code or ''}".strip(), -dto.voucher_discount),
    ]
    for label, amount in rows:
        click.echo(f"  {label:<30} {vnd(amount):>30}")
    click.echo(f"  {'Total':<30} {vnd(dto.total):>30}")
    if dto.signature:
        click.echo("  (signed)")


@click.command("create")
@click.option("--patient", "patient_id", required=True, type=int, help="Patient ID.")
@_draft_options
@click.option("--notes", default=None)
@click.option("--instructions", default=None)
@click.option("--dosage", default=None)
@click.option("--follow-up", default=None, help="Follow-up date (YYYY-MM-DD).")
@pass_cli
def invoice_create(
    ctx: CliContext,
    patient_id: int,
    items: str,
    invoice_type: str,
    processing_fee: int | None,
    shipping_fee: int | None,
    service_fee: int | None,
    discount: int,
    voucher_code: str | None,
    notes: str | None,
    instructions: str | None,
    dosage: str | None,
    follow_up: str | None,
) -> None:
    """Create an invoice (decrements stock, redeems the voucher)."""
    draft = InvoiceDraft(
        patient_id=patient_id,
        items=_parse_items(items),
        invoice_type=invoice_type,
        processing_fee=processing_fee,
        shipping_fee=shipping_fee,
        service_fee=service_fee,
        discount=discount,
        voucher_code=voucher_code,
        notes=notes,
        instructions=instructions,
        dosage=dosage,
        follow_up_date=parse_date(follow_up, "--follow-up"),
    )
    handler = CreateInvoiceHandler(ctx.uow())

    try:
        dto = handler.handle(draft)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_invoice(dto)


@click.command("quote")
@_draft_options
@pass_cli
def invoice_quote(
    ctx: CliContext,
    items: str,
    invoice_type: str,
    processing_fee: int | None,
    shipping_fee: int | None,
    service_fee: int | None,
    discount: int,
    voucher_code: str | None,
) -> None:
    """Price a cart without saving anything."""
    draft = InvoiceDraft(
        items=_parse_items(items),
        invoice_type=invoice_type,
        processing_fee=processing_fee,
        shipping_fee=shipping_fee,
        service_fee=service_fee,
        discount=discount,
        voucher_code=voucher_code,
    )
    handler = QuoteInvoiceHandler(ctx.uow())

    try:
        quote = handler.handle(draft)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    for label, amount in [
        ("Subtotal", quote.subtotal),
        ("Fees", quote.fees),
        ("Before tax", quote.total_before_tax),
        ("VAT 10%", quote.tax),
        ("Discount", -quote.discount),
        ("Voucher", -quote.voucher_discount),
        ("Total", quote.total),
    ]:
        click.echo(f"{label:<12} {vnd(amount):>20}")
    if quote.voucher_message:
        click.echo(quote.voucher_message)
    if quote.total <= 0:
        click.echo("Warning: total is not positive; this invoice would be rejected.")


@click.command("show")
@click.option("--id", "invoice_id", required=True, type=int, help="Invoice ID to display.")
@pass_cli
def invoice_show(ctx: CliContext, invoice_id: int) -> None:
    """Show details of an existing invoice."""
    handler = ShowInvoiceHandler(ctx.uow())

    try:
        dto = handler.handle(invoice_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_invoice(dto)


@click.command("list")
@click.option(
    "--status", default=None, type=click.Choice(["UNPAID", "PAID", "CANCELLED"])
)
@pass_cli
def invoice_list(ctx: CliContext, status: str | None) -> None:
    """List recent invoices."""
    invoices = ListInvoicesHandler(ctx.uow()).handle(status=status)

    if not invoices:
        click.echo("No invoices found.")
        return

    click.echo(f"{'ID':<6} {'Code':<18} {'Status':<10} {'Patient':<24} {'Total':>14}")
    click.echo("-" * 76)
    for dto in invoices:
        patient = dto.patient.full_name if dto.patient else f"#{dto.patient_id}"
        click.echo(
            f"{dto.id:<6} {dto.code:<18} {dto.status:<10} {patient:<24} {vnd(dto.total):>14}"
        )


@click.command("status")
@click.option("--id", "invoice_id", required=True, type=int, help="Invoice ID.")
@click.option(
    "--to", "status", required=True, type=click.Choice(["UNPAID", "PAID", "CANCELLED"])
)
@pass_cli
def invoice_status(ctx: CliContext, invoice_id: int, status: str) -> None:
    """Mark an invoice as paid or cancelled."""
    handler = UpdateInvoiceStatusHandler(ctx.uow())

    try:
        dto = handler.handle(invoice_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Invoice {dto.code} is now {dto.status}.")


@click.command("sign")
@click.option("--id", "invoice_id", required=True, type=int, help="Invoice ID.")
@click.option(
    "--file",
    "signature_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File holding the signature payload (e.g. a data URL).",
)
@pass_cli
def invoice_sign(ctx: CliContext, invoice_id: int, signature_file: Path) -> None:
    """Attach a customer signature to an invoice."""
    handler = UpdateInvoiceSignatureHandler(ctx.uow())

    try:
        dto = handler.handle(invoice_id, signature_file.read_text(encoding="utf-8").strip())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Invoice {dto.code} signed.")


@click.command("delete")
@click.option("--id", "invoice_id", required=True, type=int, help="Invoice ID to delete.")
@click.confirmation_option(prompt="Delete this invoice and put its items back in stock?")
@pass_cli
def invoice_delete(ctx: CliContext, invoice_id: int) -> None:
    """Delete an invoice (restores product stock)."""
    handler = DeleteInvoiceHandler(ctx.uow())

    try:
        handler.handle(invoice_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Invoice #{invoice_id} deleted, stock restored.")
