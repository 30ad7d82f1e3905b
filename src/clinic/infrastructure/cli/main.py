import click

from clinic.infrastructure.cli.common import CliContext, pass_cli
from clinic.infrastructure.cli.invoice_commands import (
    invoice_create,
    invoice_delete,
    invoice_list,
    invoice_quote,
    invoice_show,
    invoice_sign,
    invoice_status,
)
from clinic.infrastructure.cli.patient_commands import patient_add, patient_list
from clinic.infrastructure.cli.product_commands import (
    product_add,
    product_alerts,
    product_delete,
    product_list,
    product_recommend,
    product_update,
)
from clinic.infrastructure.cli.report_commands import report_categories, report_revenue
from clinic.infrastructure.cli.voucher_commands import (
    voucher_add,
    voucher_delete,
    voucher_list,
    voucher_update,
    voucher_validate,
)
from clinic.infrastructure.config import Settings
from clinic.infrastructure.logging_config import configure_logging


@click.group()
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="SQLite database file (overrides CLINIC_DB_PATH).",
)
@click.option("--log-level", default=None, help="Overrides CLINIC_LOG_LEVEL.")
@click.pass_context
def cli(ctx: click.Context, db_path: str | None, log_level: str | None) -> None:
    """Clinic — invoices, vouchers and stock for an eye clinic"""
    settings = Settings.from_env().with_db_path(db_path)
    configure_logging((log_level or settings.log_level).upper())
    state = CliContext(settings)
    ctx.obj = state
    ctx.call_on_close(state.close)


@cli.group()
def invoice() -> None:
    """Manage invoices."""


@cli.group()
def voucher() -> None:
    """Manage vouchers."""


@cli.group()
def product() -> None:
    """Manage products and stock."""


@cli.group()
def patient() -> None:
    """Manage patients."""


@cli.group()
def report() -> None:
    """Revenue and stock reports."""


@cli.group()
def db() -> None:
    """Database maintenance."""


@db.command("init")
@pass_cli
def db_init(ctx: CliContext) -> None:
    """Create the database file and schema."""
    click.echo(f"Database ready at {ctx.database.path}")


@cli.command()
@click.option("--host", default=None, help="Overrides CLINIC_HOST.")
@click.option("--port", type=int, default=None, help="Overrides CLINIC_PORT.")
@pass_cli
def serve(ctx: CliContext, host: str | None, port: int | None) -> None:
    """Run the HTTP API."""
    import uvicorn

    from clinic.infrastructure.api.app import create_app

    settings = ctx.settings
    uvicorn.run(
        create_app(settings),
        host=host or settings.host,
        port=port or settings.port,
    )


# Register subcommands
invoice.add_command(invoice_create)
invoice.add_command(invoice_delete)
invoice.add_command(invoice_list)
invoice.add_command(invoice_quote)
invoice.add_command(invoice_show)
invoice.add_command(invoice_sign)
invoice.add_command(invoice_status)
voucher.add_command(voucher_add)
voucher.add_command(voucher_delete)
voucher.add_command(voucher_list)
voucher.add_command(voucher_update)
voucher.add_command(voucher_validate)
product.add_command(product_add)
product.add_command(product_alerts)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_recommend)
product.add_command(product_update)
patient.add_command(patient_add)
patient.add_command(patient_list)
report.add_command(report_categories)
report.add_command(report_revenue)
