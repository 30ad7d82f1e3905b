"""CLI commands for patients."""

from __future__ import annotations

import click

from clinic.application.add_patient import AddPatientHandler
from clinic.application.show_patients import ListPatientsHandler
from clinic.domain.exceptions import DomainException
from clinic.infrastructure.cli.common import CliContext, pass_cli


@click.command("add")
@click.option("--name", "full_name", required=True, help="Full name.")
@click.option("--phone", default=None)
@pass_cli
def patient_add(ctx: CliContext, full_name: str, phone: str | None) -> None:
    """Register a patient."""
    handler = AddPatientHandler(ctx.uow())

    try:
        patient = handler.handle(full_name=full_name, phone=phone)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Patient #{patient.id} {patient.full_name} ({patient.code}) added")


@click.command("list")
@pass_cli
def patient_list(ctx: CliContext) -> None:
    """List patients."""
    patients = ListPatientsHandler(ctx.uow()).handle()

    if not patients:
        click.echo("No patients found.")
        return

    click.echo(f"{'ID':<6} {'Code':<18} {'Name':<28} {'Phone':<14}")
    click.echo("-" * 68)
    for p in patients:
        click.echo(f"{p.id:<6} {p.code:<18} {p.full_name:<28} {p.phone or '':<14}")
