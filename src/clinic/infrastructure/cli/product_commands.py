"""CLI commands for the Product aggregate."""

from __future__ import annotations

from typing import Any

import click

from clinic.application.add_product import AddProductHandler
from clinic.application.delete_product import DeleteProductHandler
from clinic.application.dto import ProductDTO
from clinic.application.recommend_products import RecommendProductsHandler
from clinic.application.show_products import ListProductsHandler
from clinic.application.stock_alerts import StockAlertsHandler
from clinic.application.update_product import UpdateProductHandler
from clinic.domain.exceptions import DomainException
from clinic.domain.model.product import DEFAULT_MIN_STOCK, EXPIRY_WARNING_DAYS
from clinic.infrastructure.cli.common import CliContext, parse_date, pass_cli, vnd

CATEGORIES = click.Choice(["glasses", "lenses", "medicine"])


def _print_products(products: list[ProductDTO]) -> None:
    click.echo(f"{'ID':<6} {'Code':<16} {'Name':<24} {'Category':<9} {'Price':>12} {'Qty':>5}")
    click.echo("-" * 76)
    for p in products:
        flag = " !" if p.is_low_stock else ""
        click.echo(
            f"{p.id:<6} {p.code:<16} {p.name:<24} {p.category:<9} "
            f"{vnd(p.price):>12} {p.quantity:>5}{flag}"
        )


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, type=int, help="Price in dong.")
@click.option("--code", default=None, help="Product code (generated when omitted).")
@click.option("--category", type=CATEGORIES, default="glasses", show_default=True)
@click.option("--quantity", type=int, default=0, show_default=True)
@click.option("--min-stock", type=int, default=DEFAULT_MIN_STOCK, show_default=True)
@click.option("--manufacturer", default=None)
@click.option("--material", default=None)
@click.option("--sph-range", default=None, help="e.g. '-6.00 đến +4.00'.")
@click.option("--cyl-range", default=None, help="e.g. '-2.00 đến 0'.")
@click.option("--expires", default=None, help="Expiry date (YYYY-MM-DD).")
@pass_cli
def product_add(
    ctx: CliContext,
    name: str,
    price: int,
    code: str | None,
    category: str,
    quantity: int,
    min_stock: int,
    manufacturer: str | None,
    material: str | None,
    sph_range: str | None,
    cyl_range: str | None,
    expires: str | None,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(ctx.uow())

    try:
        product = handler.handle(
            name=name,
            price=price,
            code=code,
            category=category,
            quantity=quantity,
            min_stock=min_stock,
            manufacturer=manufacturer,
            material=material,
            sph_range=sph_range,
            cyl_range=cyl_range,
            expires_at=parse_date(expires, "--expires"),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' ({product.code}) added at {vnd(product.price)}")


@click.command("list")
@click.option("--category", type=CATEGORIES, default=None)
@click.option("--search", "-q", default=None, help="Match on name or code.")
@pass_cli
def product_list(ctx: CliContext, category: str | None, search: str | None) -> None:
    """List products in the catalog."""
    products = ListProductsHandler(ctx.uow()).handle(category=category, search=search)

    if not products:
        click.echo("No products found.")
        return

    _print_products(products)


@click.command("update")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--name", default=None)
@click.option("--price", type=int, default=None, help="New price in dong.")
@click.option("--quantity", type=int, default=None, help="Counted stock.")
@click.option("--min-stock", type=int, default=None)
@click.option("--sph-range", default=None)
@click.option("--cyl-range", default=None)
@click.option("--expires", default=None, help="YYYY-MM-DD")
@pass_cli
def product_update(
    ctx: CliContext,
    product_id: int,
    name: str | None,
    price: int | None,
    quantity: int | None,
    min_stock: int | None,
    sph_range: str | None,
    cyl_range: str | None,
    expires: str | None,
) -> None:
    """Update a product's price, stock or details."""
    changes: dict[str, Any] = {
        key: value
        for key, value in [
            ("name", name),
            ("price", price),
            ("quantity", quantity),
            ("min_stock", min_stock),
            ("sph_range", sph_range),
            ("cyl_range", cyl_range),
        ]
        if value is not None
    }
    if expires is not None:
        changes["expires_at"] = parse_date(expires, "--expires")
    if not changes:
        raise click.UsageError("Nothing to update.")

    handler = UpdateProductHandler(ctx.uow())

    try:
        product = handler.handle(product_id, changes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} updated: {vnd(product.price)}, {product.quantity} in stock")


@click.command("alerts")
@click.option("--days", type=int, default=EXPIRY_WARNING_DAYS, show_default=True)
@pass_cli
def product_alerts(ctx: CliContext, days: int) -> None:
    """Show low-stock, expiring and expired products."""
    handler = StockAlertsHandler(ctx.uow())

    try:
        alerts = handler.handle(expiry_days=days)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    for title, products in [
        ("Low stock", alerts.low_stock),
        (f"Expiring within {days} days", alerts.expiring),
        ("Expired", alerts.expired),
    ]:
        click.echo(f"{title}: {len(products)}")
        for p in products:
            extra = f" expires {p.expires_at}" if p.expires_at else ""
            click.echo(f"  #{p.id} {p.name} qty={p.quantity} min={p.min_stock}{extra}")


@click.command("recommend")
@click.option("--od-sph", default=None, help="Right eye SPH.")
@click.option("--os-sph", default=None, help="Left eye SPH.")
@click.option("--od-cyl", default=None, help="Right eye CYL.")
@click.option("--os-cyl", default=None, help="Left eye CYL.")
@click.option("--category", type=CATEGORIES, default=None)
@pass_cli
def product_recommend(
    ctx: CliContext,
    od_sph: str | None,
    os_sph: str | None,
    od_cyl: str | None,
    os_cyl: str | None,
    category: str | None,
) -> None:
    """Suggest products that fit a refraction result."""
    handler = RecommendProductsHandler(ctx.uow())

    try:
        products = handler.handle(od_sph, os_sph, od_cyl, os_cyl, category=category)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No matching products.")
        return

    _print_products(products)


@click.command("delete")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.confirmation_option(prompt="Delete this product? Invoices keep their copy of it.")
@pass_cli
def product_delete(ctx: CliContext, product_id: int) -> None:
    """Remove a product from the catalog."""
    handler = DeleteProductHandler(ctx.uow())

    try:
        handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} deleted.")
