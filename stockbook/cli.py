"""Command-line interface for day-to-day inventory operations."""

import json
import sys
from typing import Optional

import click

from .services.catalog_search import recent_sales, search_categories, search_products, search_sales
from .services.inventory_service import InventoryService
from .storage.json_store import JSONFileStore
from .utils.config import get_config
from .utils.exceptions import BaseAppException, InsufficientStockError


def _service(ctx: click.Context) -> InventoryService:
    """Create the inventory service once per invocation."""
    obj = ctx.ensure_object(dict)
    if "service" not in obj:
        data_dir = obj.get("data_dir")
        store = JSONFileStore(data_dir, indent=get_config().storage.indent) if data_dir else None
        try:
            obj["service"] = InventoryService(store=store)
        except BaseAppException as e:
            _fail(e.message)
    return obj["service"]


def _fail(message: str) -> None:
    click.echo(click.style(f"✗ {message}", fg="red"), err=True)
    sys.exit(1)


def _money(value: Optional[float]) -> str:
    return "-" if value is None else f"${value:.2f}"


@click.group()
@click.version_option(version="1.0.0")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding the JSON data files (overrides config)"
)
@click.pass_context
def cli(ctx: click.Context, data_dir: Optional[str]):
    """
    Stockbook inventory CLI.

    Track products, categories, stock intake and sales.
    """
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir


# ------------------------------------------------------------------
# Products
# ------------------------------------------------------------------

@cli.group()
def product():
    """Manage products."""
    pass


@product.command("add")
@click.argument("name")
@click.option("--category", default="", help="Category name")
@click.option("--unit", default="piece", show_default=True, help="Unit of measure")
@click.option("--price", type=float, required=True, help="Selling price per unit")
@click.pass_context
def product_add(ctx, name: str, category: str, unit: str, price: float):
    """Create a product with zero stock."""
    try:
        created = _service(ctx).create_product(name, category, unit, price)
    except BaseAppException as e:
        _fail(e.message)

    click.echo(click.style(f"✓ Created product {created.name}", fg="green"))
    click.echo(f"ID: {created.id}")


@product.command("list")
@click.option("--search", "term", default="", help="Match name or category")
@click.option("--category", default="", help="Only this category")
@click.pass_context
def product_list(ctx, term: str, category: str):
    """List products."""
    products = search_products(_service(ctx).products, term, category)

    if not products:
        click.echo("No products found")
        return

    for p in products:
        stock = f"{p.stock} {p.unit}"
        line = f"{p.id}  {p.name:<24} {p.category:<16} {stock:>12}  price {_money(p.price)}  cost {_money(p.purchase_price)}"
        click.echo(click.style(line, fg="red") if p.stock == 0 else line)


@product.command("update")
@click.argument("product_id")
@click.option("--name", default=None)
@click.option("--category", default=None)
@click.option("--unit", default=None)
@click.option("--price", type=float, default=None)
@click.pass_context
def product_update(ctx, product_id: str, **fields):
    """Change a product's name, category, unit or price."""
    updates = {k: v for k, v in fields.items() if v is not None}
    if not updates:
        _fail("Nothing to update")

    try:
        updated = _service(ctx).update_product(product_id, **updates)
    except BaseAppException as e:
        _fail(e.message)

    if updated is None:
        _fail(f"Product not found: {product_id}")
    click.echo(click.style(f"✓ Updated product {updated.name}", fg="green"))


@product.command("delete")
@click.argument("product_id")
@click.pass_context
def product_delete(ctx, product_id: str):
    """Delete a product. Its stock and sales history is kept."""
    try:
        deleted = _service(ctx).delete_product(product_id)
    except BaseAppException as e:
        _fail(e.message)

    if not deleted:
        _fail(f"Product not found: {product_id}")
    click.echo(click.style("✓ Product deleted", fg="green"))


# ------------------------------------------------------------------
# Categories
# ------------------------------------------------------------------

@cli.group()
def category():
    """Manage categories."""
    pass


@category.command("add")
@click.argument("name")
@click.option("--description", default=None)
@click.pass_context
def category_add(ctx, name: str, description: Optional[str]):
    """Create a category."""
    try:
        created = _service(ctx).create_category(name, description)
    except BaseAppException as e:
        _fail(e.message)

    click.echo(click.style(f"✓ Created category {created.name}", fg="green"))
    click.echo(f"ID: {created.id}")


@category.command("list")
@click.option("--search", "term", default="", help="Match name or description")
@click.pass_context
def category_list(ctx, term: str):
    """List categories."""
    categories = search_categories(_service(ctx).categories, term)

    if not categories:
        click.echo("No categories found")
        return

    for c in categories:
        click.echo(f"{c.id}  {c.name:<20} {c.description or ''}")


@category.command("update")
@click.argument("category_id")
@click.option("--name", default=None)
@click.option("--description", default=None)
@click.pass_context
def category_update(ctx, category_id: str, **fields):
    """Rename a category or change its description."""
    updates = {k: v for k, v in fields.items() if v is not None}
    if not updates:
        _fail("Nothing to update")

    try:
        updated = _service(ctx).update_category(category_id, **updates)
    except BaseAppException as e:
        _fail(e.message)

    if updated is None:
        _fail(f"Category not found: {category_id}")
    click.echo(click.style(f"✓ Updated category {updated.name}", fg="green"))


@category.command("delete")
@click.argument("category_id")
@click.pass_context
def category_delete(ctx, category_id: str):
    """Delete a category. Products keep their category name."""
    try:
        deleted = _service(ctx).delete_category(category_id)
    except BaseAppException as e:
        _fail(e.message)

    if not deleted:
        _fail(f"Category not found: {category_id}")
    click.echo(click.style("✓ Category deleted", fg="green"))


# ------------------------------------------------------------------
# Stock
# ------------------------------------------------------------------

@cli.group()
def stock():
    """Receive stock and view intake history."""
    pass


@stock.command("add")
@click.argument("product_id")
@click.argument("quantity", type=int)
@click.argument("purchase_price", type=float)
@click.pass_context
def stock_add(ctx, product_id: str, quantity: int, purchase_price: float):
    """
    Receive stock for a product.

    QUANTITY: Units received
    PURCHASE_PRICE: Cost per unit
    """
    service = _service(ctx)
    try:
        entry = service.add_stock(product_id, quantity, purchase_price)
    except BaseAppException as e:
        _fail(e.message)

    updated = service.get_product(product_id)
    click.echo(click.style(f"✓ Received {entry.quantity} {updated.unit} of {updated.name}", fg="green"))
    click.echo(f"Total cost:     {_money(entry.total_cost)}")
    click.echo(f"Stock now:      {updated.stock}")
    click.echo(f"Average cost:   {_money(updated.purchase_price)}")


@stock.command("history")
@click.option("--product-id", default=None, help="Only entries for this product")
@click.pass_context
def stock_history(ctx, product_id: Optional[str]):
    """List stock intake entries."""
    service = _service(ctx)
    entries = [e for e in service.stock_entries if not product_id or e.product_id == product_id]

    if not entries:
        click.echo("No stock entries")
        return

    for e in entries:
        product = service.get_product(e.product_id)
        name = product.name if product else f"(deleted {e.product_id})"
        click.echo(
            f"{e.created_at:%Y-%m-%d}  {name:<24} +{e.quantity:<6} "
            f"@ {_money(e.purchase_price)}  = {_money(e.total_cost)}"
        )


# ------------------------------------------------------------------
# Sales
# ------------------------------------------------------------------

@cli.group()
def sale():
    """Record and list sales."""
    pass


@sale.command("record")
@click.argument("product_id")
@click.argument("quantity", type=int)
@click.argument("selling_price", type=float)
@click.pass_context
def sale_record(ctx, product_id: str, quantity: int, selling_price: float):
    """
    Record a sale.

    QUANTITY: Units sold
    SELLING_PRICE: Price per unit
    """
    try:
        recorded = _service(ctx).record_sale(product_id, quantity, selling_price)
    except InsufficientStockError as e:
        _fail(f"{e.message} (available: {e.details['available']}, requested: {e.details['requested']})")
    except BaseAppException as e:
        _fail(e.message)

    click.echo(click.style(f"✓ Sold {recorded.quantity} x {recorded.product_name}", fg="green", bold=True))
    click.echo(f"Revenue:        {_money(recorded.total_revenue)}")
    click.echo(click.style(f"Profit:         {_money(recorded.profit)}", fg="red" if recorded.profit < 0 else None))


@sale.command("list")
@click.option("--search", "term", default="", help="Match product name or category")
@click.option("--category", default="", help="Only this category")
@click.option("--recent", type=int, default=None, help="Show only the N most recent sales")
@click.pass_context
def sale_list(ctx, term: str, category: str, recent: Optional[int]):
    """List sales."""
    service = _service(ctx)
    sales = search_sales(service.sales, service.products, term, category)
    if recent is not None:
        sales = recent_sales(sales, recent)

    if not sales:
        click.echo("No sales found")
        return

    for s in sales:
        click.echo(
            f"{s.created_at:%Y-%m-%d}  {s.product_name:<24} {s.quantity:>5} @ {_money(s.selling_price)}"
            f"  revenue {_money(s.total_revenue)}  profit {_money(s.profit)}"
        )


# ------------------------------------------------------------------
# Dashboard
# ------------------------------------------------------------------

@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
@click.pass_context
def summary(ctx, as_json: bool):
    """Show dashboard figures and low-stock products."""
    result = _service(ctx).get_summary()

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.echo("Inventory Summary")
    click.echo("─" * 60)
    click.echo(result.get_report())
    click.echo("─" * 60)


@cli.command()
def config_info():
    """Display current configuration settings."""
    try:
        config = get_config()

        click.echo("Configuration Settings:")
        click.echo("=" * 60)
        click.echo()

        click.echo("Environment:")
        click.echo(f"  Environment:     {config.env.environment}")
        click.echo(f"  Log level:       {config.logging.level}")
        click.echo()

        click.echo("Storage:")
        click.echo(f"  Backend:         {config.storage.backend}")
        click.echo(f"  Data dir:        {config.storage.data_dir}")
        click.echo()

        click.echo("Server:")
        click.echo(f"  Host:            {config.server.host}")
        click.echo(f"  Port:            {config.server.port}")
        click.echo()

    except Exception as e:
        click.echo(click.style(f"✗ Error loading config: {str(e)}", fg="red"), err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
