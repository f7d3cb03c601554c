# Overview: Flask CLI commands for seeding the in-memory inventory and printing the demo report.

# backend/smartstock/cli.py
# Commands Legend (run from the backend directory):
# - flask --app smartstock inventory seed
#   Load the demo catalog and print what was created.
# - flask --app smartstock inventory report
#   Print the text report for the current inventory (seeds first when empty).
# - flask --app smartstock inventory demo
#   Seed, print the report, run a few stock operations, print the result.
#
# State lives in memory: every CLI invocation starts from an empty inventory
# unless SMARTSTOCK_SEED_DEMO_DATA is set.

import click
from flask.cli import with_appcontext

from .extensions import inventory
from .services.demo_service import run_demo_operations, seed_demo_data
from .services.reporting_service import render_text_report


@click.group('inventory')
def inventory_group():
    """In-memory inventory demo commands."""


def _ensure_seeded(ctx) -> None:
    if len(ctx.registry) == 0:
        seed_demo_data(ctx)


@inventory_group.command('seed')
@with_appcontext
def seed_inventory():
    """Load the demo catalog."""
    ctx = inventory.context
    if len(ctx.registry) > 0:
        click.echo(f"SKIP Inventory already holds {len(ctx.registry)} products")
        return

    products = seed_demo_data(ctx)
    for p in products:
        current = ctx.registry.get(p.id)
        click.echo(f"PASS Created {current.name} (ID: {current.id}, stock: {current.current_stock})")
    click.echo(f"PASS Recorded {len(ctx.ledger)} transactions")


@inventory_group.command('report')
@with_appcontext
def print_report():
    """Print the inventory report."""
    ctx = inventory.context
    _ensure_seeded(ctx)
    click.echo(render_text_report(ctx))


@inventory_group.command('demo')
@with_appcontext
def run_demo():
    """Seed, report, then run sample stock operations."""
    ctx = inventory.context
    _ensure_seeded(ctx)
    click.echo(render_text_report(ctx))

    click.echo("")
    click.echo("=== TRANSACTION DEMO ===")
    for label, ok in run_demo_operations(ctx):
        click.echo(f"{label}: {'Success' if ok else 'Failed'}")

    click.echo("")
    click.echo("Updated inventory:")
    for p in ctx.registry.all():
        click.echo(f"  {p.name}: {p.current_stock} units ({p.stock_status})")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(inventory_group)
