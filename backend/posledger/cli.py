# Overview: Flask CLI command groups for ledger inspection and maintenance.

# backend/posledger/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to posledger (PowerShell: $env:FLASK_APP="posledger").
# - Use: python -m flask <group> <command> [options]
#
# Ledger inspection/repair:
# - python -m flask ledger snapshot
#   Print the four ledger collections as JSON.
# - python -m flask ledger flush
#   Rewrite every blob from the in-memory state.
# - python -m flask ledger seed --force
#   DEV/TEST only: wipe sales, movements and the drawer session and restore the demo catalog.
#
# Reports:
# - python -m flask reports summary
#   Dashboard numbers: revenue today/month/total, drawer state, low stock.

import json

import click
from flask.cli import with_appcontext

from .extensions import get_ledger
from .services import reporting_service


@click.group('ledger')
def ledger_group():
    """Ledger inspection and repair commands."""


@ledger_group.command('snapshot')
@with_appcontext
def snapshot():
    """Print the current ledger state as JSON."""
    click.echo(json.dumps(get_ledger().snapshot(), indent=2, ensure_ascii=False))


@ledger_group.command('flush')
@with_appcontext
def flush():
    """Rewrite all four blobs from memory."""
    get_ledger().flush()
    click.echo("PASS Ledger flushed to storage")


@ledger_group.command('seed')
@click.option('--force', is_flag=True, help='Required: confirms that all ledger data will be discarded')
@with_appcontext
def seed(force):
    """Reset the ledger to the demo catalog with no sales or movements."""
    if not force:
        click.echo("FAIL Refusing to reset without --force")
        raise SystemExit(1)

    ledger = get_ledger()
    ledger.reset(seed_catalog=True)
    click.echo(f"PASS Ledger reset with {len(ledger.products())} demo products")


@click.group('reports')
def reports_group():
    """Read-only report commands."""


@reports_group.command('summary')
@click.option('--threshold', default=reporting_service.DEFAULT_LOW_STOCK_THRESHOLD, show_default=True,
              help='Low stock threshold')
@with_appcontext
def summary(threshold):
    """Print the dashboard summary."""
    ledger = get_ledger()
    data = reporting_service.dashboard_summary(ledger, low_stock_threshold=threshold)

    click.echo(f"Today:   {data['today_sales_count']} sales, ${data['today_revenue_cents'] / 100:.2f}")
    click.echo(f"Month:   {data['month_sales_count']} sales, ${data['month_revenue_cents'] / 100:.2f}")
    click.echo(f"Total:   ${data['total_revenue_cents'] / 100:.2f}")
    if data["register_open"]:
        click.echo(f"Drawer:  OPEN (${data['register_current_amount_cents'] / 100:.2f})")
    else:
        click.echo("Drawer:  CLOSED")
    click.echo(f"Stock:   {data['low_stock_count']} low, {data['out_of_stock_count']} out")

    for row in data["top_selling_products"]:
        click.echo(f"  - {row['name']}: {row['total_quantity']} sold, ${row['total_revenue_cents'] / 100:.2f}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(ledger_group)
    app.cli.add_command(reports_group)
