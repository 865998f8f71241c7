"""
POS engine CLI.

Command-line interface for setup and for back-office views of the engine.
"""

import sys
from datetime import date
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from pos_api.models import Base
from pos_api.repositories import SqlCollectionStore
from pos_api.services.domain import FinanceService, KitchenService, KTVService, format_duration
from pos_shared.config.logging import setup_logging
from pos_shared.config.settings import get_settings
from pos_shared.infrastructure.db import engine, get_db_context
from pos_shared.utils.exceptions import AppException
from pos_shared.utils.money import format_cents

app = typer.Typer(
    name="pos",
    help="Hotel / restaurant / KTV POS engine CLI",
    add_completion=False,
)
console = Console()


def _money(amount_cents: int) -> str:
    return format_cents(amount_cents, get_settings().currency_symbol)


@app.callback()
def main() -> None:
    setup_logging()


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def init_db():
    """Create the collection store tables."""
    Base.metadata.create_all(bind=engine)
    console.print("[green]✓ Tables created[/green]")


@app.command()
def seed(
    force: bool = typer.Option(False, "--force", "-f", help="Allow seeding in production"),
):
    """Seed rooms and the starter menu (idempotent)."""
    from pos_api.seed import seed as seed_database

    settings = get_settings()
    if settings.environment == "production" and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    with get_db_context() as db:
        try:
            seed_database(db)
        except AppException as e:
            console.print(f"[red]✗ Seeding failed: {e}[/red]")
            raise typer.Exit(1)
    console.print("[green]✓ Seed complete[/green]")


# =============================================================================
# Kitchen Commands
# =============================================================================

@app.command()
def kitchen_queue():
    """Show pending and cooking orders, oldest first."""
    with get_db_context() as db:
        queue = KitchenService(SqlCollectionStore(db)).queue()

    for title, tickets in (("Pending", queue.pending), ("Cooking", queue.cooking)):
        table = Table(title=f"{title} ({len(tickets)})")
        table.add_column("Order", style="cyan")
        table.add_column("Table")
        table.add_column("Source")
        table.add_column("Items", justify="right")
        table.add_column("Age", justify="right")

        for ticket in tickets:
            age_style = "red" if ticket.is_overdue else "green"
            table.add_row(
                ticket.order.id,
                ticket.order.table_identifier,
                ticket.order.source.value,
                str(ticket.order.item_count),
                f"[{age_style}]{ticket.age_minutes} min[/{age_style}]",
            )
        console.print(table)


# =============================================================================
# KTV Commands
# =============================================================================

@app.command()
def ktv_bill(
    room_id: str = typer.Argument(..., help="KTV room id, e.g. KTV-VIP"),
):
    """Preview the bill of a running KTV session."""
    with get_db_context() as db:
        try:
            bill = KTVService(SqlCollectionStore(db)).preview_bill(room_id)
        except AppException as e:
            console.print(f"[red]✗ {e}[/red]")
            raise typer.Exit(1)

    table = Table(title=f"KTV {bill.room_id} - {bill.guest_name}")
    table.add_column("Line", style="cyan")
    table.add_column("Amount", style="green", justify="right")

    table.add_row("Elapsed", format_duration(bill.start_time, bill.billed_at))
    table.add_row(
        f"Room ({bill.chargeable_hours}h × {_money(bill.hourly_rate_cents)})",
        _money(bill.room_fee_cents),
    )
    table.add_row("Items", _money(bill.items_fee_cents))
    if bill.service_charge_cents:
        table.add_row("Service charge", _money(bill.service_charge_cents))
    table.add_row("[bold]Total[/bold]", f"[bold]{_money(bill.total_cents)}[/bold]")
    console.print(table)


# =============================================================================
# Finance Commands
# =============================================================================

@app.command()
def finance_summary(
    day: Optional[str] = typer.Option(None, help="Day to report (YYYY-MM-DD); all days if omitted"),
):
    """Revenue of non-cancelled orders by payment method and source."""
    try:
        report_day = date.fromisoformat(day) if day else None
    except ValueError:
        console.print(f"[red]Invalid day: {day}[/red]")
        raise typer.Exit(1)

    with get_db_context() as db:
        summary = FinanceService(SqlCollectionStore(db)).summary(report_day)

    title = f"Revenue {report_day.isoformat()}" if report_day else "Revenue (all days)"
    table = Table(title=title)
    table.add_column("Breakdown", style="cyan")
    table.add_column("Key")
    table.add_column("Amount", style="green", justify="right")

    for method, amount in sorted(summary.by_method.items()):
        table.add_row("Method", method, _money(amount))
    for source, amount in sorted(summary.by_source.items()):
        table.add_row("Source", source, _money(amount))
    table.add_row("[bold]Total[/bold]", f"{summary.order_count} orders", f"[bold]{_money(summary.total_cents)}[/bold]")
    console.print(table)


# =============================================================================
# Server Commands
# =============================================================================

@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Port (defaults to POS_REST_API_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "pos_api.main:app",
        host=host,
        port=port or get_settings().rest_api_port,
        reload=reload,
    )


@app.command()
def version():
    """Show version information."""
    table = Table(title="POS Engine Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", "0.1.0")
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
