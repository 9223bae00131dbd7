"""Command-line interface for the GAC referrers API."""

from datetime import timedelta
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from gac.api.main import initialize_database
from gac.auth.gate import Role
from gac.auth.tokens import create_access_token
from gac.logging_config import configure_logging, get_logger
from gac.storage.db import db
from gac.storage.repo import ReferrerTypeStore

configure_logging()
logger = get_logger(__name__)

app = typer.Typer(
    name="gac",
    help="GAC referrers API administration",
    no_args_is_help=True,
)

console = Console()


@app.command("init")
def init_database() -> None:
    """Create tables and seed the default referrer types."""
    console.print("[bold blue]Initializing database...[/bold blue]")
    initialize_database(db)
    console.print("[bold green]✓[/bold green] Database initialized successfully")


@app.command("seed-types")
def seed_types() -> None:
    """Seed the default referrer types if none exist."""
    with db.session() as session:
        created = ReferrerTypeStore(session).ensure_defaults()

    if created:
        console.print(f"[bold green]✓[/bold green] Seeded {created} referrer types")
    else:
        console.print("[yellow]Referrer types already present, nothing to do[/yellow]")


@app.command("list-types")
def list_types() -> None:
    """List referrer types with their usage."""
    with db.session() as session:
        store = ReferrerTypeStore(session)
        rows = [
            (t.id, t.name, t.description, store.count_referrers(t.id))
            for t in store.list_all()
        ]

    if not rows:
        console.print("[yellow]No referrer types found[/yellow]")
        return

    table = Table(title="Referrer Types")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Description")
    table.add_column("Referrers", justify="right")

    for type_id, name, description, count in rows:
        table.add_row(str(type_id), name, description or "", str(count))

    console.print(table)


@app.command("issue-token")
def issue_token(
    subject: Annotated[str, typer.Option("--subject", "-s", help="User name the token is issued to")],
    role: Annotated[Role, typer.Option("--role", "-r", help="Caller role")] = Role.STAFF,
    hours: Annotated[int, typer.Option("--hours", help="Token lifetime in hours")] = 8,
) -> None:
    """Print a bearer token for local testing."""
    token = create_access_token(subject, role.value, expires_delta=timedelta(hours=hours))
    logger.info("token_issued", subject=subject, role=role.value, hours=hours)
    console.print(token)


if __name__ == "__main__":
    app()
