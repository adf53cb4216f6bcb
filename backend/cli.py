"""
Salon Ops CLI.

Inspect the permission tables, explain what a principal can do, and seed
the development database.
"""

import sys
from pathlib import Path
from typing import Optional

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import typer
from rich.console import Console
from rich.table import Table

from shared.config.constants import Role
from shared.config.settings import settings

app = typer.Typer(
    name="salon-ops",
    help="Salon Ops access-control CLI",
    add_completion=False,
)
console = Console()


def _registry():
    from rest_api.services.permissions import PermissionRegistry

    return PermissionRegistry.default(settings.permission_registry_version)


def _format_permissions(permissions) -> str:
    if permissions.is_wildcard:
        return "[bold magenta]all[/bold magenta]"
    if permissions.is_empty:
        return "[dim]none[/dim]"
    return ", ".join(permissions.sorted_tokens())


# =============================================================================
# Permission Table Commands
# =============================================================================

@app.command()
def role_permissions():
    """Show the built-in permissions for each coarse role."""
    registry = _registry()

    table = Table(title=f"Role permissions ({registry.label})")
    table.add_column("Role", style="cyan", no_wrap=True)
    table.add_column("Permissions", style="green")

    for role in Role:
        permissions = registry.permissions_for_role(role)
        if permissions is None:
            table.add_row(role.value, "[dim]not in table[/dim]")
        else:
            table.add_row(role.value, _format_permissions(permissions))

    console.print(table)


@app.command()
def job_roles():
    """Show the permissions attached to each known job role."""
    registry = _registry()

    table = Table(title=f"Job-role permissions ({registry.label})")
    table.add_column("Job role", style="cyan", no_wrap=True)
    table.add_column("Count", style="yellow", justify="right")
    table.add_column("Permissions", style="green")

    for job_role in registry.known_job_roles():
        permissions = registry.permissions_for_job_role(job_role)
        count = "*" if permissions.is_wildcard else str(len(permissions))
        table.add_row(job_role, count, _format_permissions(permissions))

    console.print(table)


@app.command()
def explain(
    principal_id: str = typer.Option("cli-user", "--id", help="Principal id"),
    role: str = typer.Option(..., "--role", "-r", help="ADMIN, MANAGER, STAFF, CLIENT, RECEPTIONIST"),
    job_role: Optional[str] = typer.Option(None, "--job-role", "-j", help="Job role"),
    locations: str = typer.Option("", "--locations", "-l", help="Comma-separated grant or 'all'"),
    known: Optional[str] = typer.Option(
        None,
        "--known",
        help="Comma-separated active location ids (default: read from the database)",
    ),
):
    """Resolve a principal's permissions, grant and landing page."""
    from rest_api.services.permissions import (
        AccessGate,
        InMemoryLocationRegistry,
        LocationGrant,
        Principal,
    )

    try:
        principal = Principal(
            id=principal_id,
            role=role,
            job_role=job_role,
            location_grant=LocationGrant.parse(locations.split(",")),
        )
    except ValueError as e:
        console.print(f"[red]✗ Invalid principal: {e}[/red]")
        raise typer.Exit(1)

    if known is not None:
        location_registry = InMemoryLocationRegistry(
            [loc.strip() for loc in known.split(",") if loc.strip()]
        )
    else:
        from shared.infrastructure.db import SessionLocal
        from rest_api.repositories import DbLocationRegistry

        location_registry = DbLocationRegistry(SessionLocal)

    gate = AccessGate.build(location_registry, registry=_registry())
    permissions = gate.permissions(principal)
    grant = gate.canonical_grant(principal)

    from rest_api.services.permissions import accessible_routes, first_accessible_page

    table = Table(title=f"Principal {principal.id}")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("Role", principal.role.value)
    table.add_row("Job role", principal.job_role or "-")
    table.add_row("Permissions", _format_permissions(permissions))
    table.add_row("Grant", ", ".join(grant.to_wire()) or "[dim]empty[/dim]")
    table.add_row(
        "Selectable",
        ", ".join(str(ref) for ref in gate.grants.selectable_locations(principal)) or "-",
    )
    default = gate.grants.default_location(principal)
    table.add_row("Default location", str(default) if default else "-")
    table.add_row("Routes", ", ".join(accessible_routes(permissions)) or "-")
    table.add_row("Landing page", first_accessible_page(permissions))

    console.print(table)


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_seed(
    force: bool = typer.Option(False, "--force", "-f", help="Allow seeding in production"),
):
    """Create tables and seed the database with demo data."""
    console.print(f"[blue]Seeding database for: {settings.environment}[/blue]")

    if settings.environment == "production" and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    from sqlalchemy.exc import SQLAlchemyError

    from shared.infrastructure.db import engine, get_db_context
    from rest_api.models import Base
    from rest_api.seed import seed

    try:
        Base.metadata.create_all(bind=engine)
        with get_db_context() as db:
            seed(db)
        console.print("[green]✓ Seeding complete[/green]")
    except SQLAlchemyError as e:
        console.print(f"[red]✗ Seeding failed: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def version():
    """Show version information."""
    from rest_api.main import API_VERSION

    table = Table(title="Salon Ops Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", API_VERSION)
    table.add_row("Permission registry", _registry().label)
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
