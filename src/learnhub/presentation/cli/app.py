"""LearnHub CLI application using Typer.

This module provides command-line utilities for the LearnHub backend:
secret generation for deployment configuration, database setup and
running the API server.
"""

import asyncio
import secrets

import typer
from rich.console import Console

app = typer.Typer(
    name="learnhub",
    help="LearnHub identity service CLI",
    no_args_is_help=True,
)
console = Console()


# Create secrets subcommand group
secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)

db_app = typer.Typer(
    name="db",
    help="Database utilities",
    no_args_is_help=True,
)
app.add_typer(db_app)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate secure secrets for LearnHub configuration.

    Generates three required secrets:
    - JWT_SECRET_KEY: Secret for signing JWT authentication tokens
    - SESSION_SECRET_KEY: Secret for signing the session cookie
    - POSTGRES_PASSWORD: Database password

    Copy the output to your .env file.
    """
    console.print("\n[bold green]LearnHub Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(
        "\nGenerated secrets for your [bold].env[/bold] configuration file:\n"
    )

    # JWT secret (64 bytes, strong for HS256)
    jwt_secret = secrets.token_urlsafe(64)
    console.print(f"[cyan]JWT_SECRET_KEY[/cyan]={jwt_secret}")

    session_secret = secrets.token_urlsafe(64)
    console.print(f"[cyan]SESSION_SECRET_KEY[/cyan]={session_secret}")

    # Database password (32 bytes)
    db_password = secrets.token_urlsafe(32)
    console.print(f"[cyan]POSTGRES_PASSWORD[/cyan]={db_password}")

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep these secrets secure and never commit them "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]Copy the above values to your config/.env (Docker) or "
        "config/.env.dev (local) file.[/dim]\n"
    )


@db_app.command("init")
def init_database() -> None:
    """Create missing tables in the configured database."""
    from learnhub.presentation.api.dependencies import create_tables, get_engine

    async def _run() -> None:
        engine = get_engine()
        try:
            await create_tables(engine)
        finally:
            await engine.dispose()

    asyncio.run(_run())
    console.print("[green]Database schema is up to date.[/green]")


@db_app.command("stats")
def database_stats() -> None:
    """Show how many user accounts are registered."""
    from learnhub.presentation.api.dependencies import get_engine, get_session_maker
    from learnhub_identity.infrastructure.persistence.sqlalchemy import (
        UserRepositorySQLAlchemy,
    )

    async def _run() -> int:
        try:
            async with get_session_maker()() as session:
                return await UserRepositorySQLAlchemy(session).count()
        finally:
            await get_engine().dispose()

    count = asyncio.run(_run())
    console.print(f"Registered users: [bold]{count}[/bold]")


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, help="Bind address (default: API_HOST)"),
    port: int | None = typer.Option(None, help="Port (default: API_PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    from learnhub_config.settings import get_settings

    settings = get_settings()
    uvicorn.run(
        "learnhub.presentation.api.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
