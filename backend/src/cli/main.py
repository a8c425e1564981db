"""Ordre Change CLI - Main entry point."""

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.config import get_settings
from src.order_api.auth_identity import auth_configuration_summary, issue_agent_token

app = typer.Typer(
    name="ordres",
    help="Ordre Change - order API operator CLI",
    no_args_is_help=True,
)

console = Console()


@app.command()
def status() -> None:
    """Show service configuration and auth setup."""
    settings = get_settings()
    auth = auth_configuration_summary()

    console.print(
        Panel(
            f"[bold cyan]{settings.service_name}[/bold cyan]",
            title="System Status",
            border_style="cyan",
        )
    )

    table = Table(border_style="cyan")
    table.add_column("Component", style="bold white")
    table.add_column("Status", justify="center")
    table.add_column("Details", style="dim")

    secret_status = "[green]Configured[/green]" if auth["secret"] else "[red]Missing secret[/red]"
    table.add_row("JWT Verification", secret_status, "HS256")
    table.add_row("JWT Issuer", "[green]Checked[/green]" if auth["issuer"] else "[yellow]Not checked[/yellow]", auth["issuer"] or "N/A")
    table.add_row(
        "JWT Audience",
        "[green]Checked[/green]" if auth["audience"] else "[yellow]Not checked[/yellow]",
        auth["audience"] or "N/A",
    )
    table.add_row("CORS Origins", "[cyan]Set[/cyan]", ", ".join(settings.cors_allow_origins) or "none")
    table.add_row(
        "API Server",
        "[green]Ready[/green]" if not settings.debug else "[yellow]Debug Mode[/yellow]",
        f"{settings.host}:{settings.port}",
    )

    console.print(table)


@app.command()
def token(
    agent_id: int = typer.Option(..., "--agent-id", min=1, help="Agent identifier to embed in the token."),
    ttl: int = typer.Option(3600, "--ttl", min=1, help="Token lifetime in seconds."),
) -> None:
    """Mint a development bearer token for an agent."""
    try:
        value = issue_agent_token(agent_id=agent_id, ttl_seconds=ttl)
    except RuntimeError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(1) from exc
    typer.echo(value)


@app.command()
def server() -> None:
    """Start the FastAPI server."""
    import uvicorn

    settings = get_settings()
    console.print(
        Panel(
            f"[bold cyan]Starting Ordre Change API Server[/bold cyan]\n\n"
            f"[cyan]Host:[/cyan]  {settings.host}\n"
            f"[cyan]Port:[/cyan]  {settings.port}\n"
            f"[cyan]Debug:[/cyan] {settings.debug}",
            title="Server",
            border_style="cyan",
        )
    )
    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    app()
