"""schemasnap CLI - Main entry point."""

import logging

import typer
from rich.console import Console
from .commands import extract, runs
from .config import settings

app = typer.Typer(
    name="schemasnap",
    help="Extract canonical, comparable schema scripts from MySQL",
    add_completion=False,
)

# Add subcommands
app.add_typer(extract.app, name="extract")
app.add_typer(runs.app, name="runs")

console = Console()


@app.command()
def config():
    """Show current configuration."""
    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  MySQL host: {settings.mysql_host}:{settings.mysql_port}")
    console.print(f"  MySQL user: {settings.mysql_user}")
    console.print(f"  Password configured: {'Yes' if settings.mysql_password else 'No'}")
    console.print(f"  Database: {settings.mysql_database or 'Not set'}")
    console.print(f"  Charset: {settings.mysql_charset}")
    console.print(f"  Run logging: {'Enabled' if settings.run_logging_enabled else 'Disabled'}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """
    schemasnap - Extract canonical schema scripts from a MySQL database.

    Scripts are stripped of definers, AUTO_INCREMENT counters, charsets and
    other session details so two databases can be compared line by line.

    Examples:

        schemasnap extract list table --exclude audit_log

        schemasnap extract script view active_users

        schemasnap extract dump --output ./snapshot

        schemasnap runs list
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    app()
