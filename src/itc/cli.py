"""CLI interface for iTunes Connect using Typer."""

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from itc.client import ITunesConnectClient
from itc.config import ConfigLoader
from itc.exceptions import ITCError
from itc.models import CreateTester, Paging
from itc.session import SessionManager
from itc.version import version_string

app = typer.Typer(help="Control your iTunes Connect account.", no_args_is_help=True)
testflight_app = typer.Typer(help="Commands to control TestFlight.", no_args_is_help=True)
testers_app = typer.Typer(help="Manage TestFlight testers.", no_args_is_help=True)
groups_app = typer.Typer(help="Manage TestFlight tester groups.", no_args_is_help=True)

app.add_typer(testflight_app, name="testflight")
testflight_app.add_typer(testers_app, name="testers")
testflight_app.add_typer(groups_app, name="groups")

console = Console()


@dataclass
class CLIState:
    """Options collected from the command groups for the invoked command."""

    apple_id: Optional[str] = None
    apple_id_password: Optional[str] = None
    config_path: Optional[Path] = None
    verbose: bool = False
    json_output: bool = False
    provider_id: int = 0
    app_id: int = 0
    group_id: Optional[str] = None


def _error(message: str) -> NoReturn:
    console.print(f"[red]Error: {escape(message)}[/red]", soft_wrap=True)
    raise typer.Exit(1)


def _handle_error(e: Exception) -> NoReturn:
    """Print an error in a user-friendly way and exit."""
    if isinstance(e, ITCError):
        _error(e.message)
    _error(str(e))


def _setup_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    logging.getLogger("itc").setLevel(logging.DEBUG)


def _get_client(state: CLIState) -> ITunesConnectClient:
    """Load config, apply command-line overrides and sign in."""
    config = ConfigLoader(state.config_path).get_config()
    if state.apple_id:
        config.apple_id = state.apple_id
    if state.apple_id_password:
        config.apple_id_password = state.apple_id_password

    if state.verbose:
        console.print(f"Signing in as [bold]{config.apple_id}[/bold]...")
    return SessionManager(config).get_client()


def _print_json(items: list[Any]) -> None:
    console.print_json(data=[asdict(item) for item in items])


@app.callback()
def main(
    ctx: typer.Context,
    apple_id: Optional[str] = typer.Option(None, "--appleID", help="Your Apple ID"),
    apple_id_password: Optional[str] = typer.Option(
        None, "--appleIDPassword", help="Your Apple ID password"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Config file (default is ~/.itc.json)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    json_output: bool = typer.Option(False, "--json", help="Print raw JSON instead of tables"),
) -> None:
    """Control your iTunes Connect account."""
    _setup_logging(verbose)
    ctx.obj = CLIState(
        apple_id=apple_id,
        apple_id_password=apple_id_password,
        config_path=config,
        verbose=verbose,
        json_output=json_output,
    )


@app.command()
def version() -> None:
    """Print the version number of itc."""
    console.print(version_string())


@app.command()
def providers(ctx: typer.Context) -> None:
    """List the providers available to your Apple ID."""
    state: CLIState = ctx.obj

    try:
        with _get_client(state) as client:
            result = client.providers()
    except (ITCError, ValueError) as e:
        _handle_error(e)

    if state.json_output:
        _print_json(result)
        return

    if not result:
        console.print("[yellow]No providers found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Content Types")
    for provider in result:
        table.add_row(str(provider.provider_id), provider.name, ", ".join(provider.content_types))
    console.print(table)


@app.command()
def details(ctx: typer.Context) -> None:
    """Show the apps in your account."""
    state: CLIState = ctx.obj

    try:
        with _get_client(state) as client:
            summaries = client.account_details()
    except (ITCError, ValueError) as e:
        _handle_error(e)

    if state.json_output:
        _print_json(summaries)
        return

    if not summaries:
        console.print("[yellow]No apps found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("App ID", style="cyan")
    table.add_column("Name")
    table.add_column("Bundle ID")
    table.add_column("Vendor ID")
    table.add_column("Type")
    for summary in summaries:
        table.add_row(
            summary.adam_id,
            summary.name,
            summary.bundle_id,
            summary.vendor_id,
            summary.app_type,
        )
    console.print(table)


@testflight_app.callback()
def testflight(
    ctx: typer.Context,
    provider_id: int = typer.Option(..., "--providerID", "-p", help="Provider ID"),
    app_id: int = typer.Option(..., "--appID", "-a", help="App ID"),
    group_id: Optional[str] = typer.Option(None, "--groupID", "-g", help="Group ID"),
) -> None:
    """Commands to control TestFlight."""
    state: CLIState = ctx.obj
    state.provider_id = provider_id
    state.app_id = app_id
    state.group_id = group_id


def _paging(limit: Optional[int], sort: Optional[str], order: Optional[str]) -> Optional[Paging]:
    if limit is None and sort is None and order is None:
        return None
    paging = Paging()
    if limit is not None:
        paging.limit = limit
    if sort is not None:
        paging.sort = sort
    if order is not None:
        paging.order = order
    return paging


@testers_app.command("list")
def testers_list(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Maximum number of testers (default 50)"),
    sort: Optional[str] = typer.Option(None, "--sort", help="Sort field (default email)"),
    order: Optional[str] = typer.Option(None, "--order", help="Sort order, asc or desc (default asc)"),
) -> None:
    """List testers."""
    state: CLIState = ctx.obj

    try:
        with _get_client(state) as client:
            testers = client.testers_list(
                state.provider_id, state.app_id, _paging(limit, sort, order)
            )
    except (ITCError, ValueError) as e:
        _handle_error(e)

    if state.json_output:
        _print_json(testers)
        return

    if not testers:
        console.print("[yellow]No testers found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan")
    table.add_column("Email")
    table.add_column("Name")
    table.add_column("Status")
    table.add_column("Installs", justify="right")
    table.add_column("Crashes", justify="right")
    for tester in testers:
        table.add_row(
            tester.id,
            tester.email,
            f"{tester.first_name} {tester.last_name}".strip(),
            tester.status,
            str(tester.install_count),
            str(tester.crash_count),
        )
    console.print(table)


@testers_app.command("create")
def testers_create(
    ctx: typer.Context,
    email: str = typer.Option(..., "--email", help="Tester email"),
    first_name: str = typer.Option(..., "--first-name", help="Tester first name"),
    last_name: str = typer.Option(..., "--last-name", help="Tester last name"),
) -> None:
    """Create a new tester."""
    state: CLIState = ctx.obj
    if not state.group_id:
        _error("--groupID is required to create a tester")

    tester = CreateTester(email=email, first_name=first_name, last_name=last_name)
    try:
        with _get_client(state) as client:
            client.tester_create([tester], state.provider_id, state.app_id, state.group_id)
    except (ITCError, ValueError) as e:
        _handle_error(e)

    console.print(f"[green]Created tester:[/green] {email}")


@testers_app.command("delete")
def testers_delete(
    ctx: typer.Context,
    tester_id: str = typer.Argument(..., help="ID of the tester to delete"),
) -> None:
    """Delete a tester."""
    state: CLIState = ctx.obj

    try:
        with _get_client(state) as client:
            client.tester_delete(state.provider_id, state.app_id, tester_id)
    except (ITCError, ValueError) as e:
        _handle_error(e)

    console.print(f"[green]Deleted tester:[/green] {tester_id}")


@groups_app.command("list")
def groups_list(ctx: typer.Context) -> None:
    """List tester groups."""
    state: CLIState = ctx.obj

    try:
        with _get_client(state) as client:
            groups = client.tester_groups(state.provider_id, state.app_id)
    except (ITCError, ValueError) as e:
        _handle_error(e)

    if state.json_output:
        _print_json(groups)
        return

    if not groups:
        console.print("[yellow]No tester groups found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Active")
    table.add_column("Internal")
    table.add_column("Default External")
    for group in groups:
        table.add_row(
            group.id,
            group.name,
            "yes" if group.is_active else "no",
            "yes" if group.is_internal_group else "no",
            "yes" if group.is_default_external_group else "no",
        )
    console.print(table)


if __name__ == "__main__":
    app()
