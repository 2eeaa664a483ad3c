"""CLI for the DeFi portfolio agent."""

import json
import logging
from enum import StrEnum

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.traceback import install

from defi_portfolio_agent.agent import PortfolioAgent, build_agent
from defi_portfolio_agent.config import AgentSettings
from defi_portfolio_agent.core.models import FetchStatus, PortfolioSnapshot
from defi_portfolio_agent.data import get_all_networks
from defi_portfolio_agent.exceptions import ConfigurationError

# Install rich traceback handler
install(show_locals=False)

app = typer.Typer(
    name="defi-portfolio-agent",
    help="Chat-style assistant for token prices, wallet portfolios, and concentration risk",
    add_completion=False,
)

console = Console()


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _load_agent(debug: bool) -> PortfolioAgent:
    """
    Build the agent from environment settings.

    Parameters
    ----------
    debug : bool
        Enable debug logging

    Returns
    -------
    PortfolioAgent
        Wired agent

    Raises
    ------
    typer.Exit
        If the configuration is invalid

    """
    _setup_logging(debug)
    try:
        settings = AgentSettings.from_env()
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if debug:
        console.print(f"[dim]Network: {settings.network_profile.name} (chain {settings.network_profile.chain_id})[/dim]")
    return build_agent(settings)


def _print_status(status: FetchStatus) -> None:
    if status != FetchStatus.OK:
        console.print(f"[yellow]Live data unavailable ({status.value}), showing fallback data[/yellow]")


@app.command()
def price(
    query: str = typer.Argument(..., help="Token name, ticker, or price question"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """
    Get the current price of a token.

    Examples:

        defi-portfolio-agent price btc

        defi-portfolio-agent price "what's the price of solana"
    """
    with _load_agent(debug) as agent:
        response = agent.price(query)

    if format == OutputFormat.JSON:
        _output_json(response.data)
    else:
        console.print(response.text)


@app.command()
def portfolio(
    address: str | None = typer.Option(None, "--address", "-a", help="Wallet address (defaults to WALLET_ADDRESS)"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """
    Show wallet holdings, protocol positions, and risk score.

    Without an address or an Alchemy API key, demo data is shown.
    """
    with _load_agent(debug) as agent:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Fetching wallet balances...", total=None)
            result = agent.portfolio_service.get_portfolio_data(address)

    if format == OutputFormat.JSON:
        _output_json(result.model_dump(mode="json"))
    else:
        _print_status(result.status)
        _output_table(result.value)


@app.command()
def risk(
    address: str | None = typer.Option(None, "--address", "-a", help="Wallet address (defaults to WALLET_ADDRESS)"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """Analyze concentration risk of a wallet."""
    with _load_agent(debug) as agent:
        response = agent.risk(address)

    if format == OutputFormat.JSON:
        _output_json(response.data)
    else:
        console.print(response.text)


@app.command()
def optimize(
    address: str | None = typer.Option(None, "--address", "-a", help="Wallet address (defaults to WALLET_ADDRESS)"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """Suggest rebalancing towards the target allocation."""
    with _load_agent(debug) as agent:
        response = agent.optimize(address)

    if format == OutputFormat.JSON:
        _output_json(response.data)
    else:
        console.print(response.text)


@app.command()
def market(
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """Show global market capitalisation, volume, and dominance."""
    with _load_agent(debug) as agent:
        response = agent.market_overview()

    if format == OutputFormat.JSON:
        _output_json(response.data)
    else:
        console.print(response.text)


@app.command()
def ask(
    text: str = typer.Argument(..., help="Question for the agent"),
    address: str | None = typer.Option(None, "--address", "-a", help="Wallet address for portfolio questions"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """
    Ask the agent a free-form question.

    Examples:

        defi-portfolio-agent ask "what's the price of bitcoin"

        defi-portfolio-agent ask "I'm worried about my portfolio risk"
    """
    with _load_agent(debug) as agent:
        response = agent.handle(text, wallet_address=address)

    if debug:
        console.print(f"[dim]Intent: {response.intent}[/dim]")
    console.print(response.text)


@app.command()
def networks() -> None:
    """List all supported networks."""
    table = Table(title="Supported Networks", show_header=True, header_style="bold magenta")
    table.add_column("Key", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Chain ID", style="blue", justify="right")
    table.add_column("Currency", style="green")
    table.add_column("Type", style="yellow")

    for profile in get_all_networks():
        table.add_row(
            profile.key,
            profile.name,
            str(profile.chain_id),
            profile.native_currency_symbol,
            profile.network_type.value,
        )

    console.print(table)


def _output_table(snapshot: PortfolioSnapshot) -> None:
    """Output a portfolio snapshot as rich tables."""
    if not snapshot.balances and not snapshot.positions:
        console.print("\n[yellow]No holdings found[/yellow]")
        return

    title = "Demo portfolio"
    if snapshot.address:
        title = f"Portfolio for {snapshot.address[:10]}...{snapshot.address[-8:]}"

    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Asset", style="cyan")
    table.add_column("Type", style="yellow")
    table.add_column("Amount", style="white", justify="right")
    table.add_column("Price", style="white", justify="right")
    table.add_column("USD Value", style="bold green", justify="right")

    for balance in snapshot.balances:
        price_str = f"${balance.price_usd:,.2f}" if balance.price_usd else "-"
        table.add_row(
            balance.symbol,
            "wallet",
            f"{balance.quantity:,.4f}",
            price_str,
            f"${balance.value_usd:,.2f}",
        )
    for position in snapshot.positions:
        label = f"{position.protocol_name} {position.pair_label}" if position.pair_label else position.protocol_name
        table.add_row(label, position.position_type.value, "-", "-", f"${position.value_usd:,.2f}")

    console.print("\n")
    console.print(table)

    summary_table = Table(show_header=False, box=None)
    summary_table.add_column("Label", style="bold")
    summary_table.add_column("Value", style="bold green")
    summary_table.add_row("Total Value:", f"${snapshot.total_value_usd:,.2f}")
    summary_table.add_row("Risk Score:", f"{snapshot.risk_score}/10")

    console.print("\n")
    console.print(summary_table)
    console.print("\n")


def _output_json(data: dict) -> None:
    """Output JSON-compatible data."""
    console.print_json(json.dumps(data))


if __name__ == "__main__":
    app()
