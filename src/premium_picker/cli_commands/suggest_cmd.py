from __future__ import annotations

import json
from datetime import date, timedelta

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from premium_picker.config import Settings
from premium_picker.data.tda import ProviderError, make_client
from premium_picker.options.chain import parse_chain
from premium_picker.options.errors import ChainError
from premium_picker.options.models import ContractRecord, Side
from premium_picker.options.ranking import score
from premium_picker.options.suggest import build_payload, suggest_from_contracts
from premium_picker.utils.formatting import fmt_int, fmt_score, fmt_usd
from premium_picker.utils.logging import log_event
from premium_picker.utils.settings import safe_load_settings


def _load_settings_or_exit(console: Console) -> Settings:
    settings = safe_load_settings()
    if settings is None:
        console.print("[red]Could not load settings; check .env and APP_SETTINGS.[/red]")
        raise typer.Exit(code=1)
    return settings


def _contracts_table(title: str, contracts: list[ContractRecord], *, with_score: bool = False) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("Symbol", style="cyan")
    table.add_column("Type", justify="center")
    table.add_column("Expiry", justify="center")
    table.add_column("DTE", justify="right")
    table.add_column("Strike", justify="right")
    table.add_column("Bid", justify="right")
    table.add_column("Ask", justify="right")
    table.add_column("Mark", justify="right", style="yellow")
    table.add_column("OI", justify="right")
    table.add_column("Collateral", justify="right")
    if with_score:
        table.add_column("Score", justify="right", style="green")

    for c in contracts:
        row = [
            c.symbol,
            c.put_call[:1],
            c.expiration_date.isoformat(),
            str(c.days_to_expiration),
            fmt_usd(c.strike_price),
            fmt_usd(c.bid),
            fmt_usd(c.ask),
            fmt_usd(c.mark),
            fmt_int(c.open_interest),
            fmt_usd(c.collateral, decimals=0),
        ]
        if with_score:
            row.append(fmt_score(score(c)))
        table.add_row(*row)
    return table


def register(app: typer.Typer) -> None:
    @app.command("suggest")
    def suggest_cmd(
        ticker: str = typer.Option(..., "--ticker", "-t", help="Underlying symbol, e.g. SPY"),
        budget: float = typer.Option(None, "--budget", "-b", min=0.0, help="Max cash to secure one put (default: account cash)"),
        top: int = typer.Option(None, "--top", "-n", min=1, help="Number of suggestions (default: SUGGESTION_COUNT)"),
        window_days: int = typer.Option(None, "--window-days", help="Expirations up to N days out"),
        as_json: bool = typer.Option(False, "--json", help="Print quote + chain + suggestions as JSON"),
    ):
        """Suggest cash-secured puts to sell within a budget."""
        console = Console()
        settings = _load_settings_or_exit(console)
        client = make_client(settings)
        rules = settings.eligibility_rules()
        symbol = ticker.strip().upper()
        k = int(top) if top is not None else settings.suggestion_count
        today = date.today()
        end = today + timedelta(days=int(window_days) if window_days is not None else settings.chain_window_days)

        try:
            quote = client.get_quote(symbol)
            raw = client.get_option_chain(symbol, Side.PUT, today, end)
            if budget is None:
                if not settings.account_id:
                    console.print("[red]No --budget given and TDA_ACCOUNT_ID is not set.[/red]")
                    raise typer.Exit(code=1)
                budget = client.get_account_info(settings.account_id).cash_available_for_trading
            chain = parse_chain(raw, Side.PUT, default_multiplier=rules.default_multiplier)
            picks = suggest_from_contracts(chain, float(budget), quote.last_price, k, rules=rules)
        except (ChainError, ProviderError) as e:
            console.print(f"[red]{type(e).__name__}: {escape(str(e))}[/red]")
            raise typer.Exit(code=1)

        if as_json:
            console.print_json(json.dumps(build_payload(quote, chain, picks)))
            return

        log_event(
            "SUGGESTIONS",
            {
                "ticker": symbol,
                "reference_price": quote.last_price,
                "budget_usd": budget,
                "min_open_interest": rules.min_open_interest,
                "k": k,
                "selected": [c.symbol for c in picks],
            },
        )

        if not picks:
            console.print("[yellow]No contracts matched the budget / liquidity / strike rules.[/yellow]")
            return
        console.print(f"\n[bold cyan]{symbol}[/bold cyan] last={fmt_usd(quote.last_price)} budget={fmt_usd(budget)}")
        console.print(_contracts_table(f"Top {len(picks)} puts to sell", picks, with_score=True))

    @app.command("chain")
    def chain_cmd(
        ticker: str = typer.Option(..., "--ticker", "-t", help="Underlying symbol"),
        side: str = typer.Option("put", "--side", help="put|call"),
        window_days: int = typer.Option(None, "--window-days", help="Expirations up to N days out"),
    ):
        """Display the normalized option chain."""
        console = Console()
        settings = _load_settings_or_exit(console)
        client = make_client(settings)
        symbol = ticker.strip().upper()
        today = date.today()
        end = today + timedelta(days=int(window_days) if window_days is not None else settings.chain_window_days)

        try:
            want = Side.coerce(side)
            raw = client.get_option_chain(symbol, want, today, end)
            contracts = parse_chain(raw, want, default_multiplier=settings.eligibility_rules().default_multiplier)
        except (ChainError, ProviderError) as e:
            console.print(f"[red]{type(e).__name__}: {escape(str(e))}[/red]")
            raise typer.Exit(code=1)

        if not contracts:
            console.print("[yellow]No options data available[/yellow]")
            return
        contracts = sorted(contracts, key=lambda c: (c.expiration_date, c.strike_price))
        console.print(_contracts_table(f"{symbol} {want.value} chain", contracts))
        console.print(f"\n[dim]{len(contracts)} contracts[/dim]")

    @app.command("quote")
    def quote_cmd(
        ticker: str = typer.Option(..., "--ticker", "-t", help="Underlying symbol"),
    ):
        """Show the latest quote for the underlying."""
        console = Console()
        client = make_client(_load_settings_or_exit(console))
        try:
            quote = client.get_quote(ticker)
        except ProviderError as e:
            console.print(f"[red]{type(e).__name__}: {escape(str(e))}[/red]")
            raise typer.Exit(code=1)

        table = Table(title=f"{quote.symbol} quote", show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value", justify="right")
        table.add_row("Last", fmt_usd(quote.last_price))
        table.add_row("Volume", fmt_int(quote.total_volume))
        table.add_row("52w high", fmt_usd(quote.fifty_two_week_high))
        table.add_row("52w low", fmt_usd(quote.fifty_two_week_low))
        table.add_row("Exchange", quote.exchange or "n/a")
        table.add_row("CUSIP", quote.cusip or "n/a")
        console.print(table)
