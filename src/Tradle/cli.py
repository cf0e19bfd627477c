"""CLI entry point for Tradle, the daily stock-trading challenge engine.

Provides the ``tradle`` command with subcommands for generating the daily
challenge, inspecting stored challenges, computing par for an arbitrary
window, producing the bot leaderboard, and grading a finished game.

This is the ONLY module that prints. All other modules use ``logging``.
Async internals are bridged to typer's synchronous interface via
``asyncio.run()``.
"""

from __future__ import annotations

import asyncio
import datetime
import logging
import math
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from Tradle.config import DEFAULT_SETTINGS_PATH, Settings, load_settings
from Tradle.data import ChallengeRepository, Database
from Tradle.logging_config import configure_logging
from Tradle.models import Challenge, DataOrigin, GameParameters, ParPerformance, PlayerStats
from Tradle.services import (
    ChallengeAssembler,
    FallbackPriceService,
    RateLimiter,
    ServiceCache,
    SymbolCatalog,
    TiingoPriceSource,
    build_price_source,
)
from Tradle.simulation import (
    analyze_tradability,
    compare_to_par,
    condense,
    evaluate_economics,
    generate_bot_entries,
    share_text,
)
from Tradle.utils.exceptions import ChallengeGenerationError

logger = logging.getLogger(__name__)

app = typer.Typer(name="tradle", help="Daily stock-trading challenge generator")

console = Console()

# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------

ConfigOption = Annotated[
    Path, typer.Option("--config", help="Path to the JSON settings file")
]
DbOption = Annotated[
    str | None, typer.Option("--db", help="SQLite database path (overrides settings)")
]
VerboseOption = Annotated[
    bool, typer.Option("--verbose", "-v", help="Enable debug logging")
]
QuietOption = Annotated[bool, typer.Option("--quiet", "-q", help="Suppress info logging")]


def _parse_date(value: str, option: str) -> datetime.date:
    try:
        return datetime.date.fromisoformat(value)
    except ValueError as exc:
        msg = f"{option} must be YYYY-MM-DD, got {value!r}"
        raise typer.BadParameter(msg) from exc


def _settings(config: Path, db: str | None) -> Settings:
    settings = load_settings(config)
    if db is not None:
        settings = settings.model_copy(update={"db_path": db})
    return settings


def _price_service(
    settings: Settings, cache: ServiceCache
) -> tuple[FallbackPriceService, TiingoPriceSource | None]:
    """Build the fallback-aware price service; also return a client to close."""
    limiter = RateLimiter(min_interval=settings.min_request_interval_seconds)
    source = build_price_source(settings.price_source, limiter, settings.tiingo_token)
    closable = source if isinstance(source, TiingoPriceSource) else None
    return FallbackPriceService(source=source, cache=cache), closable


# ---------------------------------------------------------------------------
# generate command
# ---------------------------------------------------------------------------


@app.command()
def generate(
    date: Annotated[
        str | None, typer.Option("--date", help="Challenge date YYYY-MM-DD (default today)")
    ] = None,
    db: DbOption = None,
    config: ConfigOption = DEFAULT_SETTINGS_PATH,
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Assemble and store the challenge for a date."""
    configure_logging(verbose=verbose, quiet=quiet)
    challenge_date = _parse_date(date, "--date") if date else datetime.date.today()
    settings = _settings(config, db)

    try:
        challenge = asyncio.run(
            asyncio.wait_for(
                _generate_async(settings, challenge_date),
                timeout=settings.generation_timeout_seconds,
            )
        )
    except ChallengeGenerationError as exc:
        console.print(f"[red]Challenge generation failed: {exc}[/red]")
        raise typer.Exit(code=1) from exc
    except TimeoutError as exc:
        console.print(
            f"[red]Challenge generation exceeded "
            f"{settings.generation_timeout_seconds:.0f}s budget.[/red]"
        )
        raise typer.Exit(code=1) from exc

    _render_challenge(challenge)


async def _generate_async(settings: Settings, challenge_date: datetime.date) -> Challenge:
    async with Database(settings.db_path) as database:
        cache = ServiceCache(database=database)
        prices, closable = _price_service(settings, cache)
        catalog = SymbolCatalog(
            Path(settings.catalog_path) if settings.catalog_path else None
        )
        assembler = ChallengeAssembler(
            catalog,
            prices,
            ChallengeRepository(database),
            max_stock_attempts=settings.max_stock_attempts,
            ranges_per_stock=settings.ranges_per_stock,
            max_total_attempts=settings.max_total_attempts,
        )
        try:
            return await assembler.assemble(challenge_date)
        finally:
            if closable is not None:
                await closable.aclose()


# ---------------------------------------------------------------------------
# show command
# ---------------------------------------------------------------------------


@app.command()
def show(
    day: Annotated[int | None, typer.Option("--day", help="Game number")] = None,
    date: Annotated[str | None, typer.Option("--date", help="Challenge date YYYY-MM-DD")] = None,
    db: DbOption = None,
    config: ConfigOption = DEFAULT_SETTINGS_PATH,
) -> None:
    """Print a stored challenge (latest when no day or date is given)."""
    configure_logging(quiet=True)
    challenge_date = _parse_date(date, "--date") if date else None
    settings = _settings(config, db)

    challenge = asyncio.run(_load_challenge(settings, day=day, challenge_date=challenge_date))
    if challenge is None:
        console.print("[yellow]No matching challenge found.[/yellow]")
        raise typer.Exit(code=1)
    _render_challenge(challenge)


async def _load_challenge(
    settings: Settings,
    *,
    day: int | None = None,
    challenge_date: datetime.date | None = None,
) -> Challenge | None:
    async with Database(settings.db_path) as database:
        repo = ChallengeRepository(database)
        if challenge_date is not None:
            return await repo.get_by_date(challenge_date)
        if day is None:
            day = await repo.get_latest_day()
        return await repo.get_by_day(day)


def _render_challenge(challenge: Challenge) -> None:
    params = challenge.game_parameters
    performance = challenge.par_performance

    table = Table(title=f"Tradle #{challenge.day} ({challenge.challenge_date.isoformat()})")
    table.add_column("Field", style="bold", width=22)
    table.add_column("Value", width=44)
    table.add_row("Symbol", f"{challenge.symbol} ({challenge.company_name})")
    table.add_row("Sector", challenge.sector or "-")
    table.add_row(
        "Window",
        f"{challenge.date_range.start_date.isoformat()} .. "
        f"{challenge.date_range.end_date.isoformat()} "
        f"(~{challenge.trading_days_estimate} trading days)",
    )
    origin = (
        "[yellow]synthetic[/yellow]"
        if challenge.data_origin is DataOrigin.SYNTHETIC
        else "historical"
    )
    table.add_row("Data", origin)
    _add_economics_rows(table, params, performance)
    table.add_row("Tradability", f"{analyze_tradability(challenge.price_data):.2f}")
    console.print(table)


def _add_economics_rows(table: Table, params: GameParameters, par: ParPerformance) -> None:
    ppt = par.par_profit_per_trade
    table.add_row("Starting cash", f"${params.starting_cash:,.0f}")
    table.add_row("Opening price", f"${params.initial_stock_price:,.2f}")
    table.add_row(
        "Target",
        f"${params.target_value:,.0f} ({params.target_return_percentage:+.0f}%)",
    )
    table.add_row("Par final value", f"${par.par_final_value:,.2f}")
    table.add_row("Par avg buy", f"${par.par_average_buy_price:,.2f}")
    table.add_row("Par shares bought", str(par.par_total_shares_bought))
    table.add_row("Par PPT", "n/a" if math.isnan(ppt) else f"${ppt:,.2f}")
    table.add_row("Par efficiency", f"{par.efficiency:.2f}")


# ---------------------------------------------------------------------------
# par command
# ---------------------------------------------------------------------------


@app.command()
def par(
    ticker: Annotated[str, typer.Argument(help="Ticker symbol")],
    start: Annotated[str, typer.Option("--start", help="Window start YYYY-MM-DD")],
    end: Annotated[str, typer.Option("--end", help="Window end YYYY-MM-DD")],
    db: DbOption = None,
    config: ConfigOption = DEFAULT_SETTINGS_PATH,
    verbose: VerboseOption = False,
    quiet: QuietOption = False,
) -> None:
    """Compute game economics and par for an arbitrary ticker and window."""
    configure_logging(verbose=verbose, quiet=quiet)
    start_date = _parse_date(start, "--start")
    end_date = _parse_date(end, "--end")
    if end_date <= start_date:
        console.print("[red]--end must be after --start.[/red]")
        raise typer.Exit(code=1)

    settings = _settings(config, db)
    origin, params, performance, tradability = asyncio.run(
        _par_async(settings, ticker.upper(), start_date, end_date)
    )

    title = f"Par: {ticker.upper()} {start_date.isoformat()} .. {end_date.isoformat()}"
    table = Table(title=title)
    table.add_column("Field", style="bold", width=22)
    table.add_column("Value", width=30)
    table.add_row("Data", origin.value)
    _add_economics_rows(table, params, performance)
    table.add_row("Tradability", f"{tradability:.2f}")
    console.print(table)


async def _par_async(
    settings: Settings,
    ticker: str,
    start_date: datetime.date,
    end_date: datetime.date,
) -> tuple[DataOrigin, GameParameters, ParPerformance, float]:
    async with Database(settings.db_path) as database:
        prices, closable = _price_service(settings, ServiceCache(database=database))
        try:
            series = await prices.fetch_prices(ticker, start_date, end_date)
        finally:
            if closable is not None:
                await closable.aclose()

    condensed = condense(series.rows)
    params, performance = evaluate_economics(condensed)
    return series.origin, params, performance, analyze_tradability(condensed)


# ---------------------------------------------------------------------------
# bots command
# ---------------------------------------------------------------------------


@app.command()
def bots(
    day: Annotated[int | None, typer.Option("--day", help="Game number (default latest)")] = None,
    count: Annotated[int | None, typer.Option("--count", help="Number of bots")] = None,
    top: Annotated[int, typer.Option("--top", help="Rows to display")] = 10,
    db: DbOption = None,
    config: ConfigOption = DEFAULT_SETTINGS_PATH,
) -> None:
    """Generate the seeded bot leaderboard for a stored challenge."""
    configure_logging(quiet=True)
    settings = _settings(config, db)

    challenge = asyncio.run(_load_challenge(settings, day=day))
    if challenge is None:
        console.print("[yellow]No matching challenge found.[/yellow]")
        raise typer.Exit(code=1)

    entries = generate_bot_entries(challenge, count if count is not None else settings.bot_count)
    target = challenge.game_parameters.target_value
    winners = sum(1 for entry in entries if entry.final_value >= target)
    ranked = sorted(entries, key=lambda entry: entry.final_value, reverse=True)

    table = Table(title=f"Tradle #{challenge.day} leaderboard ({len(entries)} bots)")
    table.add_column("Rank", justify="right", style="dim", width=5)
    table.add_column("Name", style="bold", width=20)
    table.add_column("Strategy", width=15)
    table.add_column("Final", justify="right", width=12)
    table.add_column("Change", justify="right", width=9)
    table.add_column("Tries", justify="right", width=6)
    for rank, entry in enumerate(ranked[:top], start=1):
        color = "green" if entry.final_value >= target else "red"
        table.add_row(
            str(rank),
            entry.name,
            entry.strategy.value,
            f"[{color}]${entry.final_value:,.2f}[/{color}]",
            f"{entry.percentage_change_of_value:+.2f}%",
            str(entry.num_tries),
        )
    console.print(table)
    console.print(f"\n{winners} of {len(entries)} bots reached the ${target:,.0f} target.")


# ---------------------------------------------------------------------------
# grade command
# ---------------------------------------------------------------------------


@app.command()
def grade(
    day: Annotated[int, typer.Option("--day", help="Game number")],
    final_value: Annotated[float, typer.Option("--final-value", help="Player's final value")],
    avg_buy: Annotated[float, typer.Option("--avg-buy", help="Player's average buy price")],
    shares: Annotated[int, typer.Option("--shares", help="Total shares the player bought")],
    db: DbOption = None,
    config: ConfigOption = DEFAULT_SETTINGS_PATH,
) -> None:
    """Grade a finished game against the challenge's par performance."""
    configure_logging(quiet=True)
    settings = _settings(config, db)

    challenge = asyncio.run(_load_challenge(settings, day=day))
    if challenge is None:
        console.print(f"[yellow]No challenge stored for day {day}.[/yellow]")
        raise typer.Exit(code=1)

    player = PlayerStats(
        final_value=final_value,
        average_buy_price=avg_buy,
        total_shares_bought=shares,
    )
    scorecard = compare_to_par(player, challenge.game_parameters, challenge.par_performance)

    table = Table(title=f"Tradle #{challenge.day}: you vs par")
    table.add_column("Axis", style="bold", width=16)
    table.add_column("Result", width=12)
    table.add_row("Avg buy price", scorecard.buy_price.value)
    table.add_row("Profit/trade", scorecard.profit_per_trade.value)
    table.add_row("Target", "met" if scorecard.target_met else "missed")
    console.print(table)
    console.print()
    console.print(share_text(scorecard, player, challenge.day))
