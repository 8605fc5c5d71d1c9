#!/usr/bin/env python3
"""Match analytics dashboard commands: aggregates, match lookups and cache upkeep."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated, Any

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from clients.opendota import OpenDotaAPIError, OpenDotaClient
from db import create_db_engine, create_session_factory
from domain.codes import UNKNOWN_LABEL
from domain.common import MatchDetail, MatchValidationError
from domain.config import DashboardConfig, load_dashboard_config
from domain.formatting import relative_time, round_half_up, to_fixed
from domain.match_detail import normalize_match_detail
from domain.match_query import MATCH_LIST_PAGE_SIZE, search_matches
from domain.normalizer import create_hero_directory
from domain.pipeline import DashboardSummary, build_dashboard_summary, load_dashboard
from domain.protocol import FilterMode, MatchType
from domain.state import DashboardState
from repositories.cache import cache_stats, delete_all_entries, delete_expired_entries, ensure_cache_schema

DEFAULT_CONFIG_PATH = ROOT_DIR / "config" / "default.toml"
PROFILE_TOTAL_FIELDS = ("kills", "deaths", "assists", "last_hits", "denies", "gold_per_min", "xp_per_min")

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Personal match analytics dashboard.",
)

ConfigOption = Annotated[
    Path,
    typer.Option("--config", help="Dashboard TOML config file."),
]
DbUrlOption = Annotated[
    str | None,
    typer.Option("--db-url", help="Override the cache database URL from the config."),
]
ModeOption = Annotated[
    FilterMode | None,
    typer.Option("--mode", help="Match subset to analyze (workday, all)."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging."),
]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(config_path: Path) -> DashboardConfig:
    try:
        return load_dashboard_config(config_path)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc


def _build_client(config: DashboardConfig, db_url: str | None) -> OpenDotaClient:
    engine = create_db_engine(db_url or config.cache_db_url)
    ensure_cache_schema(engine)
    return OpenDotaClient(
        config.api_base_url,
        cache_session_factory=create_session_factory(engine),
        timeout_seconds=config.api_timeout_seconds,
    )


def _load_state(config: DashboardConfig, db_url: str | None, mode: FilterMode | None) -> DashboardState:
    client = _build_client(config, db_url)
    state = DashboardState(policy=config.policy, mode=mode or config.mode)
    try:
        load_dashboard(
            client,
            state,
            account_id=config.account_id,
            match_limit=config.match_limit,
        )
    except (OpenDotaAPIError, MatchValidationError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    return state


def render_summary(summary: DashboardSummary) -> list[str]:
    """Format a summary as plain text lines."""
    lines = [
        f"matches={summary.match_count} "
        f"win_rate={summary.win_rate.rate}% ({summary.win_rate.wins}W/{summary.win_rate.losses}L)",
        f"kda={summary.average_kda.kills:.1f}/{summary.average_kda.deaths:.1f}/"
        f"{summary.average_kda.assists:.1f} ratio={summary.average_kda.ratio}",
        f"avg_duration={summary.average_duration.formatted} "
        f"ranked={summary.type_counts.ranked} normal={summary.type_counts.normal} "
        f"turbo={summary.type_counts.turbo}",
        f"best_role={summary.best_role.name} win_rate={summary.best_role.win_rate}% "
        f"games={summary.best_role.games}",
        f"this_week={summary.weekly.this_week.matches} ({summary.weekly.this_week.win_rate}%) "
        f"trend_matches={summary.weekly.trend.matches:+d} "
        f"trend_win_rate={summary.weekly.trend.win_rate:+d}",
        "play_style "
        + " ".join(f"{name}={value}" for name, value in summary.play_style.as_dict().items()),
    ]
    for index, hero in enumerate(summary.top_heroes, start=1):
        lines.append(
            f"{index:2d}. {hero.hero_name:<20} games={hero.games:3d} win_rate={hero.win_rate:3d}%"
        )
    for day in summary.performance:
        lines.append(f"{day.date} games={day.games:2d} wins={day.wins:2d} win_rate={day.win_rate:3d}%")
    return lines


@app.command()
def summary(
    config_path: ConfigOption = DEFAULT_CONFIG_PATH,
    db_url: DbUrlOption = None,
    mode: ModeOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the summary as JSON.")] = False,
    verbose: VerboseOption = False,
) -> None:
    """Print every aggregate statistic for the active match subset."""
    _configure_logging(verbose)
    config = _load_config(config_path)
    state = _load_state(config, db_url, mode)

    result = build_dashboard_summary(state.active_matches, now=datetime.now(UTC), tz=config.policy.tz)
    if as_json:
        typer.echo(json.dumps(result.as_dict(), indent=2))
        return

    typer.echo(f"mode={state.mode.value} account_id={config.account_id}")
    for line in render_summary(result):
        typer.echo(line)


@app.command()
def insights(
    config_path: ConfigOption = DEFAULT_CONFIG_PATH,
    db_url: DbUrlOption = None,
    mode: ModeOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Print the generated insights for the active match subset."""
    _configure_logging(verbose)
    config = _load_config(config_path)
    state = _load_state(config, db_url, mode)

    result = build_dashboard_summary(state.active_matches, now=datetime.now(UTC), tz=config.policy.tz)
    for insight in result.insights:
        typer.echo(f"[{insight.type.value}] {insight.title}: {insight.message}")


@app.command()
def matches(
    config_path: ConfigOption = DEFAULT_CONFIG_PATH,
    db_url: DbUrlOption = None,
    mode: ModeOption = None,
    match_type: Annotated[
        MatchType | None,
        typer.Option("--type", help="Only show one match type (ranked, normal, turbo)."),
    ] = None,
    query: Annotated[
        str,
        typer.Option("--query", help="Hero name or match id substring."),
    ] = "",
    limit: Annotated[
        int,
        typer.Option("--limit", help="Maximum rows to print."),
    ] = MATCH_LIST_PAGE_SIZE,
    verbose: VerboseOption = False,
) -> None:
    """List matches from the active subset with optional type and text filters."""
    if limit <= 0:
        raise typer.BadParameter("--limit must be greater than 0")

    _configure_logging(verbose)
    config = _load_config(config_path)
    state = _load_state(config, db_url, mode)

    now = datetime.now(UTC)
    rows = search_matches(state.active_matches, match_type=match_type, query=query, limit=limit)
    if not rows:
        typer.echo("no matches found")
        return

    for match in rows:
        typer.echo(
            f"{match.match_id} {match.hero_name:<20} {match.result.value:<7} "
            f"{match.kda.kills}/{match.kda.deaths}/{match.kda.assists} "
            f"{match.duration.formatted:>6} {match.game_mode} "
            f"{relative_time(match.timestamp, now, config.policy.tz)}"
        )


def render_match_detail(detail: MatchDetail) -> list[str]:
    """Format one detailed match as plain text lines."""
    if detail.radiant_win is None:
        winner = "unknown"
    else:
        winner = "radiant" if detail.radiant_win else "dire"
    lines = [
        f"match {detail.match_id} {detail.game_mode} / {detail.lobby_type} {detail.duration.formatted}",
        f"score radiant={detail.radiant_score} dire={detail.dire_score} winner={winner}",
    ]
    if detail.current_player is not None:
        current = detail.current_player
        hero_name = current.hero.name if current.hero is not None else UNKNOWN_LABEL
        lines.append(
            f"you: {hero_name} {current.result.value} "
            f"{current.kda.kills}/{current.kda.deaths}/{current.kda.assists} ratio={current.kda.ratio}"
        )
    for player in detail.players:
        side = "R" if player.is_radiant else "D"
        lines.append(
            f"  {side} {player.name:<16} {player.hero_name:<20} "
            f"{player.kills}/{player.deaths}/{player.assists} "
            f"nw={player.net_worth} gpm={player.gpm} xpm={player.xpm}"
        )
    if detail.gold_advantage:
        lines.append(f"final gold advantage={detail.gold_advantage[-1]:+d}")
    return lines


def render_profile(
    player: Mapping[str, Any],
    win_loss: Mapping[str, Any],
    totals: Sequence[Mapping[str, Any]],
) -> list[str]:
    """Format profile, lifetime win/loss and per-game averages as plain text lines."""
    account = player.get("profile") or {}
    wins = int(win_loss.get("win") or 0)
    losses = int(win_loss.get("lose") or 0)
    games = wins + losses
    win_rate = round_half_up(wins / games * 100) if games else 0
    lines = [
        f"name={account.get('personaname') or 'Anonymous'} account_id={account.get('account_id')} "
        f"rank_tier={player.get('rank_tier')}",
        f"wins={wins} losses={losses} win_rate={win_rate}%",
    ]
    for row in totals:
        if row.get("field") not in PROFILE_TOTAL_FIELDS:
            continue
        count = int(row.get("n") or 0)
        total = float(row.get("sum") or 0)
        average = to_fixed(total / count, 1) if count else 0.0
        lines.append(f"{row['field']}: total={total:.0f} avg={average}")
    return lines


@app.command()
def match(
    match_id: Annotated[int, typer.Argument(help="Match id to show.")],
    config_path: ConfigOption = DEFAULT_CONFIG_PATH,
    db_url: DbUrlOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Show the scoreboard of one match from the tracked player's point of view."""
    _configure_logging(verbose)
    config = _load_config(config_path)
    client = _build_client(config, db_url)

    try:
        heroes = create_hero_directory(client.get_hero_stats())
        detail = normalize_match_detail(client.get_match_details(match_id), heroes, config.account_id)
    except (OpenDotaAPIError, MatchValidationError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    for line in render_match_detail(detail):
        typer.echo(line)


@app.command()
def profile(
    config_path: ConfigOption = DEFAULT_CONFIG_PATH,
    db_url: DbUrlOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Show the tracked player's profile, lifetime record and per-game averages."""
    _configure_logging(verbose)
    config = _load_config(config_path)
    client = _build_client(config, db_url)

    try:
        player = client.get_player(config.account_id)
        win_loss = client.get_win_loss(config.account_id)
        totals = client.get_totals(config.account_id)
    except OpenDotaAPIError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    for line in render_profile(player, win_loss, totals):
        typer.echo(line)


@app.command("cache-stats")
def cache_info(
    config_path: ConfigOption = DEFAULT_CONFIG_PATH,
    db_url: DbUrlOption = None,
) -> None:
    """Print cache entry counts and approximate size."""
    config = _load_config(config_path)
    engine = create_db_engine(db_url or config.cache_db_url)
    ensure_cache_schema(engine)
    with create_session_factory(engine)() as session:
        stats = cache_stats(session)
    typer.echo(
        f"total_entries={stats.total_entries} valid_entries={stats.valid_entries} "
        f"total_size_kb={stats.total_size_kb}"
    )


@app.command()
def clear_cache(
    config_path: ConfigOption = DEFAULT_CONFIG_PATH,
    db_url: DbUrlOption = None,
    expired_only: Annotated[
        bool,
        typer.Option("--expired-only", help="Only drop entries past their TTL."),
    ] = False,
) -> None:
    """Delete cached API responses."""
    config = _load_config(config_path)
    engine = create_db_engine(db_url or config.cache_db_url)
    ensure_cache_schema(engine)
    with create_session_factory(engine)() as session:
        deleted = delete_expired_entries(session) if expired_only else delete_all_entries(session)
        session.commit()
    typer.echo(f"deleted_entries={deleted}")


if __name__ == "__main__":
    app()
