#!/usr/bin/env python3
"""Print the workday report: matches played inside the configured schedule."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from clients.opendota import OpenDotaAPIError, OpenDotaClient
from db import create_db_engine, create_session_factory
from domain.common import Match
from domain.config import load_dashboard_config
from domain.normalizer import create_hero_directory, normalize_matches
from domain.report import WorkdayReport, build_workday_report
from domain.time_window import FilterPolicy, local_datetime
from repositories.cache import ensure_cache_schema

DEFAULT_CONFIG_PATH = ROOT_DIR / "config" / "default.toml"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Workday-filtered match report.",
)


def _render_match(match: Match, policy: FilterPolicy) -> str:
    played_at = local_datetime(match.timestamp, policy.tz).strftime("%H:%M")
    return (
        f"  {played_at} {match.hero_name:<20} {match.result.value:<7} "
        f"{match.kda.kills}/{match.kda.deaths}/{match.kda.assists} {match.duration.formatted}"
    )


def render_report(report: WorkdayReport, policy: FilterPolicy) -> list[str]:
    """Format a workday report as plain text lines."""
    lines = [
        f"matches={len(report.matches)} wins={report.wins} losses={report.losses} "
        f"hours_played={report.total_hours:.1f} days={report.total_days} "
        f"avg_per_day={report.average_per_day}",
    ]
    if report.last_match is not None:
        lines.append("last match:")
        lines.append(_render_match(report.last_match, policy))
    for day in report.recent_days:
        lines.append(f"{day.date} ({len(day.matches)} matches)")
        lines.extend(_render_match(match, policy) for match in day.matches)
    return lines


@app.command()
def report(
    config_path: Annotated[
        Path,
        typer.Option("--config", help="Dashboard TOML config file."),
    ] = DEFAULT_CONFIG_PATH,
    db_url: Annotated[
        str | None,
        typer.Option("--db-url", help="Override the cache database URL from the config."),
    ] = None,
    match_limit: Annotated[
        int | None,
        typer.Option("--match-limit", help="Override how many recent matches to fetch."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging."),
    ] = False,
) -> None:
    """Fetch recent matches and summarize the ones inside the workday schedule."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    if match_limit is not None and match_limit <= 0:
        raise typer.BadParameter("--match-limit must be greater than 0")

    try:
        config = load_dashboard_config(config_path)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc

    engine = create_db_engine(db_url or config.cache_db_url)
    ensure_cache_schema(engine)
    client = OpenDotaClient(
        config.api_base_url,
        cache_session_factory=create_session_factory(engine),
        timeout_seconds=config.api_timeout_seconds,
    )

    try:
        heroes = create_hero_directory(client.get_hero_stats())
        raw_matches = client.get_matches(config.account_id, match_limit or config.match_limit)
    except OpenDotaAPIError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    result = build_workday_report(normalize_matches(raw_matches, heroes), config.policy)
    if not result.matches:
        typer.echo("no matches inside the workday schedule")
        return

    for line in render_report(result, config.policy):
        typer.echo(line)


if __name__ == "__main__":
    app()
