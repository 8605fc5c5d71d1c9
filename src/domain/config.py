"""Load dashboard settings from a TOML file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
import tomllib

from domain.protocol import FilterMode
from domain.time_window import DEFAULT_POLICY, FilterPolicy

DEFAULT_ACCOUNT_ID = "425817633"
DEFAULT_MATCH_LIMIT = 100
DEFAULT_API_BASE_URL = "https://api.opendota.com/api"
DEFAULT_CACHE_DB_URL = "sqlite:///ezdota_cache.db"


@dataclass(frozen=True)
class DashboardConfig:
    """Everything the CLI needs to fetch, cache, and filter one player's matches."""

    file_path: Path | None
    account_id: str = DEFAULT_ACCOUNT_ID
    match_limit: int = DEFAULT_MATCH_LIMIT
    policy: FilterPolicy = DEFAULT_POLICY
    mode: FilterMode = FilterMode.WORKDAY
    api_base_url: str = DEFAULT_API_BASE_URL
    api_timeout_seconds: float = 30.0
    cache_db_url: str = DEFAULT_CACHE_DB_URL

    def as_config_json(self) -> dict[str, Any]:
        return {
            "account_id": self.account_id,
            "match_limit": self.match_limit,
            "weekdays": sorted(self.policy.weekdays),
            "hour_ranges": [list(hour_range) for hour_range in self.policy.hour_ranges],
            "timezone": self.policy.timezone,
            "mode": self.mode.value,
            "api_base_url": self.api_base_url,
            "api_timeout_seconds": self.api_timeout_seconds,
            "cache_db_url": self.cache_db_url,
        }


def load_dashboard_config(file_path: Path) -> DashboardConfig:
    """Read and validate one TOML config file."""
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")
    if not file_path.is_file():
        raise ValueError(f"Config path is not a file: {file_path}")

    with file_path.open("rb") as file:
        raw = tomllib.load(file)
    return _parse_dashboard_config(raw, file_path)


def _parse_dashboard_config(raw: dict[str, Any], file_path: Path) -> DashboardConfig:
    player_raw = raw.get("player", {})
    workday_raw = raw.get("workday", {})
    api_raw = raw.get("api", {})
    cache_raw = raw.get("cache", {})

    account_id = str(player_raw.get("account_id", DEFAULT_ACCOUNT_ID)).strip()
    if not account_id:
        raise ValueError(f"{file_path}: [player].account_id must not be empty")

    match_limit = int(player_raw.get("match_limit", DEFAULT_MATCH_LIMIT))
    if match_limit <= 0:
        raise ValueError(f"{file_path}: [player].match_limit must be > 0")

    mode_value = str(workday_raw.get("mode", FilterMode.WORKDAY.value))
    try:
        mode = FilterMode(mode_value)
    except ValueError as exc:
        choices = ", ".join(item.value for item in FilterMode)
        raise ValueError(f"{file_path}: [workday].mode must be one of: {choices}") from exc

    additional_ranges = tuple(
        _parse_range(item, file_path) for item in workday_raw.get("additional_ranges", ())
    )
    try:
        policy = FilterPolicy(
            weekdays=frozenset(int(day) for day in workday_raw.get("weekdays", DEFAULT_POLICY.weekdays)),
            start_hour=int(workday_raw.get("start_hour", DEFAULT_POLICY.start_hour)),
            end_hour=int(workday_raw.get("end_hour", DEFAULT_POLICY.end_hour)),
            additional_ranges=additional_ranges,
            timezone=str(workday_raw.get("timezone", DEFAULT_POLICY.timezone)),
        )
    except ValueError as exc:
        raise ValueError(f"{file_path}: [workday] {exc}") from exc

    api_base_url = str(api_raw.get("base_url", DEFAULT_API_BASE_URL)).rstrip("/")
    if not api_base_url.startswith(("http://", "https://")):
        raise ValueError(f"{file_path}: [api].base_url must be an http(s) URL")

    api_timeout_seconds = float(api_raw.get("timeout_seconds", 30.0))
    if api_timeout_seconds <= 0.0:
        raise ValueError(f"{file_path}: [api].timeout_seconds must be > 0")

    cache_db_url = str(cache_raw.get("db_url", DEFAULT_CACHE_DB_URL)).strip()
    if not cache_db_url:
        raise ValueError(f"{file_path}: [cache].db_url must not be empty")

    return DashboardConfig(
        file_path=file_path,
        account_id=account_id,
        match_limit=match_limit,
        policy=policy,
        mode=mode,
        api_base_url=api_base_url,
        api_timeout_seconds=api_timeout_seconds,
        cache_db_url=cache_db_url,
    )


def _parse_range(item: Any, file_path: Path) -> tuple[int, int]:
    if not isinstance(item, list) or len(item) != 2:
        raise ValueError(f"{file_path}: [workday].additional_ranges entries must be [start, end] pairs")
    return int(item[0]), int(item[1])


__all__ = ["DashboardConfig", "load_dashboard_config"]
