"""
Match aggregation

Turns raw PUBG match records into a StatsSummary for one player over a
trailing period. Pure: the only input besides the matches is `now`.

Rules:
- matches created before `now - window(period)` are skipped entirely
- inside a match only the participant whose playerId matches counts
- a win is winPlace == 1, a death is any deathType other than "alive"
- kd_ratio = kills when deaths == 0, else kills / deaths
- win_rate = 100 * wins / matches_counted, 0 without matches
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from app.models.pubg.PubgMatch import PubgMatch
from app.models.stats.Shard import Shard
from app.models.stats.StatsMode import StatsMode
from app.models.stats.StatsSummary import StatsSummary

logger = logging.getLogger(__name__)

PERIOD_WINDOW_DAYS = {"7d": 7, "30d": 30, "90d": 90}
DEFAULT_WINDOW_DAYS = 7

# longer windows change slowly, keep them longer
PERIOD_TTL_HOURS = {"7d": 24, "30d": 72, "90d": 168}
DEFAULT_TTL_HOURS = 24


def _period_value(period) -> str:
    return str(getattr(period, "value", period))


def period_window(period) -> timedelta:
    return timedelta(days=PERIOD_WINDOW_DAYS.get(_period_value(period), DEFAULT_WINDOW_DAYS))


def ttl_for_period(period) -> timedelta:
    return timedelta(hours=PERIOD_TTL_HOURS.get(_period_value(period), DEFAULT_TTL_HOURS))


def calculate_kd_ratio(kills: int, deaths: int) -> float:
    if deaths > 0:
        return kills / deaths
    return float(kills)


def calculate_win_rate(wins: int, matches_counted: int) -> float:
    if matches_counted > 0:
        return (wins / matches_counted) * 100.0
    return 0.0


def parse_match_time(value: str) -> Optional[datetime]:
    """Parses the RFC 3339 createdAt of a match, None when unreadable."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def compute_stats_from_matches(
    account_id: str,
    matches: Iterable[PubgMatch],
    period,
    now: Optional[datetime] = None,
) -> StatsSummary:
    """
    Aggregates `matches` for the player `account_id` over `period`.

    player_id, mode and shard on the result are placeholders; the caller
    stamps the real values with `model_copy(update=...)`.
    """
    now = now or datetime.now(timezone.utc)
    period = _period_value(period)
    period_start = now - period_window(period)

    kills = 0
    deaths = 0
    damage_dealt = 0.0
    survival_time = 0.0
    wins = 0
    matches_counted = 0

    for match in matches:
        created_at = parse_match_time(match.created_at)
        # unreadable timestamps do not exclude a match
        if created_at is not None and created_at < period_start:
            logger.debug("Skipping match %s from %s (before period start)", match.id, created_at)
            continue

        participant = match.find_participant(account_id)
        if participant is None:
            continue

        matches_counted += 1
        kills += participant.kills
        damage_dealt += participant.damage_dealt
        survival_time += participant.time_survived

        if participant.win_place == 1:
            wins += 1
        if not participant.is_alive:
            deaths += 1

    kd_ratio = calculate_kd_ratio(kills, deaths)
    win_rate = calculate_win_rate(wins, matches_counted)

    logger.info(
        "Stats computed for period %s: %d matches, %d kills, %d deaths, K/D: %.2f, Win rate: %.1f%%",
        period,
        matches_counted,
        kills,
        deaths,
        kd_ratio,
        win_rate,
    )

    return StatsSummary(
        player_id=account_id,
        period=period,
        mode=StatsMode.ALL.value,
        shard=Shard.STEAM.value,
        kills=kills,
        deaths=deaths,
        kd_ratio=kd_ratio,
        win_rate=win_rate,
        damage_dealt=damage_dealt,
        survival_time=survival_time,
        wins=wins,
        matches_counted=matches_counted,
        computed_at=now,
        expires_at=now + ttl_for_period(period),
    )
