"""Aggregation nodes answering the report's questions.

Every query reads the seven-column event table produced by the
data_processing pipeline and returns plain Python values: lists of
``RankedEvent`` or ``AnnualImpact`` named tuples.  No query mutates its
input, so they can run in any order (or concurrently).

Ranking order:
    groups are first sorted alphabetically by event_type, then stably
    sorted by descending total, so equal totals keep alphabetical order.
"""

from __future__ import annotations

import logging
from typing import Callable, NamedTuple

import pandas as pd

logger = logging.getLogger(__name__)

# Substrings (case-insensitive) selecting wind-driven events.
WIND_EVENT_PATTERN = "WIND|TORNADO|HURRICANE"

_ANNUAL_COLUMNS: list[str] = ["fatalities", "injuries", "property_damage", "crop_damage"]


class RankedEvent(NamedTuple):
    event_type: str
    total: float


class AnnualImpact(NamedTuple):
    year: int
    fatalities: int
    injuries: int
    property_damage: float
    crop_damage: float


# ── helper ──────────────────────────────────────────────────────
def _rank_events(
    totals_by_row: pd.Series,
    event_types: pd.Series,
    k: int,
    cast: Callable[[float], float],
) -> list[RankedEvent]:
    """Sum ``totals_by_row`` per event type and keep the ``k`` largest.

    Missing values count as zero in the sums.
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    if k == 0 or totals_by_row.empty:
        return []

    totals = totals_by_row.groupby(event_types, sort=True).sum(min_count=0)
    top = totals.sort_values(ascending=False, kind="stable").head(k)
    return [RankedEvent(event_type, cast(total)) for event_type, total in top.items()]


def _log_ranking(name: str, ranking: list[RankedEvent]) -> None:
    if ranking:
        logger.info(
            "%s: %d event types ranked, leader %s (%s)",
            name,
            len(ranking),
            ranking[0].event_type,
            f"{ranking[0].total:,}",
        )
    else:
        logger.info("%s: no events to rank", name)


# ── Node 1 ──────────────────────────────────────────────────────
def top_events_by_injuries(table: pd.DataFrame, k: int) -> list[RankedEvent]:
    """Event types with the most injuries, largest first."""
    ranking = _rank_events(table["injuries"], table["event_type"], k, int)
    _log_ranking("top_events_by_injuries", ranking)
    return ranking


# ── Node 2 ──────────────────────────────────────────────────────
def top_events_by_fatalities(table: pd.DataFrame, k: int) -> list[RankedEvent]:
    """Event types with the most fatalities, largest first."""
    ranking = _rank_events(table["fatalities"], table["event_type"], k, int)
    _log_ranking("top_events_by_fatalities", ranking)
    return ranking


# ── Node 3 ──────────────────────────────────────────────────────
def top_events_by_property_damage(table: pd.DataFrame, k: int) -> list[RankedEvent]:
    """Event types with the largest property damage in dollars.

    Rows whose damage is null (unrecognized scale code) contribute zero
    to their group's sum but still belong to the group.
    """
    ranking = _rank_events(table["property_damage"], table["event_type"], k, float)
    _log_ranking("top_events_by_property_damage", ranking)
    return ranking


# ── Node 4 ──────────────────────────────────────────────────────
def top_events_by_crop_damage(table: pd.DataFrame, k: int) -> list[RankedEvent]:
    """Event types with the largest crop damage in dollars (nulls as zero)."""
    ranking = _rank_events(table["crop_damage"], table["event_type"], k, float)
    _log_ranking("top_events_by_crop_damage", ranking)
    return ranking


# ── Node 5 ──────────────────────────────────────────────────────
def top_events_by_health_impact(table: pd.DataFrame, k: int) -> list[RankedEvent]:
    """Event types most harmful to population health.

    Health impact is injuries plus fatalities per row.
    """
    impact = table["injuries"].fillna(0) + table["fatalities"].fillna(0)
    ranking = _rank_events(impact, table["event_type"], k, int)
    _log_ranking("top_events_by_health_impact", ranking)
    return ranking


# ── Node 6 ──────────────────────────────────────────────────────
def top_events_by_economic_damage(table: pd.DataFrame, k: int) -> list[RankedEvent]:
    """Event types with the greatest economic consequences.

    Economic damage is property plus crop damage per row, nulls as zero.
    """
    damage = table["property_damage"].fillna(0) + table["crop_damage"].fillna(0)
    ranking = _rank_events(damage, table["event_type"], k, float)
    _log_ranking("top_events_by_economic_damage", ranking)
    return ranking


# ── Node 7 ──────────────────────────────────────────────────────
def annual_wind_series(table: pd.DataFrame) -> list[AnnualImpact]:
    """Yearly human and economic impact of wind, tornado and hurricane events.

    A row qualifies when its event_type contains WIND, TORNADO or
    HURRICANE anywhere (so "TSTM WIND" and "HURRICANE OPAL" both count).
    Rows are grouped by the calendar year of begin_timestamp; rows
    without a timestamp are left out.  Only years with at least one
    qualifying row appear.

    Args:
        table: Report-ready event table.

    Returns:
        One AnnualImpact per year, ordered by year.
    """
    if table.empty:
        logger.info("annual_wind_series: empty input table")
        return []

    mask = table["event_type"].astype(str).str.contains(
        WIND_EVENT_PATTERN, case=False, regex=True, na=False
    )
    wind = table.loc[mask]
    years = pd.to_datetime(wind["begin_timestamp"], errors="coerce").dt.year.rename("year")

    grouped = wind[_ANNUAL_COLUMNS].groupby(years, sort=True).sum(min_count=0)

    series = [
        AnnualImpact(
            year=int(row.Index),
            fatalities=int(row.fatalities),
            injuries=int(row.injuries),
            property_damage=float(row.property_damage),
            crop_damage=float(row.crop_damage),
        )
        for row in grouped.itertuples()
    ]

    if series:
        logger.info(
            "annual_wind_series: %s matching events across %d years (%d–%d)",
            f"{int(mask.sum()):,}",
            len(series),
            series[0].year,
            series[-1].year,
        )
    else:
        logger.info("annual_wind_series: no wind-driven events found")
    return series
