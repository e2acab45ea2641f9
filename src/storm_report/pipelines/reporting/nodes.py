"""Node functions for the reporting pipeline.

One node that turns the analysis results into a Markdown report with
PNG charts.  Tables are rendered with ``DataFrame.to_markdown`` and
charts with matplotlib on the non-interactive Agg backend.

Output layout (inside ``output_dir``):
    report.md
    population_health.png
    economic_damage.png
    annual_wind_series.png
"""

from __future__ import annotations

import logging
from pathlib import Path

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from storm_report.pipelines.analysis.nodes import AnnualImpact, RankedEvent
from storm_report.pipelines.data_processing.nodes import NormalizationReport

matplotlib.use("Agg")  # non-interactive backend for CI / headless runs

logger = logging.getLogger(__name__)

REPORT_TITLE = "Health and economic impact of severe weather events in the United States"
REPORT_FILENAME = "report.md"

_DOLLAR_UNITS: list[tuple[float, str]] = [
    (1e9, "billion"),
    (1e6, "million"),
    (1e3, "thousand"),
]


# ── helpers ─────────────────────────────────────────────────────
def _format_dollars(value: float) -> str:
    """Render a dollar amount as "$1.25 billion", "$300.00 thousand", "$40"."""
    for threshold, unit in _DOLLAR_UNITS:
        if abs(value) >= threshold:
            return f"${value / threshold:,.2f} {unit}"
    return f"${value:,.0f}"


def _ranking_table(ranking: list[RankedEvent], value_label: str, dollars: bool = False) -> str:
    if not ranking:
        return "_No events to rank._"

    frame = pd.DataFrame(ranking, columns=["Event type", value_label])
    if dollars:
        frame[value_label] = frame[value_label].map(_format_dollars)
    else:
        frame[value_label] = frame[value_label].map("{:,}".format)
    frame.index = pd.RangeIndex(1, len(frame) + 1, name="Rank")
    return frame.to_markdown()


def _annual_table(series: list[AnnualImpact]) -> str:
    if not series:
        return "_No wind, tornado or hurricane events with a known date._"

    frame = pd.DataFrame(series).set_index("year")
    frame.index.name = "Year"
    frame = frame.rename(
        columns={
            "fatalities": "Fatalities",
            "injuries": "Injuries",
            "property_damage": "Property damage",
            "crop_damage": "Crop damage",
        }
    )
    for col in ("Property damage", "Crop damage"):
        frame[col] = frame[col].map(_format_dollars)
    return frame.to_markdown()


def _leader_sentence(ranking: list[RankedEvent], what: str, dollars: bool = False) -> str:
    if not ranking:
        return f"No event type recorded any {what}."
    leader = ranking[0]
    amount = _format_dollars(leader.total) if dollars else f"{leader.total:,}"
    return f"**{leader.event_type}** leads {what} with a total of {amount}."


def _plot_rankings(
    panels: list[tuple[str, list[RankedEvent], str, float]],
    path: Path,
    dpi: int,
) -> bool:
    """Draw one horizontal bar chart per panel side by side.

    Each panel is (title, ranking, x-axis label, divisor for the values).
    Returns False (and draws nothing) when every ranking is empty.
    """
    if not any(ranking for _, ranking, _, _ in panels):
        return False

    fig, axes = plt.subplots(1, len(panels), figsize=(7 * len(panels), 5))
    for ax, (title, ranking, xlabel, divisor) in zip(np.atleast_1d(axes), panels):
        ordered = list(reversed(ranking))  # largest bar on top
        ax.barh(
            [event.event_type for event in ordered],
            [event.total / divisor for event in ordered],
        )
        ax.set_title(title)
        ax.set_xlabel(xlabel)
    fig.tight_layout()
    fig.savefig(path, dpi=dpi)
    plt.close(fig)
    return True


def _plot_annual_series(series: list[AnnualImpact], path: Path, dpi: int) -> bool:
    if not series:
        return False

    years = [point.year for point in series]
    fig, (human_ax, money_ax) = plt.subplots(2, 1, figsize=(10, 8), sharex=True)

    human_ax.plot(years, [p.fatalities for p in series], label="Fatalities")
    human_ax.plot(years, [p.injuries for p in series], label="Injuries")
    human_ax.set_ylabel("People")
    human_ax.set_title("Wind, tornado and hurricane events per year")
    human_ax.legend()

    money_ax.plot(years, [p.property_damage / 1e9 for p in series], label="Property")
    money_ax.plot(years, [p.crop_damage / 1e9 for p in series], label="Crops")
    money_ax.set_ylabel("Damage (USD billions)")
    money_ax.set_xlabel("Year")
    money_ax.legend()

    fig.tight_layout()
    fig.savefig(path, dpi=dpi)
    plt.close(fig)
    return True


def _data_quality_lines(quality: NormalizationReport) -> list[str]:
    total = quality.total_rows
    return [
        f"- The dataset holds {total:,} event records carrying "
        f"{quality.distinct_event_types:,} distinct event-type labels. Labels are "
        "used as recorded (uppercased only), so spelling variants of the same "
        "kind of event are ranked separately.",
        f"- {quality.null_timestamps:,} records ({quality.share(quality.null_timestamps):.2f}%) "
        "have no parseable begin date and are absent from the yearly series.",
        f"- {quality.unrecognized_property_scale:,} records "
        f"({quality.share(quality.unrecognized_property_scale):.2f}%) carry a property "
        "damage scale code other than H, K, M or B; "
        f"{quality.null_property_damage:,} records have no property damage figure and "
        "count as zero in the damage totals.",
        f"- {quality.unrecognized_crop_scale:,} records "
        f"({quality.share(quality.unrecognized_crop_scale):.2f}%) carry an unrecognized "
        f"crop damage scale code; {quality.null_crop_damage:,} records have no crop "
        "damage figure.",
    ]


# ── Node 1 ──────────────────────────────────────────────────────
def render_report(
    injuries: list[RankedEvent],
    fatalities: list[RankedEvent],
    property_damage: list[RankedEvent],
    crop_damage: list[RankedEvent],
    health_impact: list[RankedEvent],
    economic_damage: list[RankedEvent],
    annual_series: list[AnnualImpact],
    quality: NormalizationReport,
    output_dir: str,
    dpi: int = 100,
) -> str:
    """Write report.md and its charts into ``output_dir``.

    Args:
        injuries: Ranking by total injuries.
        fatalities: Ranking by total fatalities.
        property_damage: Ranking by property damage (USD).
        crop_damage: Ranking by crop damage (USD).
        health_impact: Ranking by injuries + fatalities.
        economic_damage: Ranking by property + crop damage (USD).
        annual_series: Yearly wind/tornado/hurricane impact.
        quality: Attrition counts from normalization.
        output_dir: Directory receiving the report (created if needed).
        dpi: Resolution of the PNG charts.

    Returns:
        Path of the written report.md.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    health_chart = _plot_rankings(
        [
            ("Injuries", injuries, "Total injuries", 1.0),
            ("Fatalities", fatalities, "Total fatalities", 1.0),
        ],
        out / "population_health.png",
        dpi,
    )
    economic_chart = _plot_rankings(
        [
            ("Property damage", property_damage, "USD billions", 1e9),
            ("Crop damage", crop_damage, "USD billions", 1e9),
        ],
        out / "economic_damage.png",
        dpi,
    )
    annual_chart = _plot_annual_series(annual_series, out / "annual_wind_series.png", dpi)

    lines = [f"# {REPORT_TITLE}", ""]

    lines += ["## Synopsis", ""]
    lines.append(
        "This report ranks severe weather event types recorded in the NOAA storm "
        "database by their harm to population health (injuries and fatalities) "
        "and by their economic consequences (property and crop damage), then "
        "follows wind, tornado and hurricane events year by year. "
        + _leader_sentence(health_impact, "combined injuries and fatalities")
        + " "
        + _leader_sentence(economic_damage, "combined economic damage", dollars=True)
    )
    lines.append("")

    lines += ["## Data quality", ""]
    lines += _data_quality_lines(quality)
    lines.append("")

    lines += ["## Population health", ""]
    lines += [_leader_sentence(injuries, "injuries"), "", _ranking_table(injuries, "Injuries"), ""]
    lines += [
        _leader_sentence(fatalities, "fatalities"),
        "",
        _ranking_table(fatalities, "Fatalities"),
        "",
    ]
    lines += ["### Injuries and fatalities combined", ""]
    lines += [_ranking_table(health_impact, "Injuries + fatalities"), ""]
    if health_chart:
        lines += ["![Population health](population_health.png)", ""]

    lines += ["## Economic consequences", ""]
    lines += [
        _leader_sentence(property_damage, "property damage", dollars=True),
        "",
        _ranking_table(property_damage, "Property damage", dollars=True),
        "",
    ]
    lines += [
        _leader_sentence(crop_damage, "crop damage", dollars=True),
        "",
        _ranking_table(crop_damage, "Crop damage", dollars=True),
        "",
    ]
    lines += ["### Property and crop damage combined", ""]
    lines += [_ranking_table(economic_damage, "Total damage", dollars=True), ""]
    if economic_chart:
        lines += ["![Economic damage](economic_damage.png)", ""]

    lines += ["## Wind, tornado and hurricane events by year", ""]
    lines.append(
        "Events whose type mentions WIND, TORNADO or HURRICANE, summed by the "
        "year the event began. Years without any such event are not listed."
    )
    lines.append("")
    lines += [_annual_table(annual_series), ""]
    if annual_chart:
        lines += ["![Annual wind series](annual_wind_series.png)", ""]

    report_path = out / REPORT_FILENAME
    report_path.write_text("\n".join(lines), encoding="utf-8")

    logger.info(
        "Report written to %s (%d charts)",
        report_path,
        sum([health_chart, economic_chart, annual_chart]),
    )
    return str(report_path)
