"""Shared fixtures: small NOAA-shaped raw tables and report-ready tables."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from storm_report.pipelines.data_processing.nodes import REPORT_COLUMNS

RAW_COLUMNS = [
    "STATE__",
    "BGN_DATE",
    "BGN_TIME",
    "STATE",
    "EVTYPE",
    "FATALITIES",
    "INJURIES",
    "PROPDMG",
    "PROPDMGEXP",
    "CROPDMG",
    "CROPDMGEXP",
    "REFNUM",
]


def raw_row(
    evtype: str | None,
    injuries: int = 0,
    fatalities: int = 0,
    propdmg: float = 0.0,
    propexp: str | None = None,
    cropdmg: float = 0.0,
    cropexp: str | None = None,
    bgn_date: str | None = "4/18/1950 0:00:00",
    state: str = "AL",
) -> dict:
    return {
        "STATE__": 1.0,
        "BGN_DATE": bgn_date,
        "BGN_TIME": "0130",
        "STATE": state,
        "EVTYPE": evtype,
        "FATALITIES": fatalities,
        "INJURIES": injuries,
        "PROPDMG": propdmg,
        "PROPDMGEXP": propexp,
        "CROPDMG": cropdmg,
        "CROPDMGEXP": cropexp,
        "REFNUM": 0,
    }


def build_raw(rows: list[dict]) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=RAW_COLUMNS)
    df["REFNUM"] = range(1, len(df) + 1)
    return df


def build_events(rows: list[dict]) -> pd.DataFrame:
    """Report-ready table; missing keys get neutral defaults."""
    defaults = {
        "begin_timestamp": pd.Timestamp("2000-01-01"),
        "state": "AL",
        "event_type": "FLOOD",
        "injuries": 0,
        "fatalities": 0,
        "property_damage": 0.0,
        "crop_damage": 0.0,
    }
    df = pd.DataFrame([{**defaults, **row} for row in rows], columns=REPORT_COLUMNS)
    df["begin_timestamp"] = pd.to_datetime(df["begin_timestamp"])
    df[["property_damage", "crop_damage"]] = df[["property_damage", "crop_damage"]].astype(float)
    return df


@pytest.fixture()
def scenario_raw() -> pd.DataFrame:
    """Three events: two tornadoes (one with an unknown scale code) and a flood."""
    return build_raw(
        [
            raw_row("TORNADO", injuries=5, fatalities=1, propdmg=10, propexp="K"),
            raw_row("FLOOD", injuries=2, fatalities=0, propdmg=1, propexp="M"),
            raw_row("TORNADO", injuries=3, fatalities=2, propdmg=0, propexp="?"),
        ]
    )


@pytest.fixture()
def empty_events() -> pd.DataFrame:
    return build_events([])


@pytest.fixture()
def write_storm_file(tmp_path: Path):
    """Write a raw table as a bzip2-compressed CSV and return its path."""

    def _write(df: pd.DataFrame, name: str = "StormData.csv.bz2") -> Path:
        path = tmp_path / name
        df.to_csv(path, index=False, compression="bz2")
        return path

    return _write
