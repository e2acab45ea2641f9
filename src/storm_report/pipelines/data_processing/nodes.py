"""Raw → report-ready transformation nodes for the NOAA storm database.

Each function is a Kedro node: pure input → output, no side effects
beyond reading the input file.  Together they form the data_processing
pipeline that takes the compressed storm CSV and produces the seven-column
event table every analysis query reads.
"""

from __future__ import annotations

import logging
import lzma
import zipfile
from dataclasses import asdict, dataclass
from pathlib import Path

import pandas as pd

from storm_report.errors import DataAccessError, SchemaError

logger = logging.getLogger(__name__)

# ── Source column → semantic column ─────────────────────────────────
SOURCE_COLUMNS: dict[str, str] = {
    "BGN_DATE": "begin_timestamp",
    "STATE": "state",
    "EVTYPE": "event_type",
    "INJURIES": "injuries",
    "FATALITIES": "fatalities",
    "PROPDMG": "property_damage_raw",
    "PROPDMGEXP": "property_damage_scale",
    "CROPDMG": "crop_damage_raw",
    "CROPDMGEXP": "crop_damage_scale",
}

# ── Columns handed to the analysis pipeline, in order ───────────────
REPORT_COLUMNS: list[str] = [
    "begin_timestamp",
    "state",
    "event_type",
    "injuries",
    "fatalities",
    "property_damage",
    "crop_damage",
]

# ── Multipliers for damage scale codes ──────────────────────────────
DAMAGE_MULTIPLIERS: dict[str, float] = {
    "H": 100,
    "K": 1_000,
    "M": 1_000_000,
    "B": 1_000_000_000,
}

# (raw column, scale column, derived column)
_DAMAGE_COLUMNS: list[tuple[str, str, str]] = [
    ("property_damage_raw", "property_damage_scale", "property_damage"),
    ("crop_damage_raw", "crop_damage_scale", "crop_damage"),
]

_SCALE_CODES: list[str] = list(DAMAGE_MULTIPLIERS)

# e.g. "4/18/1950 0:00:00"
TIMESTAMP_FORMAT = "%m/%d/%Y %H:%M:%S"

_COMPRESSION_BY_SUFFIX: dict[str, str] = {
    ".bz2": "bz2",
    ".gz": "gzip",
    ".xz": "xz",
    ".zip": "zip",
}


@dataclass(frozen=True)
class NormalizationReport:
    """Row counts lost or altered while normalizing the event table."""

    total_rows: int
    null_timestamps: int
    null_property_damage: int
    null_crop_damage: int
    unrecognized_property_scale: int
    unrecognized_crop_scale: int
    distinct_event_types: int

    def as_dict(self) -> dict[str, int]:
        return asdict(self)

    def share(self, count: int) -> float:
        """Percentage of ``total_rows`` represented by ``count``."""
        if self.total_rows == 0:
            return 0.0
        return count / self.total_rows * 100


# ── Node 1 ───────────────────────────────────────────────────────────
def load_storm_data(input_path: str) -> pd.DataFrame:
    """Read the compressed storm CSV into one DataFrame.

    The file is decompressed and parsed in a single streaming pass.
    Column names and the types pandas infers are left exactly as found.

    Args:
        input_path: Path to the storm data file (``.bz2``, ``.gz``,
            ``.xz``, ``.zip`` or plain CSV).

    Returns:
        Raw DataFrame, one row per data line of the file.

    Raises:
        DataAccessError: The file is missing, unreadable or not a
            delimited text table.
    """
    path = Path(input_path)
    compression = _COMPRESSION_BY_SUFFIX.get(path.suffix.lower())

    logger.info("Loading storm data from %s (compression=%s)", path, compression)
    try:
        with path.open("rb") as handle:
            df = pd.read_csv(handle, compression=compression, low_memory=False)
    except FileNotFoundError as exc:
        raise DataAccessError(f"Storm data file not found: {path}") from exc
    except pd.errors.EmptyDataError as exc:
        raise DataAccessError(f"Storm data file is empty: {path}") from exc
    except (
        OSError,
        lzma.LZMAError,
        zipfile.BadZipFile,
        EOFError,
        UnicodeDecodeError,
        pd.errors.ParserError,
        ValueError,
    ) as exc:
        raise DataAccessError(f"Could not read storm data from {path}: {exc}") from exc

    if len(df.columns) < 2:
        raise DataAccessError(
            f"{path} does not look like a delimited table "
            f"(found {len(df.columns)} column)"
        )

    logger.info(
        "Loaded %s: %s rows, %s columns",
        path.name,
        f"{len(df):,}",
        len(df.columns),
    )
    return df


# ── Node 2 ───────────────────────────────────────────────────────────
def _rename_source_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Map NOAA column names (any case) onto their semantic names."""
    lookup = {str(col).strip().upper(): col for col in df.columns}

    renames: dict[str, str] = {}
    missing: list[str] = []
    for source, target in SOURCE_COLUMNS.items():
        original = lookup.get(source, lookup.get(target.upper()))
        if original is None:
            missing.append(source)
        else:
            renames[original] = target

    if missing:
        raise SchemaError(f"Expected columns not found in data: {missing}")
    return df.rename(columns=renames)


def _uppercase(series: pd.Series) -> pd.Series:
    """Uppercase text values; missing and non-text values pass through."""
    return series.map(lambda value: value.upper() if isinstance(value, str) else value)


def _count_unrecognized(scale: pd.Series) -> int:
    return int((~scale.isin(_SCALE_CODES)).sum())


def normalize_events(df: pd.DataFrame) -> tuple[pd.DataFrame, NormalizationReport]:
    """Parse timestamps, uppercase labels and scale damage into dollars.

    Rules, applied per row:
    - ``begin_timestamp`` parsed from ``%m/%d/%Y %H:%M:%S``; failures
      become NaT and the row is kept.
    - ``event_type`` and both scale codes are uppercased.  Labels are
      otherwise kept verbatim ("TSTM WIND", " TSTM WIND" and
      "THUNDERSTORM WIND" stay distinct).
    - ``property_damage`` / ``crop_damage`` = raw value × multiplier of
      the scale code.  Codes outside H/K/M/B (including blanks) give a
      null damage, never zero and never the raw value.

    The raw/scale column pairs are dropped once the dollar columns exist.
    A table that already has the dollar columns is rejected rather than
    normalized twice.

    Args:
        df: Raw DataFrame from ``load_storm_data``.

    Returns:
        The normalized table (a new DataFrame) and a report counting the
        rows that lost information on the way.

    Raises:
        SchemaError: A required column is missing, the table is already
            normalized, or an injury/fatality count is not a
            non-negative whole number.
    """
    already = [col for _, _, col in _DAMAGE_COLUMNS if col in df.columns]
    if already:
        raise SchemaError(
            f"Table is already normalized (found derived columns {already}); "
            "the damage scale codes have been consumed"
        )

    df = _rename_source_columns(df)

    raw_timestamps = df["begin_timestamp"]
    df["begin_timestamp"] = pd.to_datetime(
        raw_timestamps, format=TIMESTAMP_FORMAT, errors="coerce"
    )
    null_timestamps = int(df["begin_timestamp"].isna().sum())
    unparseable = int((raw_timestamps.notna() & df["begin_timestamp"].isna()).sum())
    if null_timestamps > 0:
        logger.warning(
            "begin_timestamp: %s values are null (%s could not be parsed)",
            f"{null_timestamps:,}",
            f"{unparseable:,}",
        )

    df["event_type"] = _uppercase(df["event_type"])

    for col in ("injuries", "fatalities"):
        counts = pd.to_numeric(df[col], errors="coerce")
        invalid = counts.isna() | (counts < 0) | (counts % 1 != 0)
        if invalid.any():
            raise SchemaError(
                f"{col}: {int(invalid.sum()):,} values are not non-negative "
                f"whole numbers. Examples: {df.loc[invalid, col].head(5).tolist()}"
            )
        df[col] = counts.astype("int64")

    unrecognized: dict[str, int] = {}
    for raw_col, scale_col, new_col in _DAMAGE_COLUMNS:
        scale = _uppercase(df[scale_col])
        multiplier = scale.map(DAMAGE_MULTIPLIERS)
        df[new_col] = pd.to_numeric(df[raw_col], errors="coerce") * multiplier

        unrecognized[new_col] = _count_unrecognized(scale)
        if unrecognized[new_col] > 0:
            bad_codes = scale[~scale.isin(_SCALE_CODES)]
            logger.warning(
                "%s: %s of %s rows have an unrecognized scale code. Codes: %s",
                scale_col,
                f"{unrecognized[new_col]:,}",
                f"{len(df):,}",
                bad_codes.value_counts(dropna=False).head(10).to_dict(),
            )

    df = df.drop(columns=[col for raw, scale, _ in _DAMAGE_COLUMNS for col in (raw, scale)])

    report = NormalizationReport(
        total_rows=len(df),
        null_timestamps=null_timestamps,
        null_property_damage=int(df["property_damage"].isna().sum()),
        null_crop_damage=int(df["crop_damage"].isna().sum()),
        unrecognized_property_scale=unrecognized["property_damage"],
        unrecognized_crop_scale=unrecognized["crop_damage"],
        distinct_event_types=int(df["event_type"].nunique()),
    )
    logger.info(
        "Normalized %s rows: %s distinct event types, "
        "%s null property damage, %s null crop damage",
        f"{report.total_rows:,}",
        f"{report.distinct_event_types:,}",
        f"{report.null_property_damage:,}",
        f"{report.null_crop_damage:,}",
    )
    return df, report


# ── Node 3 ───────────────────────────────────────────────────────────
def select_report_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Keep only the columns the analysis queries read.

    The storm file has 37 columns, most of them narrative or location
    detail.  No rows are filtered here.

    Args:
        df: Normalized DataFrame.

    Returns:
        DataFrame with exactly the columns in REPORT_COLUMNS, in order.
    """
    missing = [c for c in REPORT_COLUMNS if c not in df.columns]
    if missing:
        raise SchemaError(f"Expected columns not found in data: {missing}")

    before_cols = len(df.columns)
    df_selected = df[REPORT_COLUMNS].copy()

    logger.info(
        "Column selection: kept %d of %d columns (dropped %d)",
        len(REPORT_COLUMNS),
        before_cols,
        before_cols - len(REPORT_COLUMNS),
    )
    return df_selected
