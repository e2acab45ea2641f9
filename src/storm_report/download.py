"""Download the compressed storm database.

The file is stored exactly as published (still bzip2-compressed); the
loader reads it in place.
"""

from __future__ import annotations

import logging
from pathlib import Path

import requests

from storm_report.errors import DataAccessError

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_URL = "https://d396qusza40orc.cloudfront.net/repdata%2Fdata%2FStormData.csv.bz2"


def fetch_storm_data(
    url: str,
    destination: str | Path,
    chunk_size: int = 8192,
    timeout: float = 60.0,
) -> Path:
    """Stream ``url`` into ``destination`` unless it already exists.

    Data is written to ``<destination>.part`` and renamed once complete,
    so an interrupted download never leaves a truncated input behind.

    Args:
        url: Source URL of the compressed CSV.
        destination: Local file path.
        chunk_size: Bytes per streamed chunk.
        timeout: Seconds to wait for the server.

    Returns:
        Path of the local file.

    Raises:
        DataAccessError: The request failed or returned an HTTP error.
    """
    target = Path(destination)
    if target.exists():
        logger.info("Already exists, skipping download: %s", target)
        return target

    target.parent.mkdir(parents=True, exist_ok=True)
    partial = target.with_name(target.name + ".part")

    logger.info("Downloading %s -> %s", url, target)
    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            with partial.open("wb") as f:
                for chunk in response.iter_content(chunk_size=chunk_size):
                    f.write(chunk)
    except requests.RequestException as exc:
        partial.unlink(missing_ok=True)
        raise DataAccessError(f"Could not download storm data from {url}: {exc}") from exc

    partial.replace(target)
    logger.info("Downloaded %.1f MB", target.stat().st_size / 1024 / 1024)
    return target
