"""Command line entry point.

Run locally:
    storm-report data/01_raw/repdata_data_StormData.csv.bz2 --top-k 10
    python -m storm_report
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from storm_report.config import DEFAULT_CONF_SOURCE, load_config
from storm_report.download import fetch_storm_data
from storm_report.log_config import configure_logging
from storm_report.runner import run_report

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storm-report",
        description="Render the severe weather impact report from the NOAA storm database.",
    )
    parser.add_argument(
        "input_path",
        nargs="?",
        help="compressed storm CSV (default: input_path from conf/<env>/parameters.yml)",
    )
    parser.add_argument("--top-k", type=int, help="number of event types per ranking")
    parser.add_argument(
        "--env",
        help="configuration environment layered over conf/base (default: local)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(Path(DEFAULT_CONF_SOURCE) / "logging.yml")
    config = load_config(
        DEFAULT_CONF_SOURCE,
        env=args.env,
        input_path=args.input_path,
        top_k=args.top_k,
    )

    if config.download_if_missing and not Path(config.input_path).exists():
        fetch_storm_data(config.source_url, config.input_path)

    results = run_report(config)
    logger.info("Report ready: %s", results["report_path"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
