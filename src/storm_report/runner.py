"""Run the report pipelines in-process.

Builds an in-memory ``DataCatalog`` from a ``ReportConfig`` and runs the
registered pipelines with a Kedro runner.  The analysis step and the
reporting step run as two passes over the same catalog so the aggregate
results stay loadable after the report is written.
"""

from __future__ import annotations

import logging
from typing import Any

from kedro.io import DataCatalog, MemoryDataset
from kedro.runner import SequentialRunner, ThreadRunner

from storm_report.config import ReportConfig
from storm_report.pipeline_registry import register_pipelines

logger = logging.getLogger(__name__)

RESULT_DATASETS: list[str] = [
    "top_events_by_injuries",
    "top_events_by_fatalities",
    "top_events_by_property_damage",
    "top_events_by_crop_damage",
    "top_events_by_health_impact",
    "top_events_by_economic_damage",
    "annual_wind_series",
    "normalization_report",
    "report_path",
]

_RUNNERS = {
    "sequential": SequentialRunner,
    "thread": ThreadRunner,
}


def run_report(config: ReportConfig) -> dict[str, Any]:
    """Load, normalize, aggregate and render one report.

    Args:
        config: Validated report configuration.

    Returns:
        Mapping of result dataset name (see RESULT_DATASETS) to its value.
    """
    pipelines = register_pipelines()
    analysis_pipeline = pipelines["data_processing"] + pipelines["analysis"]
    reporting_pipeline = pipelines["reporting"]

    parameters = config.as_parameters()
    datasets: dict[str, MemoryDataset] = {}
    for pipeline in (analysis_pipeline, reporting_pipeline):
        for name in pipeline.datasets():
            if name.startswith("params:"):
                datasets[name] = MemoryDataset(parameters[name.removeprefix("params:")])
            else:
                datasets.setdefault(name, MemoryDataset())

    catalog = DataCatalog(datasets=datasets)
    runner = _RUNNERS[config.runner]()

    logger.info("Running analysis with %s", type(runner).__name__)
    runner.run(analysis_pipeline, catalog)
    logger.info("Rendering report into %s", config.output_dir)
    runner.run(reporting_pipeline, catalog)

    return {name: datasets[name].load() for name in RESULT_DATASETS}
