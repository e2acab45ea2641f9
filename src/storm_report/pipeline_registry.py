"""Project pipelines."""

from __future__ import annotations

from kedro.pipeline import Pipeline

from storm_report.pipelines import analysis, data_processing, reporting


def register_pipelines() -> dict[str, Pipeline]:
    """Register the project's pipelines.

    Returns:
        A mapping from pipeline names to ``Pipeline`` objects.
    """
    processing = data_processing.create_pipeline()
    aggregates = analysis.create_pipeline()
    report = reporting.create_pipeline()
    return {
        "data_processing": processing,
        "analysis": aggregates,
        "reporting": report,
        "__default__": processing + aggregates + report,
    }
