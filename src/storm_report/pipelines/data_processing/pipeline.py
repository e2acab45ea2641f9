"""Raw → report-ready pipeline for the NOAA storm database.

This pipeline reads the compressed storm CSV, normalizes dates, labels
and damage figures, and projects the seven columns the analysis
pipeline works on.
"""

from kedro.pipeline import Pipeline, node, pipeline

from .nodes import (
    load_storm_data,
    normalize_events,
    select_report_columns,
)


def create_pipeline(**kwargs) -> Pipeline:  # noqa: ARG001
    """Create the data_processing pipeline.

    Node chain:
        storm CSV → load → normalize (+ normalization report)
        → select report columns → storm_events
    """
    return pipeline(
        [
            node(
                func=load_storm_data,
                inputs="params:input_path",
                outputs="storm_events_raw",
                name="load_storm_data",
            ),
            node(
                func=normalize_events,
                inputs="storm_events_raw",
                outputs=["storm_events_normalized", "normalization_report"],
                name="normalize_events",
            ),
            node(
                func=select_report_columns,
                inputs="storm_events_normalized",
                outputs="storm_events",
                name="select_report_columns",
            ),
        ]
    )
