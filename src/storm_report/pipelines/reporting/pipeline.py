"""Reporting pipeline — analysis results to a Markdown report with charts."""

from kedro.pipeline import Pipeline, node, pipeline

from .nodes import render_report


def create_pipeline(**kwargs) -> Pipeline:  # noqa: ARG001
    """Create the reporting pipeline."""
    return pipeline(
        [
            node(
                func=render_report,
                inputs={
                    "injuries": "top_events_by_injuries",
                    "fatalities": "top_events_by_fatalities",
                    "property_damage": "top_events_by_property_damage",
                    "crop_damage": "top_events_by_crop_damage",
                    "health_impact": "top_events_by_health_impact",
                    "economic_damage": "top_events_by_economic_damage",
                    "annual_series": "annual_wind_series",
                    "quality": "normalization_report",
                    "output_dir": "params:output_dir",
                    "dpi": "params:chart_dpi",
                },
                outputs="report_path",
                name="render_report",
            ),
        ]
    )
