"""Analysis pipeline — report-ready events to ranked and yearly aggregates.

Node dependency graph:
    storm_events, params:top_k -> [top_events_by_*]     -> six rankings
    storm_events               -> [annual_wind_series]  -> annual_wind_series

Every node depends only on storm_events, so all seven can run in parallel.
"""

from kedro.pipeline import Pipeline, node, pipeline

from .nodes import (
    annual_wind_series,
    top_events_by_crop_damage,
    top_events_by_economic_damage,
    top_events_by_fatalities,
    top_events_by_health_impact,
    top_events_by_injuries,
    top_events_by_property_damage,
)

RANKING_QUERIES = [
    top_events_by_injuries,
    top_events_by_fatalities,
    top_events_by_property_damage,
    top_events_by_crop_damage,
    top_events_by_health_impact,
    top_events_by_economic_damage,
]


def create_pipeline(**kwargs) -> Pipeline:  # noqa: ARG001
    """Create the analysis pipeline."""
    ranking_nodes = [
        node(
            func=query,
            inputs=["storm_events", "params:top_k"],
            outputs=query.__name__,
            name=query.__name__,
        )
        for query in RANKING_QUERIES
    ]
    return pipeline(
        [
            *ranking_nodes,
            node(
                func=annual_wind_series,
                inputs="storm_events",
                outputs="annual_wind_series",
                name="annual_wind_series",
            ),
        ]
    )
