"""Raw → report-ready data processing pipeline for the NOAA storm database."""

from .pipeline import create_pipeline

__all__ = ["create_pipeline"]
