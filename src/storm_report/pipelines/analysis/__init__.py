"""Analysis pipeline — top event rankings and the annual wind series."""

from .pipeline import create_pipeline

__all__ = ["create_pipeline"]
