"""Reporting pipeline — Markdown report and charts."""

from .pipeline import create_pipeline

__all__ = ["create_pipeline"]
