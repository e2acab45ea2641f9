"""Exceptions raised by the storm report pipeline.

Fatal errors only.  Rows that lose information during normalization
(unparseable timestamps, unknown damage scale codes) are counted in a
``NormalizationReport`` instead of raising.
"""


class StormReportError(Exception):
    """Base class for every error raised by this package."""


class DataAccessError(StormReportError):
    """The input resource is missing, unreadable or not delimited text."""


class SchemaError(StormReportError):
    """An expected column is absent from a table."""


class ConfigError(StormReportError):
    """A configuration value is missing or out of range."""
