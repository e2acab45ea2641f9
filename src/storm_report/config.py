"""Report configuration.

Parameters live in ``conf/<env>/parameters.yml`` and are read with
Kedro's ``OmegaConfigLoader`` (``local`` overrides ``base``), so the
same values drive ``kedro run`` and the ``storm-report`` command.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

from kedro.config import OmegaConfigLoader

from storm_report.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONF_SOURCE = "conf"
RUNNERS = ("sequential", "thread")


@dataclass(frozen=True)
class ReportConfig:
    """Settings for one report run."""

    input_path: str
    top_k: int = 10
    output_dir: str = "data/08_reporting"
    chart_dpi: int = 100
    source_url: str | None = None
    download_if_missing: bool = False
    runner: str = "sequential"

    def __post_init__(self) -> None:
        if not self.input_path:
            raise ConfigError("input_path must be set")
        if isinstance(self.top_k, bool) or not isinstance(self.top_k, int) or self.top_k < 1:
            raise ConfigError(f"top_k must be a positive integer, got {self.top_k!r}")
        if not isinstance(self.chart_dpi, int) or self.chart_dpi < 1:
            raise ConfigError(f"chart_dpi must be a positive integer, got {self.chart_dpi!r}")
        if self.runner not in RUNNERS:
            raise ConfigError(f"runner must be one of {RUNNERS}, got {self.runner!r}")
        if self.download_if_missing and not self.source_url:
            raise ConfigError("download_if_missing requires source_url")

    @classmethod
    def from_parameters(cls, parameters: dict[str, Any]) -> ReportConfig:
        """Build a config from a parameters mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(parameters) - known)
        if unknown:
            logger.debug("Ignoring parameters not used by the report: %s", unknown)
        if "input_path" not in parameters:
            raise ConfigError("input_path is missing from the parameters")
        return cls(**{key: value for key, value in parameters.items() if key in known})

    def with_overrides(self, **overrides: Any) -> ReportConfig:
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)

    def as_parameters(self) -> dict[str, Any]:
        return asdict(self)


def load_config(
    conf_source: str | Path = DEFAULT_CONF_SOURCE,
    env: str | None = None,
    **overrides: Any,
) -> ReportConfig:
    """Read parameters from ``conf_source`` and apply overrides.

    Args:
        conf_source: Kedro configuration directory (holding ``base/`` and
            ``local/``).
        env: Environment layered over ``base``; defaults to ``local``.
        **overrides: Values replacing the configured ones; ``None`` values
            are ignored.

    Returns:
        Validated ReportConfig.
    """
    loader = OmegaConfigLoader(
        conf_source=str(conf_source),
        env=env,
        base_env="base",
        default_run_env="local",
    )
    parameters = dict(loader["parameters"])
    config = ReportConfig.from_parameters(parameters).with_overrides(**overrides)
    logger.info(
        "Configuration loaded from %s (env=%s): input_path=%s, top_k=%d",
        conf_source,
        env or "local",
        config.input_path,
        config.top_k,
    )
    return config
