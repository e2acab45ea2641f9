"""Tests for configuration loading and validation."""

import pytest

from storm_report.config import ReportConfig, load_config
from storm_report.errors import ConfigError


@pytest.fixture()
def conf_dir(tmp_path):
    base = tmp_path / "conf" / "base"
    local = tmp_path / "conf" / "local"
    base.mkdir(parents=True)
    local.mkdir()
    (base / "parameters.yml").write_text(
        "input_path: data/01_raw/storm.csv.bz2\n"
        "top_k: 10\n"
        "output_dir: data/08_reporting\n"
        "runner: sequential\n"
        "unused_setting: 1\n"
    )
    return tmp_path / "conf"


# ── Test 1: Loading ──────────────────────────────────────────────
class TestLoadConfig:
    def test_base_values(self, conf_dir):
        config = load_config(conf_dir)

        assert config.input_path == "data/01_raw/storm.csv.bz2"
        assert config.top_k == 10
        assert config.runner == "sequential"
        assert config.download_if_missing is False

    def test_local_overrides_base(self, conf_dir):
        (conf_dir / "local" / "parameters.yml").write_text("top_k: 5\n")

        config = load_config(conf_dir)

        assert config.top_k == 5
        assert config.input_path == "data/01_raw/storm.csv.bz2"

    def test_explicit_overrides_win(self, conf_dir):
        config = load_config(conf_dir, input_path="other.csv.bz2", top_k=3)

        assert config.input_path == "other.csv.bz2"
        assert config.top_k == 3

    def test_none_overrides_are_ignored(self, conf_dir):
        config = load_config(conf_dir, input_path=None, top_k=None)

        assert config.top_k == 10

    def test_invalid_override_is_rejected(self, conf_dir):
        with pytest.raises(ConfigError):
            load_config(conf_dir, top_k=0)


# ── Test 2: Validation ───────────────────────────────────────────
class TestReportConfig:
    def test_defaults(self):
        config = ReportConfig(input_path="storm.csv.bz2")

        assert config.top_k == 10
        assert config.runner == "sequential"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"input_path": ""},
            {"input_path": "x", "top_k": 0},
            {"input_path": "x", "top_k": -3},
            {"input_path": "x", "top_k": "10"},
            {"input_path": "x", "top_k": True},
            {"input_path": "x", "chart_dpi": 0},
            {"input_path": "x", "runner": "parallel"},
            {"input_path": "x", "download_if_missing": True},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigError):
            ReportConfig(**kwargs)

    def test_from_parameters_ignores_unknown_keys(self):
        config = ReportConfig.from_parameters({"input_path": "x", "top_k": 4, "colour": "red"})

        assert config == ReportConfig(input_path="x", top_k=4)

    def test_from_parameters_requires_input_path(self):
        with pytest.raises(ConfigError, match="input_path"):
            ReportConfig.from_parameters({"top_k": 4})

    def test_as_parameters_round_trips(self):
        config = ReportConfig(input_path="x", top_k=7, runner="thread")

        assert ReportConfig.from_parameters(config.as_parameters()) == config
