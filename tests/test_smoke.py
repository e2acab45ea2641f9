"""Smoke tests — fast checks that core components load without error.

They catch import errors and broken pipeline definitions before any
data is read.  They do NOT require the storm data file.
"""

from pathlib import Path

import pytest


# ── Test 1: All pipeline modules import cleanly ─────────────────
class TestPipelineImports:
    """Verify every pipeline module can be imported and exposes create_pipeline."""

    def test_import_data_processing(self):
        from storm_report.pipelines.data_processing import create_pipeline

        pipeline = create_pipeline()
        assert len(pipeline.nodes) == 3

    def test_import_analysis(self):
        from storm_report.pipelines.analysis import create_pipeline

        pipeline = create_pipeline()
        assert len(pipeline.nodes) == 7

    def test_import_reporting(self):
        from storm_report.pipelines.reporting import create_pipeline

        pipeline = create_pipeline()
        assert len(pipeline.nodes) == 1


# ── Test 2: Pipeline registry ────────────────────────────────────
class TestPipelineRegistry:
    """Verify the registry wires the three pipelines into __default__."""

    @pytest.fixture()
    def pipelines(self):
        from storm_report.pipeline_registry import register_pipelines

        return register_pipelines()

    def test_registered_names(self, pipelines):
        assert set(pipelines) == {"data_processing", "analysis", "reporting", "__default__"}

    def test_default_runs_every_node(self, pipelines):
        assert len(pipelines["__default__"].nodes) == 11

    def test_default_inputs_are_parameters_only(self, pipelines):
        assert pipelines["__default__"].inputs() == {
            "params:input_path",
            "params:top_k",
            "params:output_dir",
            "params:chart_dpi",
        }

    def test_default_output_is_the_report(self, pipelines):
        assert pipelines["__default__"].outputs() == {"report_path"}


# ── Test 3: Command line parser ──────────────────────────────────
class TestCommandLine:
    """Only the input path, --top-k and --env are accepted."""

    def test_defaults(self):
        from storm_report.__main__ import build_parser

        args = build_parser().parse_args([])
        assert args.input_path is None
        assert args.top_k is None
        assert args.env is None

    def test_input_path_and_top_k(self):
        from storm_report.__main__ import build_parser

        args = build_parser().parse_args(["storm.csv.bz2", "--top-k", "5"])
        assert args.input_path == "storm.csv.bz2"
        assert args.top_k == 5


# ── Test 4: Kedro project settings ───────────────────────────────
class TestSettings:
    def test_config_loader(self):
        from kedro.config import OmegaConfigLoader

        from storm_report import settings

        assert settings.CONFIG_LOADER_CLASS is OmegaConfigLoader
        assert settings.CONFIG_LOADER_ARGS["default_run_env"] == "local"

    def test_project_metadata_matches_installed_kedro(self):
        import kedro
        from kedro.framework.startup import bootstrap_project

        metadata = bootstrap_project(Path(__file__).resolve().parents[1])

        assert metadata.package_name == "storm_report"
        assert metadata.kedro_init_version.split(".")[0] == kedro.__version__.split(".")[0]
