"""End-to-end tests for the explorer, the pipeline agent and the CLI."""

import json
import logging

import pytest

from tumor_ablation import config
from tumor_ablation.__main__ import format_summary, main
from tumor_ablation.agent import STAGES, AblationAgent
from tumor_ablation.analysis import DataExplorer
from tumor_ablation.errors import NoMatchingColumnsError
from tumor_ablation.utils import logger

from conftest import make_wdbc_frame


@pytest.fixture
def wdbc_csv(tmp_path):
    path = tmp_path / "wdbc.csv"
    make_wdbc_frame(n_per_class=30).to_csv(path, index=False)
    return str(path)


class TestDataExplorer:

    def test_sections(self, wdbc_dataset):
        report = DataExplorer().run(wdbc_dataset)
        assert set(report) == {
            "basic_stats",
            "class_balance",
            "feature_correlations",
            "top_discriminative_features",
            "family_summary",
        }

    def test_class_balance(self, wdbc_dataset):
        balance = DataExplorer().run(wdbc_dataset)["class_balance"]
        assert balance["status"] == "balanced"
        assert balance["counts"] == {config.MALIGNANT: 40, config.BENIGN: 40}

    def test_strong_family_is_most_discriminative(self, wdbc_dataset):
        report = DataExplorer().run(wdbc_dataset)
        top = report["top_discriminative_features"]
        assert len(top) == config.TOP_DISCRIMINATIVE
        assert top[0]["family"] == "radius"

        summary = {s["family"]: s for s in report["family_summary"]}
        assert list(summary) == config.FEATURE_FAMILIES
        assert len(summary["radius"]["columns"]) == 3
        assert summary["radius"]["mean_abs_t"] == max(
            s["mean_abs_t"] for s in summary.values()
        )


class TestAblationAgent:

    def test_fixed_cost_run(self, wdbc_csv):
        seen = []
        agent = AblationAgent(
            csv_path=wdbc_csv,
            families=["radius", "texture"],
            models=["svm_linear"],
            cost=1.0,
            on_progress=lambda i, total, name: seen.append((i, total, name)),
        )
        report = agent.run()

        assert [name for _, _, name in seen] == STAGES
        assert seen[-1][:2] == (len(STAGES), len(STAGES))
        assert "cost_search" not in report
        assert report["ablation"]["cost"] == 1.0
        assert [r["family"] for r in report["ablation"]["results"]] == ["radius", "texture"]
        assert report["partition"]["train_samples"] + report["partition"]["test_samples"] == 60
        json.dumps(report)

    def test_tuned_cost_comes_from_grid(self, wdbc_csv):
        agent = AblationAgent(
            csv_path=wdbc_csv,
            families=["radius"],
            models=["svm_linear"],
        )
        report = agent.run()

        grid = config.PARAM_GRIDS[config.ABLATION_MODEL]["clf__C"]
        assert len(report["cost_search"]["candidates"]) == len(grid)
        assert report["ablation"]["cost"] == report["cost_search"]["best_params"]["clf__C"]
        assert agent.ablation.families == ["radius"]

    def test_bad_family_fails_the_run(self, wdbc_csv):
        agent = AblationAgent(
            csv_path=wdbc_csv,
            families=["nucleus"],
            models=["svm_linear"],
            cost=1.0,
        )
        with pytest.raises(NoMatchingColumnsError):
            agent.run()
        assert agent.ablation is None


class TestCli:

    def test_list_families(self, capsys):
        main(["--list-families"])
        out = capsys.readouterr().out
        for family in config.FEATURE_FAMILIES:
            assert family in out

    def test_run_prints_tables(self, wdbc_csv, capsys):
        main([
            "--csv", wdbc_csv,
            "--families", "radius", "area",
            "--models", "svm_linear",
            "--cost", "0.5",
            "--quiet",
        ])
        out = capsys.readouterr().out
        assert "ABLATION (linear SVM, C=0.5" in out
        assert "MODEL COMPARISON" in out
        assert "radius" in out and "area" in out

    def test_failure_exits_non_zero(self, wdbc_csv, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--csv", wdbc_csv, "--families", "typo", "--models", "svm_linear",
                  "--cost", "1", "--quiet"])
        assert excinfo.value.code == 1
        assert "no matching columns" in capsys.readouterr().err

    def test_format_summary_without_sections(self):
        assert format_summary({}) == ""


class TestLogLevel:

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("TUMOR_ABLATION_LOG_LEVEL", "debug")
        assert logger._default_level() == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, monkeypatch):
        monkeypatch.setenv("TUMOR_ABLATION_LOG_LEVEL", "chatty")
        assert logger._default_level() == logging.INFO

    def test_default_is_info(self, monkeypatch):
        monkeypatch.delenv("TUMOR_ABLATION_LOG_LEVEL", raising=False)
        assert logger._default_level() == logging.INFO

    def test_help_documents_variable(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--help"])
        assert excinfo.value.code == 0
        assert "TUMOR_ABLATION_LOG_LEVEL" in capsys.readouterr().out
