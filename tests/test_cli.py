"""
Tests for the command-line interface.
"""

import json
import logging

import pandas as pd
import pytest
import yaml
from click.testing import CliRunner

from vafboot.cli import main
from vafboot.logging_config import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.propagate = True


@pytest.fixture
def variants_csv(tmp_path):
    path = tmp_path / "variants.csv"
    pd.DataFrame({
        "cluster": ["A", "A", "A", "B", "B", "B", "Z", "Z"],
        "s1": [0.10, 0.12, 0.11, 0.50, 0.48, 0.52, 0.0, 0.0],
        "s2": [0.20, 0.22, 0.21, 0.40, 0.38, 0.42, 0.0, 0.01],
    }).to_csv(path, index=False)
    return path


def _invoke(args):
    runner = CliRunner()
    return runner.invoke(main, ["--log-level", "WARNING", *args])


def _context(out_dir):
    return json.loads((out_dir / "run_context.json").read_text(encoding="utf-8"))


def test_cli_help():
    """Test the CLI help output."""
    result = CliRunner().invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "Usage: main [OPTIONS] COMMAND [ARGS]..." in result.output
    assert "bootstrap distributions of cluster-mean VAFs" in result.output


def test_models_command():
    result = _invoke(["models"])
    assert result.exit_code == 0
    assert result.output.split() == [
        "normal", "normal-truncated", "beta", "binomial", "beta-binomial", "non-parametric",
    ]


class TestRunCommand:
    """End-to-end runs writing artifacts."""

    def test_run_writes_artifacts(self, variants_csv, tmp_path):
        out_dir = tmp_path / "out"
        result = _invoke([
            "--seed", "3", "run", str(variants_csv), "--out-dir", str(out_dir),
            "--vaf-as-proportion", "--num-boots", "50",
        ])
        assert result.exit_code == 0, result.output

        for name in ["boot_means_s1.parquet", "boot_means_s2.parquet", "zero_means.parquet",
                     "summary.csv", "config.yaml", "run_context.json"]:
            assert (out_dir / name).exists(), name

        matrix = pd.read_parquet(out_dir / "boot_means_s1.parquet")
        assert matrix.shape == (50, 3)
        assert list(matrix.columns) == ["A", "B", "Z"]

        context = _context(out_dir)
        assert context["seed"] == 3
        assert context["samples"] == ["s1", "s2"]
        assert context["zero_means"] is True
        assert context["model"] == "non-parametric"

        saved = yaml.safe_load((out_dir / "config.yaml").read_text(encoding="utf-8"))
        assert saved["bootstrap"]["num_boots"] == 50
        assert saved["columns"]["vaf_in_percent"] is False

    def test_same_seed_same_hash(self, variants_csv, tmp_path):
        hashes = []
        for name in ["first", "second"]:
            out_dir = tmp_path / name
            result = _invoke([
                "--seed", "11", "run", str(variants_csv), "--out-dir", str(out_dir),
                "--vaf-as-proportion", "--num-boots", "20", "--model", "binomial",
            ])
            assert result.exit_code == 0, result.output
            hashes.append(_context(out_dir)["result_hash"])
        assert hashes[0] == hashes[1]

    def test_selected_columns_and_zero_override(self, variants_csv, tmp_path):
        out_dir = tmp_path / "out"
        result = _invoke([
            "run", str(variants_csv), "--out-dir", str(out_dir), "--vaf-as-proportion",
            "--vaf-col", "s2", "--num-boots", "30", "--zero-sample", "0.01,0.02",
        ])
        assert result.exit_code == 0, result.output
        assert _context(out_dir)["samples"] == ["s2"]
        assert not (out_dir / "boot_means_s1.parquet").exists()
        zero = pd.read_parquet(out_dir / "zero_means.parquet")
        assert zero["zero.means"].between(0.01 - 1e-12, 0.02 + 1e-12).all()

    def test_config_file_supplies_settings(self, variants_csv, tmp_path):
        config_path = tmp_path / "run.yaml"
        config_path.write_text(yaml.safe_dump({
            "run_id": "from_file",
            "seed": 5,
            "columns": {"vaf_in_percent": False},
            "bootstrap": {"model": "normal", "num_boots": 25},
        }), encoding="utf-8")
        out_dir = tmp_path / "out"
        result = _invoke(["--config", str(config_path), "run", str(variants_csv), "--out-dir", str(out_dir)])
        assert result.exit_code == 0, result.output
        context = _context(out_dir)
        assert context["run_id"] == "from_file"
        assert context["seed"] == 5
        assert context["model"] == "normal"
        assert context["num_boots"] == 25

    def test_malformed_config_file(self, variants_csv, tmp_path):
        config_path = tmp_path / "broken.yaml"
        config_path.write_text("run_id: [unclosed\nseed: 1\n", encoding="utf-8")
        result = _invoke(["--config", str(config_path), "run", str(variants_csv), "--out-dir", str(tmp_path / "out")])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid YAML" in result.output

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"seed": "7"}, "seed must be an integer"),
            ({"bootstrap": {"model": "gamma"}}, "bootstrap.model"),
            ({"bootstrap": {"weighted": "yes"}}, "bootstrap.weighted"),
        ],
    )
    def test_invalid_config_values(self, variants_csv, tmp_path, overrides, message):
        config = {"run_id": "bad_values", "seed": 1, **overrides}
        config_path = tmp_path / "run.yaml"
        config_path.write_text(yaml.safe_dump(config), encoding="utf-8")
        out_dir = tmp_path / "out"
        result = _invoke(["--config", str(config_path), "run", str(variants_csv), "--out-dir", str(out_dir)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert message in result.output
        assert not (out_dir / "run_context.json").exists()

    def test_out_of_range_zero_sample(self, variants_csv, tmp_path):
        result = _invoke([
            "run", str(variants_csv), "--out-dir", str(tmp_path / "out"),
            "--vaf-as-proportion", "--zero-sample", "0.01,5",
        ])
        assert result.exit_code == 1
        assert "zero_sample" in result.output

    def test_degenerate_cluster_fails(self, tmp_path):
        path = tmp_path / "flat.csv"
        pd.DataFrame({"cluster": ["c"] * 3, "s": [0.4, 0.4, 0.4]}).to_csv(path, index=False)
        result = _invoke([
            "run", str(path), "--out-dir", str(tmp_path / "out"),
            "--vaf-as-proportion", "--model", "beta",
        ])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_percent_default_rejects_proportion_violations(self, tmp_path):
        path = tmp_path / "pct.tsv"
        pd.DataFrame({"cluster": ["c", "c"], "s": [150.0, 20.0]}).to_csv(path, sep="\t", index=False)
        result = _invoke(["run", str(path), "--out-dir", str(tmp_path / "out")])
        assert result.exit_code == 1
        assert "between 0 and 1" in result.output

    def test_no_sample_columns(self, tmp_path):
        path = tmp_path / "clusters_only.csv"
        pd.DataFrame({"cluster": ["A", "B"]}).to_csv(path, index=False)
        out_dir = tmp_path / "out"
        result = _invoke(["run", str(path), "--out-dir", str(out_dir)])
        assert result.exit_code == 0, result.output
        context = _context(out_dir)
        assert context["samples"] == []
        assert context["result_hash"] is None
        assert not (out_dir / "summary.csv").exists()


class TestValidateConfigCommand:
    """The validate-config command."""

    def test_valid(self, tmp_path):
        path = tmp_path / "ok.yaml"
        path.write_text(yaml.safe_dump({
            "run_id": "ok", "seed": 1, "columns": {"vaf": ["s1"]},
        }), encoding="utf-8")
        result = _invoke(["validate-config", str(path)])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output

    def test_invalid(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump({
            "run_id": "bad", "seed": 1, "bootstrap": {"model": "gamma"},
        }), encoding="utf-8")
        result = _invoke(["validate-config", str(path)])
        assert result.exit_code == 1
        assert "error: bootstrap.model" in result.output

    def test_missing_file(self, tmp_path):
        result = _invoke(["validate-config", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "not found" in result.output
