#!filepath: tests/test_cli.py
import json

from typer.testing import CliRunner

from weavefit import __version__
from weavefit.cli import app

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_run_writes_reports(make_config_file, weaving_csv, tmp_path):
    config = make_config_file(weaving_csv)
    out = tmp_path / "cli_reports"

    result = runner.invoke(
        app,
        ["run", "--config", str(config), "--output", str(out), "--run-id", "cli", "--seed", "3"],
    )

    assert result.exit_code == 0, result.stdout
    assert "RMSE | standardized RMSE" in result.stdout

    summary = json.loads((out / "cli" / "summary.json").read_text(encoding="utf-8"))
    assert summary["seed"] == 3
    assert set(summary["results"]) == {"OLS", "Ridge", "LASSO"}


def test_run_with_missing_data_exits_2(make_config_file, tmp_path):
    config = make_config_file(tmp_path / "absent.csv")

    result = runner.invoke(app, ["run", "-c", str(config)])

    assert result.exit_code == 2
    assert "not found" in result.stdout


def test_run_with_invalid_config_exits_2(make_config_file, weaving_csv):
    config = make_config_file(weaving_csv, analysis={"n_folds": 1})

    result = runner.invoke(app, ["run", "-c", str(config)])

    assert result.exit_code == 2
    assert "configuration" in result.stdout


def test_run_with_missing_config_file(tmp_path):
    result = runner.invoke(app, ["run", "-c", str(tmp_path / "nope.yml")])

    assert result.exit_code == 2


def test_relative_paths_follow_working_directory(make_config_file, weaving_frame, tmp_path, monkeypatch):
    work = tmp_path / "work"
    work.mkdir()
    weaving_frame.to_csv(work / "mine.csv", index=False)
    config = make_config_file(tmp_path / "absent.csv")
    monkeypatch.chdir(work)

    result = runner.invoke(
        app,
        ["run", "-c", str(config), "--data", "mine.csv", "--output", "out", "--run-id", "rel"],
    )

    assert result.exit_code == 0, result.stdout
    assert (work / "out" / "rel" / "summary.json").exists()
