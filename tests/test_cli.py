"""Tests for the command-line entry point"""

import pytest

from sentence_logic import cli
from sentence_logic.errors import OutputWriteError
from sentence_logic.summary import RunSummary


@pytest.fixture
def captured(monkeypatch):
    """Replace the pipeline with a recorder"""
    calls = []

    def fake_run(config, **kwargs):
        calls.append(config)
        return RunSummary(n_input=0, n_output=0)

    monkeypatch.setattr(cli, "run_sentence_to_logic", fake_run)
    return calls


def test_config_file_with_overrides(tmp_path, captured):
    """CLI flags override values from the YAML file"""
    config_path = tmp_path / "run.yaml"
    config_path.write_text("sentences: in.tsv\ndrop errors: true\nworkers: 2\n", encoding="utf-8")

    code = cli.main(["--config", str(config_path), "--keep-errors", "--workers", "5", "--unit-timeout", "3.5"])

    assert code == 0
    (config,) = captured
    assert config.drop_errors is False
    assert config.workers == 5
    assert config.unit_timeout_s == 3.5
    assert str(config.sentences_file) == "in.tsv"


def test_without_config_file(captured):
    code = cli.main(["--sentences", "data/s.tsv", "--output-file", "out/lf.tsv"])
    assert code == 0
    assert str(captured[0].output_file) == "out/lf.tsv"


def test_invalid_config_exits_nonzero(tmp_path, captured):
    config_path = tmp_path / "run.yaml"
    config_path.write_text("sentences: in.tsv\nbogus: 1\n", encoding="utf-8")

    assert cli.main(["--config", str(config_path)]) == 1
    assert cli.main(["--config", str(tmp_path / "missing.yaml")]) == 1
    assert captured == []


def test_destination_failure_exits_nonzero(monkeypatch):
    def failing_run(config, **kwargs):
        raise OutputWriteError("disk full")

    monkeypatch.setattr(cli, "run_sentence_to_logic", failing_run)
    assert cli.main(["--sentences", "s.tsv"]) == 1


@pytest.mark.parametrize(
    "error",
    [
        PermissionError("permission denied"),
        IsADirectoryError("is a directory"),
        UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"),
    ],
)
def test_io_and_decoding_failures_exit_nonzero(monkeypatch, error):
    """Read, decode and manifest failures are logged with exit status 1"""

    def failing_run(config, **kwargs):
        raise error

    monkeypatch.setattr(cli, "run_sentence_to_logic", failing_run)
    assert cli.main(["--sentences", "s.tsv"]) == 1
