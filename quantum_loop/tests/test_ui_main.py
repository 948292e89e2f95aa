from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quantum_loop import demo
from quantum_loop.config import (
    LEVEL_ENV_VAR,
    SOLUTION_ENV_VAR,
    ResourceDirectories,
    resolve_directories,
)
from quantum_loop.ui.main import bootstrap_message, main


def test_resolve_directories_returns_package_defaults(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(LEVEL_ENV_VAR, raising=False)
    monkeypatch.delenv(SOLUTION_ENV_VAR, raising=False)

    directories = resolve_directories()

    assert isinstance(directories, ResourceDirectories)
    assert directories.level_root.name == "levels"
    assert directories.level_root.exists()
    assert directories.solution_root.exists()


def test_resolve_directories_honours_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    level_dir = tmp_path / "levels"
    solution_dir = tmp_path / "solutions"
    level_dir.mkdir()
    solution_dir.mkdir()

    monkeypatch.setenv(LEVEL_ENV_VAR, str(level_dir))
    monkeypatch.setenv(SOLUTION_ENV_VAR, str(solution_dir))

    directories = resolve_directories()

    assert directories.level_root == level_dir
    assert directories.solution_root == solution_dir


def test_resolve_directories_errors_on_missing_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv(LEVEL_ENV_VAR, str(tmp_path / "missing_levels"))
    monkeypatch.setenv(SOLUTION_ENV_VAR, str(tmp_path / "missing_solutions"))

    with pytest.raises(FileNotFoundError):
        resolve_directories()

    directories = resolve_directories(check_exists=False)
    assert directories.level_root == tmp_path / "missing_levels"


def test_bootstrap_prints_message(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(LEVEL_ENV_VAR, raising=False)
    monkeypatch.delenv(SOLUTION_ENV_VAR, raising=False)

    exit_code = main(["--info"])
    output = capsys.readouterr().out
    directories = resolve_directories()

    assert exit_code == 0
    assert "Quantum Loop UI bootstrap" in output
    assert str(directories.level_root) in output
    assert output.strip() == bootstrap_message(directories)


def test_cli_lists_levels(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(LEVEL_ENV_VAR, raising=False)
    monkeypatch.delenv(SOLUTION_ENV_VAR, raising=False)

    exit_code = main(["--list-levels"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "Available levels" in output
    assert "level_01: Guide the light" in output


def test_demo_replays_stored_solution(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(LEVEL_ENV_VAR, raising=False)
    monkeypatch.delenv(SOLUTION_ENV_VAR, raising=False)

    exit_code = demo.main(["level_03", "--seed", "1"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "=== Quantum Loop Demo ===" in output
    assert "Complete: True" in output
