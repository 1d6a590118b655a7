from __future__ import annotations

import pytest

from priorun.launcher import Launcher
from priorun.model import Job


def _job(command: str) -> Job:
    return Job(priority=1, command=command)


def test_shell_launch_returns_waitable_process() -> None:
    proc = Launcher()(_job("exit 4"))

    assert proc.wait() == 4


def test_env_overlays_parent_environment(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("PRIORUN_PARENT", "kept")
    out = tmp_path / "env.txt"

    launch = Launcher(env={"PRIORUN_EXTRA": "added"})
    proc = launch(_job(f'echo "$PRIORUN_PARENT $PRIORUN_EXTRA" > {out}'))

    assert proc.wait() == 0
    assert out.read_text().strip() == "kept added"


def test_cwd_is_used(tmp_path) -> None:
    proc = Launcher(cwd=tmp_path)(_job("touch marker"))

    assert proc.wait() == 0
    assert (tmp_path / "marker").exists()


def test_missing_cwd_fails_at_launch(tmp_path) -> None:
    launch = Launcher(cwd=tmp_path / "gone")

    with pytest.raises(FileNotFoundError):
        launch(_job("true"))


def test_no_shell_splits_arguments(tmp_path) -> None:
    target = tmp_path / "with space"

    proc = Launcher(shell=False)(_job(f"mkdir '{target}'"))

    assert proc.wait() == 0
    assert target.is_dir()


def test_no_shell_missing_executable_raises() -> None:
    with pytest.raises(FileNotFoundError):
        Launcher(shell=False)(_job("priorun-no-such-binary"))


def test_no_shell_unbalanced_quotes_raise() -> None:
    with pytest.raises(ValueError):
        Launcher(shell=False)(_job("echo 'oops"))
