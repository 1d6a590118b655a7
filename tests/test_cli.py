from __future__ import annotations

import json

from click.testing import CliRunner

from priorun.cli import cli


def _write(tmp_path, text: str):
    path = tmp_path / "jobs.txt"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_run_all_succeed(tmp_path) -> None:
    path = _write(tmp_path, "3 echo c\n1 echo a\n2 echo b\n")

    result = CliRunner().invoke(cli, ["run", path, "--max-jobs", "3"])

    assert result.exit_code == 0, result.output
    launches = [line for line in result.output.splitlines() if line.startswith("LAUNCH ")]
    assert launches == [
        "LAUNCH [1] echo a (running: 1)",
        "LAUNCH [2] echo b (running: 2)",
        "LAUNCH [3] echo c (running: 3)",
    ]
    assert "3 succeeded, 0 failed, 0 launch errors" in result.output


def test_run_failure_sets_exit_code(tmp_path) -> None:
    path = _write(tmp_path, "1 false\n2 true\n")

    result = CliRunner().invoke(cli, ["run", path, "-j", "2"])

    assert result.exit_code == 1
    assert "FAILED [1] false" in result.output
    assert "1 succeeded, 1 failed" in result.output


def test_always_zero_keeps_exit_code_zero(tmp_path) -> None:
    path = _write(tmp_path, "1 false\n")

    result = CliRunner().invoke(cli, ["run", path, "-j", "1", "--always-zero"])

    assert result.exit_code == 0


def test_max_jobs_from_environment(tmp_path) -> None:
    path = _write(tmp_path, "1 true\n")

    result = CliRunner().invoke(cli, ["run", path], env={"PRIORUN_MAX_JOBS": "2"})

    assert result.exit_code == 0, result.output
    assert "Max concurrent: 2" in result.output


def test_max_jobs_required_and_positive(tmp_path) -> None:
    path = _write(tmp_path, "1 touch should-not-exist\n")
    runner = CliRunner()

    missing = runner.invoke(cli, ["run", path], env={"PRIORUN_MAX_JOBS": None})
    zero = runner.invoke(cli, ["run", path, "-j", "0"])
    text = runner.invoke(cli, ["run", path, "-j", "many"])

    assert missing.exit_code == 2
    assert zero.exit_code == 2
    assert text.exit_code == 2
    assert "LAUNCH" not in zero.output


def test_malformed_job_file(tmp_path) -> None:
    path = _write(tmp_path, "1 echo ok\nnot-a-priority echo\n")

    result = CliRunner().invoke(cli, ["run", path, "-j", "1"])

    assert result.exit_code == 1
    assert "Invalid job file" in result.output
    assert "jobs.txt:2" in result.output
    assert "LAUNCH" not in result.output


def test_missing_job_file(tmp_path) -> None:
    result = CliRunner().invoke(cli, ["run", str(tmp_path / "nope.txt"), "-j", "1"])

    assert result.exit_code == 1
    assert "job file not found" in result.output


def test_empty_job_file(tmp_path) -> None:
    path = _write(tmp_path, "# nothing yet\n\n")

    result = CliRunner().invoke(cli, ["run", path, "-j", "5"])

    assert result.exit_code == 0
    assert "nothing to do" in result.output


def test_launch_error_without_shell(tmp_path) -> None:
    path = _write(tmp_path, "1 priorun-no-such-binary\n2 true\n")

    result = CliRunner().invoke(cli, ["run", path, "-j", "1", "--no-shell"])

    assert result.exit_code == 1
    assert "LAUNCH ERROR [1] priorun-no-such-binary" in result.output
    assert "1 succeeded, 0 failed, 1 launch errors" in result.output


def test_json_report(tmp_path) -> None:
    path = _write(tmp_path, "2 exit 5\n1 true\n")
    report_path = tmp_path / "report.json"

    result = CliRunner().invoke(cli, ["run", path, "-j", "1", "--report", str(report_path)])

    assert result.exit_code == 1
    data = json.loads(report_path.read_text())
    assert [j["command"] for j in data["jobs"]] == ["true", "exit 5"]
    assert [j["status"] for j in data["jobs"]] == ["succeeded", "failed"]
    assert data["jobs"][1]["exit_code"] == 5
    assert data["max_concurrent_jobs"] == 1


def test_run_reads_stdin() -> None:
    result = CliRunner().invoke(cli, ["run", "-", "-j", "2"], input="2 true\n1 true\n")

    assert result.exit_code == 0, result.output
    assert "Jobs: 2" in result.output


def test_plan_prints_order_without_running(tmp_path) -> None:
    marker = tmp_path / "ran"
    path = _write(tmp_path, f"2 echo b\n1 touch {marker}\n1 echo a2\n")

    result = CliRunner().invoke(cli, ["plan", path])

    assert result.exit_code == 0
    lines = [line.strip() for line in result.output.splitlines() if line.strip()[:1].isdigit()]
    assert lines == [f"1. [1] touch {marker}", "2. [1] echo a2", "3. [2] echo b"]
    assert not marker.exists()


def test_invalid_utf8_on_stdin_is_a_job_file_error() -> None:
    result = CliRunner().invoke(cli, ["--debug", "run", "-", "-j", "1"], input=b"1 echo \xff\xfe\n")

    assert result.exit_code == 1
    assert not isinstance(result.exception, UnicodeDecodeError)
    assert "Invalid job file" in result.output
    assert "<stdin>" in result.output


def _explode(*args, **kwargs):
    raise RuntimeError("scheduler exploded")


def test_unexpected_error_prints_message_and_exits_one(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr("priorun.cli.run_jobs", _explode)
    path = _write(tmp_path, "1 true\n")

    result = CliRunner().invoke(cli, ["run", path, "-j", "1"])

    assert result.exit_code == 1
    assert "Error: scheduler exploded" in result.output
    assert "Traceback" not in result.output


def test_debug_prints_traceback_for_unexpected_error(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr("priorun.cli.run_jobs", _explode)
    path = _write(tmp_path, "1 true\n")

    result = CliRunner().invoke(cli, ["--debug", "run", path, "-j", "1"])

    assert result.exit_code == 1
    assert "Traceback" in result.output
    assert "RuntimeError: scheduler exploded" in result.output


def test_plan_unexpected_error_exits_one(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr("priorun.cli.build_queue", _explode)
    path = _write(tmp_path, "1 true\n")

    result = CliRunner().invoke(cli, ["plan", path])

    assert result.exit_code == 1
    assert "Error: scheduler exploded" in result.output
