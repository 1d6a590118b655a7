# cli.py
from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from priorun.errors import ConfigError, JobFileError
from priorun.jobfile import load_jobs
from priorun.launcher import Launcher
from priorun.queue import build_queue
from priorun.runner import run as run_jobs
from priorun.ui.console import Console, get_console, set_console


def _load_queue(job_file: str):
    console = get_console()
    try:
        pairs = load_jobs(job_file)
    except JobFileError as e:
        console.print_error(
            "Invalid job file",
            str(e),
            suggestion="Each line must look like:\n  <priority> <command>\n\nFor example:\n  1 make build",
        )
        sys.exit(1)
    return build_queue(pairs)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
def cli(debug):
    """priorun: run shell commands by priority with a concurrency cap."""
    set_console(Console(debug=debug))


@cli.command()
@click.argument("job_file", type=click.Path(dir_okay=False, allow_dash=True))
@click.option(
    "--max-jobs",
    "-j",
    required=True,
    type=click.IntRange(min=1),
    envvar="PRIORUN_MAX_JOBS",
    show_envvar=True,
    help="Maximum number of jobs running at the same time",
)
@click.option("--shell/--no-shell", default=True, show_default=True, help="Run commands through /bin/sh")
@click.option(
    "--cwd",
    default=None,
    type=click.Path(file_okay=False),
    help="Working directory for every job (defaults to the current directory)",
)
@click.option("--always-zero", is_flag=True, default=False, help="Exit 0 even if some jobs failed")
@click.option(
    "--report",
    "report_path",
    default=None,
    type=click.Path(dir_okay=False, writable=True),
    help="Write a JSON run report to this path",
)
def run(job_file, max_jobs, shell, cwd, always_zero, report_path):
    """Run every job in JOB_FILE ('-' for stdin), lowest priority first."""
    console = get_console()

    try:
        jobs = _load_queue(job_file)

        if not jobs:
            console.print_info(f"No jobs in {job_file}, nothing to do.")
            return

        console.print_run_started(
            job_file=job_file,
            job_count=len(jobs),
            max_concurrent_jobs=max_jobs,
        )

        report = run_jobs(
            jobs,
            max_jobs,
            launch=Launcher(shell=shell, cwd=cwd),
            on_event=console.on_event,
        )

        console.print_results(report)

        if report_path:
            _write_report(report_path, report)

        sys.exit(report.exit_code(always_zero=always_zero))

    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except ConfigError as e:
        console.print_error("Invalid configuration", str(e))
        sys.exit(1)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


def _write_report(report_path: str, report) -> None:
    console = get_console()
    try:
        Path(report_path).write_text(json.dumps(report.to_dict(), indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        console.print_error("Could not write report", str(e))
        sys.exit(1)
    console.print_debug(f"report written to {report_path}")


@cli.command()
@click.argument("job_file", type=click.Path(dir_okay=False, allow_dash=True))
def plan(job_file):
    """Print the launch order for JOB_FILE without running anything."""
    console = get_console()
    try:
        jobs = _load_queue(job_file)
        if not jobs:
            console.print_info(f"No jobs in {job_file}.")
            return
        console.print_plan(jobs)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
