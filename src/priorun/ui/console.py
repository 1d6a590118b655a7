"""Console output formatting utilities for priorun."""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from ..model import Job, JobStatus, RunReport
from ..runner import FINISHED, LAUNCH_ERROR, LAUNCHED, JobEvent


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_header(self, title: str) -> None:
        """Print a section header."""
        print(f"\n{title}")
        print("-" * len(title))

    def print_run_started(
        self,
        job_file: str,
        job_count: int,
        max_concurrent_jobs: int,
    ) -> None:
        """Print run start information."""
        print("\nRUN STARTED")
        print(f"Job file: {job_file}")
        print(f"Jobs: {job_count}")
        print(f"Max concurrent: {max_concurrent_jobs}")
        print(flush=True)

    def print_job_launched(self, job: Job, running: int) -> None:
        # flushed so the line lands before the child's own output
        print(f"LAUNCH {job.label} (running: {running})", flush=True)

    def print_job_finished(
        self,
        job: Job,
        status: JobStatus,
        exit_code: Optional[int],
        duration: Optional[float],
        error: Optional[str] = None,
    ) -> None:
        word = "DONE" if status is JobStatus.SUCCEEDED else "FAILED"
        line = f"{word} {job.label}"
        if exit_code is not None:
            line += f" (exit={exit_code}"
            if duration is not None:
                line += f", {duration:.1f}s"
            line += ")"
        print(line, flush=True)
        if error:
            print(f"Error: {error}", file=sys.stderr)

    def print_launch_error(self, job: Job, reason: str) -> None:
        """Print a job that could not be started."""
        print(f"LAUNCH ERROR {job.label}", file=sys.stderr)
        print(f"Error: {reason}", file=sys.stderr)

    def on_event(self, event: JobEvent) -> None:
        """Executor hook: report each lifecycle event as it happens."""
        if event.kind == LAUNCHED:
            self.print_job_launched(event.job, event.running)
        elif event.kind == FINISHED and event.result is not None:
            r = event.result
            self.print_job_finished(r.job, r.status, r.exit_code, r.duration, r.error)
        elif event.kind == LAUNCH_ERROR and event.result is not None:
            self.print_launch_error(event.job, event.result.error or "unknown error")
        self.print_debug(f"{event.kind} #{event.launch_position} running={event.running}")

    def print_plan(self, jobs: Sequence[Job]) -> None:
        """Print the launch order without running anything."""
        self.print_header("LAUNCH ORDER")
        for position, job in enumerate(jobs, start=1):
            print(f"  {position:>3}. {job.label}")

    def print_results(self, report: RunReport) -> None:
        """Print final results summary."""
        print("\n" + "=" * 40)
        print("RESULTS")
        print("=" * 40)
        for r in report.results:
            status_display = "SUCCESS" if r.status is JobStatus.SUCCEEDED else r.status.value.upper()
            extra = f" (exit={r.exit_code})" if r.status is JobStatus.FAILED and r.exit_code is not None else ""
            print(f"  {r.job.label}: {status_display}{extra}")
        print(
            f"\n{len(report.succeeded)} succeeded, {len(report.failed)} failed, "
            f"{len(report.launch_errors)} launch errors"
        )
        if report.duration is not None:
            print(f"Total time: {report.duration:.1f}s (peak concurrency {report.peak_concurrency})")

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: Exception) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
