# runner.py
from __future__ import annotations

import itertools
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Tuple

from .errors import ConfigError
from .launcher import Launcher
from .model import Job, JobResult, JobStatus, RunReport

# JobEvent.kind values
LAUNCHED = "launched"
FINISHED = "finished"
LAUNCH_ERROR = "launch-error"


class Process(Protocol):
    """Anything a launcher hands back: only a blocking wait() is needed."""

    def wait(self) -> int: ...


@dataclass(frozen=True)
class JobEvent:
    """
    Lifecycle notification emitted from the coordinating thread.

    running is the size of the running set right after the event.
    """
    kind: str
    job: Job
    launch_position: int
    running: int
    result: Optional[JobResult] = None


@dataclass
class RunningJob:
    job: Job
    launch_position: int
    process: Process
    started_at: float
    started_clock: float  # time.monotonic() at launch


class RunningSet:
    """
    Jobs that have been launched and not yet reaped, keyed by the future
    that resolves when the process exits.

    Size checks, inserts and removals all go through one lock.
    """

    def __init__(self, capacity: int):
        self.capacity = capacity
        self._lock = threading.Lock()
        self._members: Dict[Future, RunningJob] = {}
        self._peak = 0

    def add(self, future: Future, entry: RunningJob) -> None:
        with self._lock:
            self._members[future] = entry
            self._peak = max(self._peak, len(self._members))

    def remove(self, future: Future) -> RunningJob:
        with self._lock:
            return self._members.pop(future)

    def is_full(self) -> bool:
        with self._lock:
            return len(self._members) >= self.capacity

    def futures(self) -> List[Future]:
        with self._lock:
            return list(self._members)

    @property
    def peak(self) -> int:
        with self._lock:
            return self._peak

    def __len__(self) -> int:
        with self._lock:
            return len(self._members)


def _check_limit(max_concurrent_jobs: int) -> None:
    if isinstance(max_concurrent_jobs, bool) or not isinstance(max_concurrent_jobs, int):
        raise ConfigError(
            f"max_concurrent_jobs must be an integer, got {max_concurrent_jobs!r}"
        )
    if max_concurrent_jobs < 1:
        raise ConfigError(
            f"max_concurrent_jobs must be at least 1, got {max_concurrent_jobs}"
        )


def _await(process: Process) -> Tuple[int, float, float]:
    exit_code = process.wait()
    return exit_code, time.time(), time.monotonic()


def _finished_result(entry: RunningJob, future: Future, completion_position: int) -> JobResult:
    result = JobResult(
        job=entry.job,
        launch_position=entry.launch_position,
        status=JobStatus.FAILED,
        started_at=entry.started_at,
        completion_position=completion_position,
    )
    try:
        exit_code, ended_at, ended_clock = future.result()
    except Exception as e:
        # the process is gone from our view either way; its slot is freed
        result.error = f"wait failed: {e}"
        result.ended_at = time.time()
        result.elapsed = time.monotonic() - entry.started_clock
        return result

    result.exit_code = exit_code
    result.ended_at = ended_at
    result.elapsed = ended_clock - entry.started_clock
    if exit_code == 0:
        result.status = JobStatus.SUCCEEDED
    return result


def run(
    ordered_jobs: Sequence[Job],
    max_concurrent_jobs: int,
    *,
    launch: Optional[Callable[[Job], Process]] = None,
    on_event: Optional[Callable[[JobEvent], None]] = None,
) -> RunReport:
    """
    Launch every job in the given order, never more than
    max_concurrent_jobs at once, and return once all of them have exited.

    - launch order is exactly the order of ordered_jobs
    - a job that exits non-zero frees its slot like any other job
    - a job that cannot be started is recorded as a launch error, takes no
      slot, and does not stop later jobs
    - there is no timeout: a job that never exits holds its slot forever
    - an exception raised by on_event propagates out of run() once the
      jobs still running have exited; no report is returned in that case

    Completion is detected by blocking on each process's wait() in a small
    thread pool and fanning in with concurrent.futures.wait.
    """
    _check_limit(max_concurrent_jobs)
    launch = launch or Launcher()

    def emit(event: JobEvent) -> None:
        if on_event is not None:
            on_event(event)

    running = RunningSet(max_concurrent_jobs)
    results: List[JobResult] = []
    completions = itertools.count()
    started_at = time.time()
    started_clock = time.monotonic()

    def reap() -> None:
        done, _pending = wait(running.futures(), return_when=FIRST_COMPLETED)
        entries = sorted(
            ((fut, running.remove(fut)) for fut in done),
            key=lambda pair: pair[1].launch_position,
        )
        finished = [_finished_result(entry, fut, next(completions)) for fut, entry in entries]
        # every reaped job is in results before callbacks run
        results.extend(finished)
        for result in finished:
            emit(JobEvent(FINISHED, result.job, result.launch_position, len(running), result))

    with ThreadPoolExecutor(
        max_workers=max_concurrent_jobs,
        thread_name_prefix="priorun-wait",
    ) as pool:
        for position, job in enumerate(ordered_jobs):
            while running.is_full():
                reap()

            launched_at = time.time()
            launched_clock = time.monotonic()
            try:
                process = launch(job)
            except Exception as e:
                result = JobResult(
                    job=job,
                    launch_position=position,
                    status=JobStatus.LAUNCH_ERROR,
                    error=str(e) or type(e).__name__,
                    started_at=launched_at,
                    ended_at=time.time(),
                    elapsed=time.monotonic() - launched_clock,
                )
                results.append(result)
                emit(JobEvent(LAUNCH_ERROR, job, position, len(running), result))
                continue

            fut = pool.submit(_await, process)
            running.add(fut, RunningJob(job, position, process, launched_at, launched_clock))
            emit(JobEvent(LAUNCHED, job, position, len(running)))

        while len(running):
            reap()

    results.sort(key=lambda r: r.launch_position)
    return RunReport(
        results=results,
        max_concurrent_jobs=max_concurrent_jobs,
        peak_concurrency=running.peak,
        started_at=started_at,
        ended_at=time.time(),
        elapsed=time.monotonic() - started_clock,
    )
