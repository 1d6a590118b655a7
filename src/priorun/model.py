# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Job:
    """A single shell command with its launch priority."""
    priority: int
    command: str
    sequence_index: int = 0  # position in the input, tie-break for equal priorities

    @property
    def label(self) -> str:
        return f"[{self.priority}] {self.command}"


class JobStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    LAUNCH_ERROR = "launch-error"


@dataclass
class JobResult:
    """
    Terminal outcome of one job.

    launch_position is the job's place in the launch order and is set for
    every job, including ones that could not be started. completion_position
    is the order in which completions were observed and stays None for
    launch errors.
    """
    job: Job
    launch_position: int
    status: JobStatus
    exit_code: Optional[int] = None
    error: Optional[str] = None
    started_at: Optional[float] = None
    ended_at: Optional[float] = None
    completion_position: Optional[int] = None
    elapsed: Optional[float] = None  # measured with time.monotonic()

    @property
    def duration(self) -> Optional[float]:
        if self.elapsed is not None:
            return self.elapsed
        if self.started_at is None or self.ended_at is None:
            return None
        return self.ended_at - self.started_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "priority": self.job.priority,
            "command": self.job.command,
            "sequence_index": self.job.sequence_index,
            "launch_position": self.launch_position,
            "completion_position": self.completion_position,
            "status": self.status.value,
            "exit_code": self.exit_code,
            "error": self.error,
            "started_at": self.started_at,
            "ended_at": self.ended_at,
            "duration": self.duration,
        }


@dataclass
class RunReport:
    """Summary of a whole run, built once every launched job has terminated."""
    results: List[JobResult] = field(default_factory=list)
    max_concurrent_jobs: int = 1
    peak_concurrency: int = 0
    started_at: Optional[float] = None
    ended_at: Optional[float] = None
    elapsed: Optional[float] = None

    @property
    def duration(self) -> Optional[float]:
        if self.elapsed is not None:
            return self.elapsed
        if self.started_at is None or self.ended_at is None:
            return None
        return self.ended_at - self.started_at

    @property
    def succeeded(self) -> List[JobResult]:
        return [r for r in self.results if r.status is JobStatus.SUCCEEDED]

    @property
    def failed(self) -> List[JobResult]:
        return [r for r in self.results if r.status is JobStatus.FAILED]

    @property
    def launch_errors(self) -> List[JobResult]:
        return [r for r in self.results if r.status is JobStatus.LAUNCH_ERROR]

    @property
    def ok(self) -> bool:
        return all(r.status is JobStatus.SUCCEEDED for r in self.results)

    def launch_order(self) -> List[Job]:
        return [r.job for r in sorted(self.results, key=lambda r: r.launch_position)]

    def completion_order(self) -> List[Job]:
        done = [r for r in self.results if r.completion_position is not None]
        return [r.job for r in sorted(done, key=lambda r: r.completion_position)]

    def exit_code(self, always_zero: bool = False) -> int:
        if always_zero or self.ok:
            return 0
        return 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_concurrent_jobs": self.max_concurrent_jobs,
            "peak_concurrency": self.peak_concurrency,
            "started_at": self.started_at,
            "ended_at": self.ended_at,
            "duration": self.duration,
            "summary": {
                "total": len(self.results),
                "succeeded": len(self.succeeded),
                "failed": len(self.failed),
                "launch_errors": len(self.launch_errors),
            },
            "jobs": [r.to_dict() for r in self.results],
        }
