from .model import Job, JobResult, JobStatus, RunReport
from .queue import build_queue, OrderedJobList
from .runner import run, JobEvent, RunningSet
from .launcher import Launcher
from .jobfile import load_jobs, parse_jobs
from .errors import PriorunError, ConfigError, JobFileError

__all__ = [
    "Job", "JobResult", "JobStatus", "RunReport",
    "build_queue", "OrderedJobList",
    "run", "JobEvent", "RunningSet",
    "Launcher",
    "load_jobs", "parse_jobs",
    "PriorunError", "ConfigError", "JobFileError",
]
