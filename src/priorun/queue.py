# queue.py
from __future__ import annotations

from typing import Iterable, Tuple

from .model import Job

OrderedJobList = Tuple[Job, ...]


def build_queue(pairs: Iterable[Tuple[int, str]]) -> OrderedJobList:
    """
    Turn raw (priority, command) pairs into the launch order.

    Lower priority launches first; equal priorities keep their input order.
    """
    jobs = [
        Job(priority=priority, command=command, sequence_index=i)
        for i, (priority, command) in enumerate(pairs)
    ]
    return tuple(sorted(jobs, key=lambda j: (j.priority, j.sequence_index)))
