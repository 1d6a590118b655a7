# launcher.py
from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path
from typing import Dict, Optional

from .model import Job


class Launcher:
    """
    Turns a Job into a running process.

    The child inherits our stdout/stderr so output from every job shows up
    live, interleaved, instead of being buffered until the job ends.

    shell=True hands the command line to /bin/sh. shell=False splits it with
    shlex and execs the first token directly, so a missing executable fails
    at launch instead of surfacing as exit code 127.
    """

    def __init__(
        self,
        *,
        shell: bool = True,
        cwd: str | Path | None = None,
        env: Optional[Dict[str, str]] = None,
    ):
        self.shell = shell
        self.cwd = Path(cwd).expanduser().resolve() if cwd is not None else None
        self.env = dict(env or {})

    def _environ(self) -> Optional[Dict[str, str]]:
        if not self.env:
            return None
        env = os.environ.copy()
        env.update(self.env)
        return env

    def __call__(self, job: Job) -> subprocess.Popen:
        if self.cwd is not None and not self.cwd.is_dir():
            raise FileNotFoundError(f"working directory not found: {self.cwd}")

        if self.shell:
            args: str | list[str] = job.command
        else:
            args = shlex.split(job.command)
            if not args:
                raise ValueError(f"nothing to execute in {job.command!r}")

        return subprocess.Popen(
            args,
            shell=self.shell,
            cwd=str(self.cwd) if self.cwd is not None else None,
            env=self._environ(),
        )
