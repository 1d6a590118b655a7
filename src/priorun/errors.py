# errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class PriorunError(Exception):
    """Base class for errors that abort a run."""


class ConfigError(PriorunError):
    """Bad configuration detected before any job was launched."""


@dataclass(eq=False)
class JobFileError(ConfigError):
    """
    A job file that cannot be turned into (priority, command) pairs.

    Carries enough context to point the user at the offending line
    without a traceback.
    """
    path: str
    message: str
    lineno: Optional[int] = None
    line: Optional[str] = None

    def __str__(self) -> str:
        where = self.path if self.lineno is None else f"{self.path}:{self.lineno}"
        text = f"{where}: {self.message}"
        if self.line is not None:
            text += f"\n  {self.line}"
        return text
