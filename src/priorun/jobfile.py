# jobfile.py
from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .errors import JobFileError

# <integer priority><whitespace><command text>
_LINE = re.compile(r"^([+-]?\d+)\s+(\S.*)$")


def parse_line(text: str, lineno: int = 0, *, path: str = "<input>") -> Optional[Tuple[int, str]]:
    """
    Parse one job line into (priority, command).

    Blank lines and '#' comments return None. Only the first whitespace
    run separates the priority from the command; the rest of the line is
    kept as-is (minus surrounding whitespace).
    """
    line = text.strip()
    if not line or line.startswith("#"):
        return None

    m = _LINE.match(line)
    if m is None:
        if line.split(None, 1)[0].lstrip("+-").isdigit():
            message = "missing command after priority"
        else:
            message = "expected '<priority> <command>' with an integer priority"
        raise JobFileError(path=path, message=message, lineno=lineno, line=line)

    return int(m.group(1)), m.group(2).strip()


def parse_jobs(lines: Iterable[str], *, path: str = "<input>") -> List[Tuple[int, str]]:
    pairs: List[Tuple[int, str]] = []
    for lineno, text in enumerate(lines, start=1):
        pair = parse_line(text, lineno, path=path)
        if pair is not None:
            pairs.append(pair)
    return pairs


def load_jobs(path: str | Path) -> List[Tuple[int, str]]:
    """
    Read a job file. '-' reads standard input.

    Raises JobFileError if the file is missing, unreadable or malformed.
    """
    if str(path) == "-":
        try:
            text = sys.stdin.read()
        except (OSError, UnicodeDecodeError) as e:
            raise JobFileError(path="<stdin>", message=f"cannot read job file: {e}") from e
        return parse_jobs(text.splitlines(), path="<stdin>")

    p = Path(path).expanduser()
    if not p.is_file():
        raise JobFileError(path=str(p), message="job file not found")

    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise JobFileError(path=str(p), message=f"cannot read job file: {e}") from e

    return parse_jobs(text.splitlines(), path=str(p))
