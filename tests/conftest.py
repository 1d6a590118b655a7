"""Pytest bootstrap so the src/ layout imports without an install."""

from __future__ import annotations

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[1] / "src"

if SRC.exists():
    sys.path.insert(0, str(SRC))
