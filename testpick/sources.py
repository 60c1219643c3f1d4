# testpick/sources.py
# Where the text comes from. The scanner only ever sees a str.
from __future__ import annotations
import sys
from pathlib import Path
from typing import Optional, TextIO, Tuple

STDIN_PATH = "-"


def read_source(path: str, stdin: Optional[TextIO] = None) -> Tuple[str, str]:
    """Return (display_path, text). '-' reads standard input."""
    if path == STDIN_PATH:
        return "<stdin>", (stdin or sys.stdin).read()
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"not a file: {p}")
    # BOM-safe, like the schema loader
    return str(p), p.read_text(encoding="utf-8-sig")
