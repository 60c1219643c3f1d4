# testpick/errors.py
# Fatal scan errors and selection errors.
from __future__ import annotations
from typing import Any, List, Optional


def line_col(text: str, pos: int) -> tuple[int, int]:
    """1-based (line, column) of offset `pos` in `text`."""
    pos = max(0, min(pos, len(text)))
    line = text.count("\n", 0, pos) + 1
    start = text.rfind("\n", 0, pos) + 1
    return line, pos - start + 1


class ScanError(Exception):
    """Base for errors that abort a scan run.

    `partial` holds the entries accumulated before the failure. They are
    informational only and are never returned as a successful result.
    """

    kind = "ScanError"

    def __init__(self, message: str, text: str = "", pos: int = 0, partial: Optional[List[Any]] = None):
        self.pos = pos
        self.line, self.column = line_col(text, pos)
        self.partial = list(partial or [])
        self.reason = message
        super().__init__(f"{message} (line {self.line}, column {self.column})")

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "reason": self.reason,
            "pos": self.pos,
            "line": self.line,
            "column": self.column,
        }


class UnterminatedTitle(ScanError):
    kind = "UnterminatedTitle"

    def __init__(self, delimiter: str, text: str = "", pos: int = 0, partial: Optional[List[Any]] = None):
        self.delimiter = delimiter
        super().__init__(f"title opened with {delimiter} is never closed", text, pos, partial)


class UnrecognizedStructure(ScanError):
    kind = "UnrecognizedStructure"

    def __init__(self, message: str, text: str = "", pos: int = 0, partial: Optional[List[Any]] = None, expected: Optional[List[str]] = None):
        self.expected = list(expected or [])
        super().__init__(message, text, pos, partial)


class SelectionError(Exception):
    pass


class SelectionCancelled(SelectionError):
    pass
