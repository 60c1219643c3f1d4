# testpick/chooser.py
# Selection collaborators: given N labels, return the index the user picked.
# The scanner never calls these; the CLI injects one.
from __future__ import annotations
import sys
from abc import ABC, abstractmethod
from typing import Optional, Sequence, TextIO

from .errors import SelectionCancelled, SelectionError
from .names import format_choice


def resolve_pick(labels: Sequence[str], value: str) -> int:
    """
    Map a user answer to an index. An exact label wins; otherwise a 1-based
    number as shown in the menu.
    """
    if not labels:
        raise SelectionError("nothing to choose from")
    s = (value or "").strip()
    for i, label in enumerate(labels):
        if label == s:
            return i
    try:
        n = int(s)
    except ValueError:
        raise SelectionError(f"no test named {s!r}") from None
    if not 1 <= n <= len(labels):
        raise SelectionError(f"choice {n} out of range 1..{len(labels)}")
    return n - 1


class Chooser(ABC):
    @abstractmethod
    def choose(self, labels: Sequence[str]) -> int:
        """Return the index into `labels` the user picked."""


class FixedChooser(Chooser):
    """Non-interactive: answers with a preset index or label."""

    def __init__(self, pick: str):
        self.pick = pick

    def choose(self, labels: Sequence[str]) -> int:
        return resolve_pick(labels, self.pick)


class TerminalChooser(Chooser):
    """Numbered menu on a terminal. The menu goes to stderr so stdout carries only the answer."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None, prompt: str = "Pick a test"):
        self.stdin = stdin
        self.stdout = stdout
        self.prompt = prompt

    def choose(self, labels: Sequence[str]) -> int:
        if not labels:
            raise SelectionError("nothing to choose from")
        inp = self.stdin or sys.stdin
        out = self.stdout or sys.stderr
        for i, label in enumerate(labels):
            out.write(format_choice(i, label, len(labels)) + "\n")
        while True:
            out.write(f"{self.prompt} [1-{len(labels)}]: ")
            out.flush()
            try:
                line = inp.readline()
            except KeyboardInterrupt:
                raise SelectionCancelled("selection cancelled") from None
            if not line:
                raise SelectionCancelled("selection cancelled")
            if not line.strip():
                continue
            try:
                return resolve_pick(labels, line)
            except SelectionError as e:
                out.write(f"{e}\n")
