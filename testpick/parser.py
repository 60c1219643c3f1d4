# testpick/parser.py
# Drives the tokenizer recognizers through the nesting-depth state machine and
# accumulates fully qualified suite/test labels via a namespace stack.
#
# Transition table (last token -> ordered alternatives tried next):
#   START    -> stanza, open, eof
#   DESCRIBE -> open, close, stanza, eof
#   TEST     -> open, close, eof
#   OPEN     -> close, open, eof
#   CLOSE    -> open, close, stanza, eof
# "stanza" is describe( or it(/test( followed by a quoted title.

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .errors import ScanError, UnrecognizedStructure, line_col
from .names import join_label
from .tokenizer import (
    CLOSE, DESCRIBE, EOF, OPEN, TEST,
    Cursor, Match, Token,
    close_paren, describe_stanza, end_of_input, open_paren, scan_title, skip_filler, test_stanza,
)

logger = logging.getLogger(__name__)

START = "START"
STANZA = "STANZA"

SUITE = "suite"
TEST_KIND = "test"

# ------------------------------ State machine --------------------------------

TRANSITIONS: Dict[str, Tuple[str, ...]] = {
    START: (STANZA, OPEN, EOF),
    DESCRIBE: (OPEN, CLOSE, STANZA, EOF),
    TEST: (OPEN, CLOSE, EOF),
    OPEN: (CLOSE, OPEN, EOF),
    CLOSE: (OPEN, CLOSE, STANZA, EOF),
}

# A stanza's own "(" is part of its literal, so it counts as one level.
DEPTH_DELTA: Dict[str, int] = {
    DESCRIBE: 1,
    TEST: 1,
    OPEN: 1,
    CLOSE: -1,
    EOF: 0,
}

_DESCRIPTIONS = {
    STANZA: "describe(/it(/test( with a quoted title",
    OPEN: "'('",
    CLOSE: "')'",
    EOF: "end of input",
}


def stanza_with_title(cur: Cursor) -> Match:
    """describe( or it(/test( immediately followed by a quoted title.

    The returned DESCRIBE/TEST token carries the title as its value.
    """
    for recognize in (describe_stanza, test_stanza):
        hit = recognize(cur)
        if hit is None:
            continue
        stanza, after = hit
        titled = scan_title(after)
        if titled is None:
            return None
        title, rest = titled
        return Token(stanza.type, title.value), rest
    return None


RECOGNIZERS: Dict[str, Callable[[Cursor], Match]] = {
    STANZA: stanza_with_title,
    OPEN: open_paren,
    CLOSE: close_paren,
    EOF: end_of_input,
}


def next_token(last: str, cur: Cursor) -> Tuple[Token, Cursor]:
    """Try the alternatives allowed after `last`, in order; first match wins."""
    alternatives = TRANSITIONS[last]
    for name in alternatives:
        hit = RECOGNIZERS[name](cur)
        if hit is not None:
            return hit
    at = skip_filler(cur)
    found = repr(at.text[at.pos:at.pos + 12]) if not at.at_end() else "end of input"
    expected = [_DESCRIPTIONS[a] for a in alternatives]
    raise UnrecognizedStructure(
        f"after {last} expected {' or '.join(expected)}, found {found}",
        cur.text, at.pos, expected=expected,
    )

# ------------------------------ Namespace stack ------------------------------

@dataclass(frozen=True)
class NamespaceFrame:
    label: str
    opened_at_depth: int
    path: Tuple[str, ...] = ()


class NamespaceStack:
    """Open suites, root first. The root frame ("", 0) is never popped."""

    def __init__(self):
        self._frames: List[NamespaceFrame] = [NamespaceFrame("", 0)]

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def top(self) -> NamespaceFrame:
        return self._frames[-1]

    @property
    def frames(self) -> Tuple[NamespaceFrame, ...]:
        return tuple(self._frames)

    def push(self, title: str, depth: int) -> NamespaceFrame:
        parent = self.top
        frame = NamespaceFrame(join_label(parent.label, title), depth, parent.path + (title,))
        self._frames.append(frame)
        return frame

    def close_to(self, depth: int) -> Optional[NamespaceFrame]:
        # One close paren unwinds at most one suite.
        if len(self._frames) > 1 and depth < self.top.opened_at_depth:
            return self._frames.pop()
        return None

# ------------------------------ Driver ---------------------------------------

@dataclass(frozen=True)
class Entry:
    label: str
    kind: str
    title: str
    line: int
    path: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "kind": self.kind,
            "title": self.title,
            "line": self.line,
            "path": list(self.path),
        }


@dataclass
class ParserState:
    cursor: Cursor
    depth: int = 0
    last: str = START
    stack: NamespaceStack = field(default_factory=NamespaceStack)
    entries: List[Entry] = field(default_factory=list)

    @classmethod
    def start(cls, text: str) -> "ParserState":
        return cls(cursor=Cursor(text, 0))

    @property
    def done(self) -> bool:
        return self.last == EOF


def step(state: ParserState) -> bool:
    """Consume one token and apply it to `state`. Returns False once end of input is reached."""
    if state.done:
        return False
    text = state.cursor.text
    at = skip_filler(state.cursor).pos
    tok, cur = next_token(state.last, state.cursor)
    logger.debug("%s -> %s %r at %d (depth %d)", state.last, tok.type, tok.value, at, state.depth)

    if tok.type == EOF:
        if state.depth > 0:
            raise UnrecognizedStructure(f"input ended with {state.depth} unclosed '('", text, at)
    elif tok.type == OPEN:
        pass
    elif tok.type == CLOSE:
        if state.depth == 0:
            raise UnrecognizedStructure("unbalanced ')'", text, at)
        popped = state.stack.close_to(state.depth + DEPTH_DELTA[CLOSE])
        if popped is not None:
            logger.debug("closed suite %r", popped.label)
    elif tok.type == DESCRIBE:
        frame = state.stack.push(tok.value or "", state.depth + DEPTH_DELTA[DESCRIBE])
        logger.debug("opened suite %r at depth %d", frame.label, frame.opened_at_depth)
        state.entries.append(Entry(frame.label, SUITE, tok.value or "", line_col(text, at)[0], frame.path))
    elif tok.type == TEST:
        parent = state.stack.top
        title = tok.value or ""
        state.entries.append(Entry(
            join_label(parent.label, title), TEST_KIND, title, line_col(text, at)[0], parent.path + (title,),
        ))
    else:
        raise AssertionError(f"unhandled token type {tok.type!r}")

    state.depth += DEPTH_DELTA[tok.type]
    state.cursor = cur
    state.last = tok.type
    return tok.type != EOF


def scan_entries(text: str) -> List[Entry]:
    """Scan `text` and return every suite and test in source order.

    Raises ScanError (UnterminatedTitle / UnrecognizedStructure) on input outside
    the supported shape; the entries found before the failure are on `err.partial`.
    """
    state = ParserState.start(text)
    try:
        while step(state):
            pass
    except ScanError as e:
        e.partial = list(state.entries)
        logger.debug("scan failed after %d entries: %s", len(e.partial), e)
        raise
    return list(state.entries)


def collect_names(text: str) -> List[str]:
    return [e.label for e in scan_entries(text)]
