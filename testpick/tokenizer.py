# testpick/tokenizer.py
# Lexical layer: an immutable cursor plus the recognizers the parser chooses between.
# Every recognizer returns (Token, Cursor) on a match or None on no match;
# quote_delimiter returns the raw quote character instead of a token.
# Tokens:
#   Token(type="OPEN"|"CLOSE"|"DESCRIBE"|"TEST"|"TITLE"|"EOF", value=str|None)

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import UnterminatedTitle

# ------------------------------ Token types ----------------------------------

OPEN = "OPEN"
CLOSE = "CLOSE"
DESCRIBE = "DESCRIBE"
TEST = "TEST"
TITLE = "TITLE"
EOF = "EOF"

TOKEN_TYPES = frozenset({OPEN, CLOSE, DESCRIBE, TEST, TITLE, EOF})

QUOTE_CHARS = ("'", '"', "`")

DESCRIBE_LITERAL = "describe("
# it( is tried before test(; both mean the same thing downstream.
TEST_LITERALS = ("it(", "test(")

# ------------------------------ Patterns -------------------------------------

# Next position the scanner cares about: a paren, or a stanza opening that is not
# the tail of a longer identifier or a member access (submit(, obj.it().
SIGNIFICANT_RE = re.compile(r"[()]|(?<![\w$.])(?:describe|it|test)\(")


@dataclass(frozen=True)
class Token:
    type: str
    value: Optional[str] = None

    def __post_init__(self):
        if self.type not in TOKEN_TYPES:
            raise ValueError(f"unknown token type: {self.type!r}")


@dataclass(frozen=True)
class Cursor:
    text: str
    pos: int = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def startswith(self, literal: str) -> bool:
        return self.text.startswith(literal, self.pos)

    def advance(self, n: int = 1) -> "Cursor":
        return Cursor(self.text, min(len(self.text), self.pos + n))

    def moved_to(self, pos: int) -> "Cursor":
        return Cursor(self.text, pos)


Match = Optional[Tuple[Token, Cursor]]
QuoteMatch = Optional[Tuple[str, Cursor]]

# ------------------------------ Filler ---------------------------------------

def skip_filler(cur: Cursor) -> Cursor:
    """Skip everything up to the next paren or stanza opening (or end of text)."""
    m = SIGNIFICANT_RE.search(cur.text, cur.pos)
    return cur.moved_to(m.start() if m else len(cur.text))

# ------------------------------ Primitives -----------------------------------

def open_paren(cur: Cursor) -> Match:
    c = skip_filler(cur)
    if c.peek() == "(":
        return Token(OPEN), c.advance()
    return None


def close_paren(cur: Cursor) -> Match:
    c = skip_filler(cur)
    if c.peek() == ")":
        return Token(CLOSE), c.advance()
    return None


def quote_delimiter(cur: Cursor) -> QuoteMatch:
    """Match one quote character exactly at the cursor and return that character."""
    ch = cur.peek()
    if ch and ch in QUOTE_CHARS:
        return ch, cur.advance()
    return None


def end_of_input(cur: Cursor) -> Match:
    c = skip_filler(cur)
    if c.at_end():
        return Token(EOF), c
    return None

# ------------------------------ Stanzas --------------------------------------

def describe_stanza(cur: Cursor) -> Match:
    c = skip_filler(cur)
    if c.startswith(DESCRIBE_LITERAL):
        return Token(DESCRIBE), c.advance(len(DESCRIBE_LITERAL))
    return None


def test_stanza(cur: Cursor) -> Match:
    c = skip_filler(cur)
    for literal in TEST_LITERALS:
        if c.startswith(literal):
            return Token(TEST), c.advance(len(literal))
    return None


# Keep pytest from collecting the recognizer when a test module imports it.
test_stanza.__test__ = False

# ------------------------------ Titles ---------------------------------------

def scan_title(cur: Cursor) -> Match:
    """
    Read a quoted title that starts exactly at the cursor.

    The text between the opening quote and the next occurrence of the same quote
    character is returned verbatim. Backslashes are not escapes, so
    'it\\'s' ends at the second quote. No quote at the cursor is a plain no-match;
    a quote that is never closed raises UnterminatedTitle.
    """
    hit = quote_delimiter(cur)
    if hit is None:
        return None
    delim, body = hit
    end = cur.text.find(delim, body.pos)
    if end < 0:
        raise UnterminatedTitle(delim, cur.text, cur.pos)
    return Token(TITLE, cur.text[body.pos:end]), cur.moved_to(end + 1)
