# testpick/names.py
# Label helpers: composing suite paths and rendering them for display.
from __future__ import annotations
from typing import Sequence

SEPARATOR = "/"


def join_label(parent: str, title: str, sep: str = SEPARATOR) -> str:
    """Append `title` to the parent label; the root label is empty and adds no separator."""
    if not parent:
        return title
    return f"{parent}{sep}{title}"


def render_path(path: Sequence[str], sep: str = SEPARATOR) -> str:
    out = ""
    for title in path:
        out = join_label(out, title, sep)
    return out


def format_choice(index: int, label: str, total: int) -> str:
    # 1-based, right-aligned so labels line up in the menu
    width = len(str(max(total, 1)))
    return f"{index + 1:>{width}}) {label}"
