# testpick/cli.py
# CLI: scan a describe/it test file, list the fully qualified names, optionally pick one.

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from typing import List, Optional

from .chooser import Chooser, FixedChooser, TerminalChooser
from .errors import ScanError, SelectionCancelled, SelectionError
from .names import SEPARATOR, render_path
from .parser import SUITE, TEST_KIND, Entry, scan_entries
from .receipts import dump_receipt, error_receipt, ok_receipt, write_receipt
from .sources import STDIN_PATH, read_source

logger = logging.getLogger(__name__)

ENV_LOG_LEVEL = "TESTPICK_LOG_LEVEL"
ENV_SEPARATOR = "TESTPICK_SEPARATOR"

EXIT_OK = 0
EXIT_SCAN_ERROR = 1
EXIT_BAD_INPUT = 2
EXIT_CANCELLED = 130


@dataclass
class Settings:
    source: str
    as_json: bool = False
    receipt_out: Optional[str] = None
    kind: Optional[str] = None          # "suite" | "test" | None for both
    choose: bool = False
    pick: Optional[str] = None
    separator: str = SEPARATOR
    show_lines: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Settings":
        kind = None
        if args.tests_only:
            kind = TEST_KIND
        elif args.suites_only:
            kind = SUITE
        return cls(
            source=args.source,
            as_json=bool(args.json),
            receipt_out=args.receipt_out,
            kind=kind,
            choose=bool(args.choose),
            pick=args.pick,
            separator=args.separator or os.environ.get(ENV_SEPARATOR) or SEPARATOR,
            show_lines=bool(args.lines),
            log_level=(args.log_level or os.environ.get(ENV_LOG_LEVEL) or "WARNING").upper(),
        )

    def chooser(self) -> Optional[Chooser]:
        if self.pick is not None:
            return FixedChooser(self.pick)
        if self.choose:
            return TerminalChooser()
        return None


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="testpick",
        description="List the describe/it/test names in a JavaScript test file and optionally pick one.",
    )
    p.add_argument("source", nargs="?", help="Test file to scan ('-' for stdin).")
    p.add_argument("--json", action="store_true", help="Print a JSON receipt instead of plain names.")
    p.add_argument("--receipt-out", metavar="PATH", help="Also write the JSON receipt to PATH.")
    kinds = p.add_mutually_exclusive_group()
    kinds.add_argument("--tests-only", action="store_true", help="Leave out describe blocks.")
    kinds.add_argument("--suites-only", action="store_true", help="Leave out tests.")
    picks = p.add_mutually_exclusive_group()
    picks.add_argument("--choose", action="store_true", help="Show a numbered menu and print the chosen name.")
    picks.add_argument("--pick", metavar="N|NAME", help="Choose without prompting (1-based index or exact name).")
    p.add_argument("--separator", default=None, help=f"Separator for displayed names (default: {SEPARATOR} or ${ENV_SEPARATOR}).")
    p.add_argument("--lines", action="store_true", help="Prefix each name with its line number.")
    p.add_argument("--log-level", default=None, help=f"Logging level (default: WARNING or ${ENV_LOG_LEVEL}).")
    return p


def _filter(entries: List[Entry], kind: Optional[str]) -> List[Entry]:
    if kind is None:
        return list(entries)
    return [e for e in entries if e.kind == kind]


def _emit(receipt: dict, settings: Settings) -> None:
    if settings.as_json:
        print(dump_receipt(receipt))
    if settings.receipt_out:
        write_receipt(settings.receipt_out, receipt)
        logger.info("wrote receipt: %s", settings.receipt_out)


def main(argv: Optional[list[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    if not args.source:
        p.error("source file required (e.g., src/app.test.js, or - for stdin)")
    if args.source == STDIN_PATH and args.choose:
        p.error("--choose reads the answer from stdin; pass a file path or use --pick")

    settings = Settings.from_args(args)
    _configure_logging(settings.log_level)

    try:
        path, text = read_source(settings.source)
    except (OSError, UnicodeDecodeError) as e:
        print(f"testpick: cannot read {settings.source}: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    try:
        entries = scan_entries(text)
    except ScanError as e:
        logger.debug("partial entries before failure: %s", [x.label for x in e.partial])
        if not settings.as_json:
            print(f"testpick: {path}: {e}", file=sys.stderr)
        _emit(error_receipt(path, text, e), settings)
        return EXIT_SCAN_ERROR

    entries = _filter(entries, settings.kind)
    labels = [render_path(e.path, settings.separator) for e in entries]
    logger.info("%s: %d names", path, len(labels))

    selected = None
    chooser = settings.chooser()
    if chooser is not None:
        try:
            selected = chooser.choose(labels)
        except SelectionCancelled:
            return EXIT_CANCELLED
        except SelectionError as e:
            print(f"testpick: {e}", file=sys.stderr)
            return EXIT_SCAN_ERROR

    _emit(ok_receipt(path, text, entries, selected), settings)
    if settings.as_json:
        return EXIT_OK

    if selected is not None:
        print(labels[selected])
        return EXIT_OK
    for entry, label in zip(entries, labels):
        print(f"{entry.line}\t{label}" if settings.show_lines else label)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
