# testpick/__init__.py
# Lists describe/it/test names in JavaScript test files.
from .errors import ScanError, SelectionError, UnrecognizedStructure, UnterminatedTitle
from .parser import Entry, collect_names, scan_entries

__all__ = [
    "Entry",
    "ScanError",
    "SelectionError",
    "UnrecognizedStructure",
    "UnterminatedTitle",
    "collect_names",
    "scan_entries",
]

__version__ = "0.1.0"
