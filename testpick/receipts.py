# testpick/receipts.py
# JSON run receipts, validated against schemas/receipt.schema.json.
from __future__ import annotations
import datetime as _dt
import hashlib
import json
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from jsonschema import Draft202012Validator

from .errors import ScanError

SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "receipt.schema.json"

_VALIDATOR: Optional[Draft202012Validator] = None


def load_schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8-sig"))


def _validator() -> Draft202012Validator:
    global _VALIDATOR
    if _VALIDATOR is None:
        _VALIDATOR = Draft202012Validator(load_schema())
    return _VALIDATOR


def _now_utc_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).replace(microsecond=0, tzinfo=None).isoformat() + "Z"


def source_hash(text: str) -> str:
    return "sha256:" + hashlib.sha256(text.encode("utf-8")).hexdigest()


def base_receipt(path: str, text: str) -> Dict[str, Any]:
    return {
        "engine": "testpick",
        "source": {"path": path, "hash": source_hash(text)},
        "run": {"timestamp": _now_utc_iso(), "uuid": str(uuid.uuid4())},
        "status": "ok",
        "entries": [],
        "names": [],
    }


def ok_receipt(path: str, text: str, entries: Sequence[Any], selected: Optional[int] = None) -> Dict[str, Any]:
    r = base_receipt(path, text)
    r["entries"] = [e.to_dict() for e in entries]
    r["names"] = [e.label for e in entries]
    if selected is not None:
        r["selected"] = {"index": selected, "label": entries[selected].label}
    return r


def error_receipt(path: str, text: str, err: ScanError) -> Dict[str, Any]:
    """Entries found before the failure go under 'partial', never under 'entries'."""
    r = base_receipt(path, text)
    r["status"] = "error"
    r["reason"] = str(err)
    r["error"] = err.to_dict()
    r["partial"] = [e.to_dict() for e in err.partial]
    return r


def validate_receipt(receipt: Dict[str, Any]) -> None:
    """Raise jsonschema.ValidationError if the receipt does not match the schema."""
    _validator().validate(receipt)


def schema_errors(receipt: Dict[str, Any]) -> List[str]:
    return [e.message for e in _validator().iter_errors(receipt)]


def dump_receipt(receipt: Dict[str, Any]) -> str:
    validate_receipt(receipt)
    return json.dumps(receipt, indent=2, sort_keys=True)


def write_receipt(path: str, receipt: Dict[str, Any]) -> None:
    Path(path).write_text(dump_receipt(receipt) + "\n", encoding="utf-8")
