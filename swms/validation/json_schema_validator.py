from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional
import json
from jsonschema import Draft7Validator


def load_schema(path: str | Path) -> dict:
    p = Path(path)
    return json.loads(p.read_text(encoding="utf-8")) if p.exists() else {}


def _row_label(row: Any, index: int, id_field: Optional[str]) -> str:
    if id_field and isinstance(row, dict) and row.get(id_field):
        return f"{row[id_field]} (#{index})"
    return f"#{index}"


def validate_rows(schema: dict, rows: List[Any], id_field: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Check each row against the schema's "items" (or the schema itself).
    Returns [{"index": i, "row": label, "errors": ["path: message", ...]}] for failing rows only.
    """
    if not schema:
        return []

    item_schema = schema.get("items") if isinstance(schema.get("items"), dict) else schema
    validator = Draft7Validator(item_schema)

    failures = []
    for i, row in enumerate(rows or []):
        messages = sorted(
            f"{'/'.join(str(p) for p in err.absolute_path) or '<row>'}: {err.message}"
            for err in validator.iter_errors(row)
        )
        if messages:
            failures.append({"index": i, "row": _row_label(row, i, id_field), "errors": messages})
    return failures


def problem_lines(failures: List[Dict[str, Any]]) -> List[str]:
    """Flatten validate_rows output into one line per error."""
    return [f"record {f['row']}: {msg}" for f in failures for msg in f["errors"]]
