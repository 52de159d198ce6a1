from __future__ import annotations

import json
from pathlib import Path
from typing import Any

# Matches the compact form browsers produce for JSON.stringify.
_COMPACT_SEPARATORS = (",", ":")


def encode_value(value: Any) -> str:
    """
    Serialize a structured value to compact JSON text.

    Raises TypeError for values JSON cannot represent and ValueError for
    NaN/Infinity, which have no JSON spelling.
    """
    return json.dumps(value, separators=_COMPACT_SEPARATORS, ensure_ascii=False, allow_nan=False)


def decode_value(text: str) -> Any:
    """Parse JSON text produced by encode_value (json.JSONDecodeError on bad input)."""
    return json.loads(text)


def read_json(path: Path) -> Any | None:
    """
    Read a JSON document from disk.

    Returns None for missing or empty files. Invalid JSON raises
    json.JSONDecodeError so a damaged file is never silently replaced.
    """
    if not path.exists():
        return None
    raw = path.read_text(encoding="utf-8")
    if not raw.strip():
        return None
    return json.loads(raw)


def atomic_write_json(path: Path, payload: Any, *, indent: int = 2, sort_keys: bool = True) -> None:
    """
    Atomically write JSON to disk by writing to a temp file then replacing.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=indent, sort_keys=sort_keys, ensure_ascii=False)
        f.write("\n")
    tmp_path.replace(path)
