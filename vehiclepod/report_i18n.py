"""Report label catalogue.

All user-visible report strings are loaded from
``vehiclepod/data/report_i18n.json`` so wording changes never touch the
drawing code.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

_DATA_FILE = Path(__file__).resolve().parent / "data" / "report_i18n.json"


@lru_cache(maxsize=1)
def _load_labels() -> dict[str, str]:
    if not _DATA_FILE.exists():
        raise RuntimeError(f"Missing label file: {_DATA_FILE}")
    try:
        with open(_DATA_FILE, encoding="utf-8") as fh:
            data: dict[str, str] = json.load(fh)
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"Invalid label file: {_DATA_FILE}") from exc
    return data


def tr(key: str, **kwargs: Any) -> str:
    template = _load_labels().get(key) or key
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError):
        return template
