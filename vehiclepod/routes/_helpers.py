"""Shared route helpers."""

from __future__ import annotations

import re

from fastapi import HTTPException

from ..errors import MissingMetadataError, MissingSnapshotError

_SAFE_FILENAME_RE = re.compile(r"[^a-zA-Z0-9._-]")


def safe_filename(name: str) -> str:
    """Sanitize *name* for use in Content-Disposition headers."""
    return _SAFE_FILENAME_RE.sub("_", name)[:200] or "download"


def contract_error_to_422(exc: MissingSnapshotError | MissingMetadataError) -> HTTPException:
    """Map a caller-contract violation onto an HTTP 422 carrying its message."""
    return HTTPException(status_code=422, detail=str(exc))
