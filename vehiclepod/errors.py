"""Exception hierarchy for report generation."""

from __future__ import annotations


class ReportError(Exception):
    """Base class for all errors raised by the report engine."""


class MissingSnapshotError(ReportError, ValueError):
    """A collection or delivery snapshot is absent or has the wrong stage.

    Signals that the caller requested a report before both inspections were
    captured; this is a caller-contract violation, never retried.
    """


class MissingMetadataError(ReportError, ValueError):
    """Required job metadata (job number, registration, generated-at) is absent."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = list(fields)
        super().__init__(f"Missing required job metadata: {', '.join(self.fields)}")


class LayoutError(ReportError, RuntimeError):
    """A section cannot be placed within the fixed page geometry.

    Indicates wrong layout constants rather than bad input data.
    """


class ReportGenerationError(ReportError, RuntimeError):
    """Unexpected failure while drawing the document."""
