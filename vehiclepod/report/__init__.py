"""vehiclepod.report - renderer-only PDF modules.

This package contains **only** rendering code.  The comparison between
collection and delivery lives in ``vehiclepod.comparison``.
"""

from .pdf_builder import assemble, compose_report
from .pdf_document import ComposedDocument, PlacedSection

__all__ = [
    "ComposedDocument",
    "PlacedSection",
    "assemble",
    "compose_report",
]
