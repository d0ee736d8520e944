"""Page composition: place section blocks on pages without splitting them.

Composition is two-pass.  ``plan_pages`` is pure arithmetic over the
estimated heights; ``PageComposer.compose`` then draws every block at its
planned position and checks that nothing consumed more than it promised.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Protocol

from reportlab.pdfgen.canvas import Canvas

from ..errors import LayoutError
from .pdf_helpers import MARGIN

LOGGER = logging.getLogger(__name__)

# Rounding slack when comparing drawn height with the estimate.
_HEIGHT_EPSILON = 0.01


class SectionRenderer(Protocol):
    name: str

    def estimate_height(self, data: Any, page_width: float) -> float: ...

    def render(self, c: Canvas, cursor_y: float, page_width: float, data: Any) -> float: ...


class ChromeRenderer(Protocol):
    name: str

    def estimate_height(self, data: Any, page_width: float) -> float: ...

    def render(
        self,
        c: Canvas,
        cursor_y: float,
        page_width: float,
        data: Any,
        page_number: int = 1,
        page_count: int = 1,
    ) -> float: ...


@dataclass(frozen=True)
class SectionBlock:
    """A renderer paired with the data it draws; the unit of pagination."""

    renderer: SectionRenderer
    data: Any
    name: str = ""

    @property
    def label(self) -> str:
        return self.name or self.renderer.name


@dataclass(frozen=True)
class ChromeBlock:
    renderer: ChromeRenderer
    data: Any


@dataclass(frozen=True)
class PageGeometry:
    width: float
    height: float
    body_top: float
    body_bottom: float

    @property
    def usable_height(self) -> float:
        return self.body_top - self.body_bottom


@dataclass(frozen=True)
class PlacedSection:
    """Where a block landed: 1-based page number plus its top/bottom y in points."""

    name: str
    page: int
    top: float
    bottom: float
    estimated_height: float


@dataclass(frozen=True)
class ComposedDocument:
    pdf: bytes
    page_count: int
    placements: tuple[PlacedSection, ...]
    geometry: PageGeometry


def plan_pages(heights: Sequence[float], usable_height: float) -> list[list[int]]:
    """Greedily assign block indices to pages in order.

    A block that does not fit in the space remaining on the current page
    starts a new page.  A block taller than a whole page can never be
    placed and raises :class:`LayoutError`.
    """
    pages: list[list[int]] = [[]]
    remaining = usable_height
    for idx, height in enumerate(heights):
        if height > usable_height + _HEIGHT_EPSILON:
            raise LayoutError(
                f"Section {idx} needs {height:.1f}pt but a page only has {usable_height:.1f}pt"
            )
        if height > remaining + _HEIGHT_EPSILON and pages[-1]:
            LOGGER.debug(
                "Section %d (%.1fpt) does not fit in %.1fpt; starting page %d",
                idx,
                height,
                remaining,
                len(pages) + 1,
            )
            pages.append([])
            remaining = usable_height
        pages[-1].append(idx)
        remaining -= height
    return pages


class PageComposer:
    """Draws header chrome, body blocks and footer chrome onto fixed-size pages."""

    def __init__(
        self,
        page_size: tuple[float, float],
        *,
        header: ChromeBlock,
        footer: ChromeBlock,
        title: str = "",
        author: str = "",
        subject: str = "",
    ) -> None:
        self.page_size = page_size
        self.header = header
        self.footer = footer
        self.title = title
        self.author = author
        self.subject = subject

    def geometry(self) -> PageGeometry:
        page_w, page_h = self.page_size
        header_h = self.header.renderer.estimate_height(self.header.data, page_w)
        footer_h = self.footer.renderer.estimate_height(self.footer.data, page_w)
        return PageGeometry(
            width=page_w,
            height=page_h,
            body_top=page_h - MARGIN - header_h,
            body_bottom=MARGIN + footer_h,
        )

    def _check_block(self, block: SectionBlock, top: float, bottom: float, estimate: float) -> None:
        consumed = top - bottom
        if consumed > estimate + _HEIGHT_EPSILON:
            raise LayoutError(
                f"Section {block.label!r} drew {consumed:.1f}pt "
                f"but estimated {estimate:.1f}pt"
            )

    def compose(self, sections: Sequence[SectionBlock]) -> ComposedDocument:
        geometry = self.geometry()
        page_w, page_h = self.page_size
        heights = [s.renderer.estimate_height(s.data, page_w) for s in sections]
        pages = plan_pages(heights, geometry.usable_height)
        page_count = len(pages)

        buffer = BytesIO()
        c = Canvas(buffer, pagesize=self.page_size, pageCompression=0, invariant=1)
        c.setTitle(self.title)
        c.setAuthor(self.author)
        c.setSubject(self.subject)
        c.setCreator("vehiclepod")

        placements: list[PlacedSection] = []
        for page_number, indices in enumerate(pages, start=1):
            self.header.renderer.render(
                c, page_h - MARGIN, page_w, self.header.data, page_number, page_count
            )
            cursor = geometry.body_top
            for idx in indices:
                block = sections[idx]
                estimate = heights[idx]
                c.saveState()
                bottom = block.renderer.render(c, cursor, page_w, block.data)
                c.restoreState()
                self._check_block(block, cursor, bottom, estimate)
                placements.append(PlacedSection(block.label, page_number, cursor, bottom, estimate))
                # Advance by the estimate so the plan and the drawing stay in step.
                cursor -= estimate
            self.footer.renderer.render(
                c, geometry.body_bottom, page_w, self.footer.data, page_number, page_count
            )
            c.showPage()
        c.save()
        LOGGER.debug("Composed %d section(s) onto %d page(s)", len(sections), page_count)
        return ComposedDocument(
            pdf=buffer.getvalue(),
            page_count=page_count,
            placements=tuple(placements),
            geometry=geometry,
        )


def compose(
    sections: Sequence[SectionBlock],
    page_size: tuple[float, float],
    *,
    header: ChromeBlock,
    footer: ChromeBlock,
    title: str = "",
    author: str = "",
    subject: str = "",
) -> ComposedDocument:
    return PageComposer(
        page_size, header=header, footer=footer, title=title, author=author, subject=subject
    ).compose(sections)
