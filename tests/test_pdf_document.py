from __future__ import annotations

from dataclasses import dataclass

import pytest
from conftest import extract_pdf_text
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen.canvas import Canvas

from vehiclepod.errors import LayoutError
from vehiclepod.report.pdf_document import (
    ChromeBlock,
    PageComposer,
    SectionBlock,
    compose,
    plan_pages,
)


@dataclass
class _Box:
    """Fixed-height test section that draws its label and optionally overdraws."""

    name: str = "box"
    overdraw: float = 0.0

    def estimate_height(self, data: tuple[str, float], page_width: float) -> float:
        return data[1]

    def render(self, c: Canvas, cursor_y: float, page_width: float, data: tuple[str, float]):
        c.setFont("Helvetica", 8)
        c.drawString(40, cursor_y - 10, data[0])
        return cursor_y - data[1] - self.overdraw


class _Chrome:
    name = "chrome"

    def __init__(self, height: float) -> None:
        self.height = height

    def estimate_height(self, data: str, page_width: float) -> float:
        return self.height

    def render(self, c, cursor_y, page_width, data, page_number=1, page_count=1):
        c.setFont("Helvetica", 8)
        c.drawString(40, cursor_y - 10, f"{data} {page_number}/{page_count}")
        return cursor_y - self.height


def _composer() -> PageComposer:
    return PageComposer(
        A4,
        header=ChromeBlock(_Chrome(60), "HEAD"),
        footer=ChromeBlock(_Chrome(20), "FOOT"),
        title="t",
    )


def test_plan_pages_greedy_fill() -> None:
    assert plan_pages([100, 100, 100], 250) == [[0, 1], [2]]
    assert plan_pages([250, 1], 250) == [[0], [1]]
    assert plan_pages([], 250) == [[]]


def test_plan_pages_rejects_block_taller_than_page() -> None:
    with pytest.raises(LayoutError, match="Section 1"):
        plan_pages([10, 300], 250)


def test_sections_never_cross_page_boundaries() -> None:
    composer = _composer()
    geometry = composer.geometry()
    sections = [SectionBlock(_Box(), (f"S{i}", 150.0), name=f"s{i}") for i in range(12)]
    doc = composer.compose(sections)

    assert doc.page_count > 1
    assert [p.name for p in doc.placements] == [f"s{i}" for i in range(12)]
    for placed in doc.placements:
        assert placed.top <= geometry.body_top + 0.01
        assert placed.bottom >= geometry.body_bottom - 0.01
        assert placed.top - placed.bottom <= placed.estimated_height + 0.01
    pages = [p.page for p in doc.placements]
    assert pages == sorted(pages)


def test_block_that_would_overflow_starts_new_page() -> None:
    composer = _composer()
    usable = composer.geometry().usable_height
    sections = [
        SectionBlock(_Box(), ("first", usable - 50), name="first"),
        SectionBlock(_Box(), ("second", 100.0), name="second"),
    ]
    doc = composer.compose(sections)
    assert [(p.name, p.page) for p in doc.placements] == [("first", 1), ("second", 2)]
    assert doc.placements[1].top == pytest.approx(composer.geometry().body_top)


def test_oversized_block_raises_layout_error() -> None:
    composer = _composer()
    too_tall = composer.geometry().usable_height + 1
    with pytest.raises(LayoutError):
        composer.compose([SectionBlock(_Box(), ("huge", too_tall))])


def test_render_exceeding_estimate_raises_layout_error() -> None:
    with pytest.raises(LayoutError, match="liar"):
        _composer().compose([SectionBlock(_Box(overdraw=5), ("x", 50.0), name="liar")])


def test_chrome_repeats_on_every_page_with_page_count() -> None:
    sections = [SectionBlock(_Box(), (f"S{i}", 300.0)) for i in range(5)]
    doc = compose(
        sections,
        A4,
        header=ChromeBlock(_Chrome(60), "HEAD"),
        footer=ChromeBlock(_Chrome(20), "FOOT"),
    )
    text = extract_pdf_text(doc.pdf)
    for page in range(1, doc.page_count + 1):
        assert f"HEAD {page}/{doc.page_count}" in text
        assert f"FOOT {page}/{doc.page_count}" in text


def test_empty_section_list_still_produces_one_page() -> None:
    doc = _composer().compose([])
    assert doc.page_count == 1
    assert doc.placements == ()
    assert doc.pdf.startswith(b"%PDF")
