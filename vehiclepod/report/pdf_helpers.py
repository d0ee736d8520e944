"""Low-level ReportLab Canvas drawing helpers shared by the section renderers.

Every helper is stateless: it draws at the coordinates it is given and
returns geometry, never remembering anything between calls.  Text helpers
take the *top* edge of the text block and return the y just below it, so
callers can thread a cursor down the page.

Text is drawn with the :class:`FontSet` active in the current context
(see :func:`use_fonts`).  The default set is the standard Helvetica family;
a TrueType family registered with :func:`font_set_from_files` covers
characters outside WinAnsi.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from functools import lru_cache
from io import BytesIO
from pathlib import Path

from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen.canvas import Canvas

from ..report_theme import REPORT_COLORS

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Style tokens
# ---------------------------------------------------------------------------

TEXT_CLR = REPORT_COLORS["text_primary"]
SUB_CLR = REPORT_COLORS["text_secondary"]
MUTED_CLR = REPORT_COLORS["text_muted"]
LINE_CLR = REPORT_COLORS["border"]
PRIMARY_CLR = REPORT_COLORS["primary"]
PANEL_BG = "#ffffff"
SOFT_BG = REPORT_COLORS["surface"]
ZEBRA_BG = REPORT_COLORS["table_zebra_bg"]

FS_TITLE = 12
FS_H2 = 9
FS_BODY = 7.5
FS_SMALL = 6.5

MARGIN = 12 * mm
GAP = 3.5 * mm
PAD = 4 * mm
R_CARD = 5
TITLE_RESERVE = 9 * mm
BOTTOM_PAD = 3 * mm

CHECKBOX_SIZE = 8.0
RADIO_RADIUS = 4.0


# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FontSet:
    """Registered font names for the regular, bold and italic text faces."""

    regular: str = "Helvetica"
    bold: str = "Helvetica-Bold"
    italic: str = "Helvetica-Oblique"


STANDARD_FONTS = FontSet()
_ACTIVE_FONTS: ContextVar[FontSet] = ContextVar("vehiclepod_fonts", default=STANDARD_FONTS)


def fonts() -> FontSet:
    return _ACTIVE_FONTS.get()


@contextmanager
def use_fonts(font_set: FontSet) -> Iterator[FontSet]:
    """Make *font_set* the active fonts for everything drawn inside the block."""
    token = _ACTIVE_FONTS.set(font_set)
    try:
        yield font_set
    finally:
        _ACTIVE_FONTS.reset(token)


@lru_cache(maxsize=None)
def register_ttf(path: Path) -> str:
    """Register the TrueType file at *path* once and return its font name."""
    digest = hashlib.sha1(str(path.resolve()).encode("utf-8")).hexdigest()[:10]
    name = f"PodTTF-{digest}"
    if name not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(name, str(path)))
        LOGGER.info("Registered TrueType font %s from %s", name, path)
    return name


def font_set_from_files(
    regular: Path | None, bold: Path | None = None, italic: Path | None = None
) -> FontSet:
    """Return the font set for the given TrueType files.

    Without a regular face the standard Helvetica family is used.  A missing
    bold or italic face falls back to the regular one.
    """
    if regular is None:
        return STANDARD_FONTS
    regular_name = register_ttf(regular)
    bold_name = register_ttf(bold) if bold is not None else regular_name
    italic_name = register_ttf(italic) if italic is not None else regular_name
    pdfmetrics.registerFontFamily(
        regular_name,
        normal=regular_name,
        bold=bold_name,
        italic=italic_name,
        boldItalic=bold_name,
    )
    return FontSet(regular_name, bold_name, italic_name)


def hex_color(c: str) -> colors.Color:
    return colors.HexColor(c)


def content_box(page_width: float) -> tuple[float, float]:
    """Return ``(x, width)`` of the printable column for *page_width*."""
    return MARGIN, page_width - 2 * MARGIN


def leading_for(size: float) -> float:
    return size + 2


# ---------------------------------------------------------------------------
# Text measurement and drawing
# ---------------------------------------------------------------------------


def wrap_lines(
    text: str, width_pt: float, *, font: str | None = None, size: float = FS_BODY
) -> list[str]:
    font = font or fonts().regular
    lines: list[str] = []
    for paragraph in str(text).split("\n"):
        lines.extend(simpleSplit(paragraph, font, size, width_pt) or [""])
    return lines


def clamp_lines(lines: list[str], max_lines: int | None) -> list[str]:
    if max_lines is None or len(lines) <= max_lines:
        return lines
    kept = lines[:max_lines]
    if kept:
        last = kept[-1]
        kept[-1] = (last[: len(last) - 3] + "…") if len(last) > 3 else "…"
    return kept


def text_lines(
    text: str,
    width_pt: float,
    *,
    font: str | None = None,
    size: float = FS_BODY,
    max_lines: int | None = None,
) -> list[str]:
    return clamp_lines(wrap_lines(text, width_pt, font=font, size=size), max_lines)


def fit_line(
    text: str, width_pt: float, *, font: str | None = None, size: float = FS_BODY
) -> str:
    """First line of *text* wrapped to *width_pt*, with an ellipsis if anything was cut."""
    return text_lines(text, width_pt, font=font, size=size, max_lines=1)[0]


def text_height(
    text: str,
    width_pt: float,
    *,
    font: str | None = None,
    size: float = FS_BODY,
    leading: float | None = None,
    max_lines: int | None = None,
) -> float:
    """Return the total height consumed by wrapped text."""
    if leading is None:
        leading = leading_for(size)
    lines = text_lines(text, width_pt, font=font, size=size, max_lines=max_lines)
    return max(len(lines), 1) * leading


def draw_text(
    c: Canvas,
    x: float,
    y_top: float,
    w: float,
    text: str,
    *,
    font: str | None = None,
    size: float = FS_BODY,
    color: str = TEXT_CLR,
    leading: float | None = None,
    max_lines: int | None = None,
) -> float:
    """Draw wrapped text below *y_top*.  Returns the y after the last line."""
    font = font or fonts().regular
    if leading is None:
        leading = leading_for(size)
    lines = text_lines(text, w, font=font, size=size, max_lines=max_lines) or [""]
    c.setFillColor(hex_color(color))
    c.setFont(font, size)
    y = y_top
    for line in lines:
        c.drawString(x, y - size, line)
        y -= leading
    return y


def kv_height(
    value: str,
    value_w: float,
    *,
    size: float = FS_BODY,
    max_lines: int | None = None,
    row_gap: float = 1.2 * mm,
) -> float:
    return text_height(value, value_w, font=fonts().bold, size=size, max_lines=max_lines) + row_gap


def draw_kv(
    c: Canvas,
    x: float,
    y_top: float,
    label: str,
    value: str,
    *,
    label_w: float,
    value_w: float,
    size: float = FS_BODY,
    max_lines: int | None = None,
    row_gap: float = 1.2 * mm,
) -> float:
    """Draw a label/value pair with a wrapped bold value.  Returns the next y."""
    c.setFillColor(hex_color(SUB_CLR))
    c.setFont(fonts().regular, size)
    if label:
        c.drawString(x, y_top - size, label)
    y = draw_text(
        c,
        x + label_w,
        y_top,
        value_w,
        value,
        font=fonts().bold,
        size=size,
        color=TEXT_CLR,
        max_lines=max_lines,
    )
    return y - row_gap


# ---------------------------------------------------------------------------
# Boxes and markers
# ---------------------------------------------------------------------------


def draw_panel(
    c: Canvas,
    x: float,
    y: float,
    w: float,
    h: float,
    title: str | None = None,
    *,
    fill: str = PANEL_BG,
    border: str = LINE_CLR,
    title_color: str = TEXT_CLR,
) -> None:
    c.setFillColor(hex_color(fill))
    c.setStrokeColor(hex_color(border))
    c.setLineWidth(0.8)
    c.roundRect(x, y, w, h, R_CARD, stroke=1, fill=1)
    if title:
        c.setFillColor(hex_color(title_color))
        c.setFont(fonts().bold, FS_H2)
        c.drawString(x + PAD, y + h - 5.5 * mm, title)


def draw_checkbox(
    c: Canvas,
    x: float,
    y: float,
    checked: bool | None,
    *,
    size: float = CHECKBOX_SIZE,
    color: str = TEXT_CLR,
) -> None:
    """Square outline at (*x*, *y*) bottom-left; a check mark only when *checked* is True.

    ``None`` means "not recorded" and draws a short muted dash instead.
    """
    c.saveState()
    c.setLineWidth(0.8)
    c.setStrokeColor(hex_color(color))
    c.setFillColor(colors.white)
    c.rect(x, y, size, size, stroke=1, fill=1)
    if checked is True:
        c.setLineWidth(1.4)
        path = c.beginPath()
        path.moveTo(x + size * 0.2, y + size * 0.5)
        path.lineTo(x + size * 0.42, y + size * 0.25)
        path.lineTo(x + size * 0.82, y + size * 0.8)
        c.drawPath(path, stroke=1, fill=0)
    elif checked is None:
        c.setStrokeColor(hex_color(MUTED_CLR))
        c.line(x + size * 0.3, y + size * 0.5, x + size * 0.7, y + size * 0.5)
    c.restoreState()


def draw_radio(
    c: Canvas,
    cx: float,
    cy: float,
    selected: bool,
    *,
    radius: float = RADIO_RADIUS,
    color: str = TEXT_CLR,
) -> None:
    """Circle outline centred at (*cx*, *cy*); a filled dot only when *selected*."""
    c.saveState()
    c.setLineWidth(0.8)
    c.setStrokeColor(hex_color(color))
    c.setFillColor(colors.white)
    c.circle(cx, cy, radius, stroke=1, fill=1)
    if selected:
        c.setFillColor(hex_color(color))
        c.circle(cx, cy, radius * 0.5, stroke=0, fill=1)
    c.restoreState()


def draw_stamp(c: Canvas, x: float, y: float, text: str, *, color: str, size: float = 8) -> None:
    """Outlined rubber-stamp label with its bottom-left corner at (*x*, *y*)."""
    c.saveState()
    c.setFont(fonts().bold, size)
    text_w = c.stringWidth(text, fonts().bold, size)
    c.setStrokeColor(hex_color(color))
    c.setFillColor(hex_color(color))
    c.setLineWidth(1.2)
    c.roundRect(x, y, text_w + 4 * mm, size + 3 * mm, 3, stroke=1, fill=0)
    c.drawString(x + 2 * mm, y + 1.5 * mm + size * 0.2, text)
    c.restoreState()


def load_image(data: bytes | None) -> ImageReader | None:
    """Decode in-memory image bytes; ``None`` when absent or unreadable.

    Forces a full decode; a corrupt photo is logged at WARNING and treated
    as missing.
    """
    if not data:
        return None
    try:
        reader = ImageReader(BytesIO(data))
        reader.getRGBData()
    except (OSError, ValueError, SyntaxError):
        LOGGER.warning("Skipping unreadable photo (%d bytes)", len(data), exc_info=True)
        return None
    return reader
