"""Section renderers for the proof-of-delivery document.

Each renderer exposes the same two-method contract used by
:class:`~vehiclepod.report.pdf_document.PageComposer`:

``estimate_height(data, page_width)``
    Height in points the section will occupy.  Pure: no drawing.

``render(c, cursor_y, page_width, data)``
    Draw the section with its top edge at *cursor_y* and return the y
    just below it.  Must never consume more than ``estimate_height``.

Chrome renderers (header/footer) additionally receive the page number and
page count.  Every body section is drawn as a panel whose height was
measured before drawing, so the estimate and the drawn height agree.
"""

from __future__ import annotations

from xml.sax.saxutils import escape

from reportlab.lib.enums import TA_JUSTIFY
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfgen.canvas import Canvas
from reportlab.platypus import Paragraph

from ..report_i18n import tr
from ..report_theme import REPORT_COLORS, TONE_COLORS
from .pdf_helpers import (
    BOTTOM_PAD,
    CHECKBOX_SIZE,
    FS_BODY,
    FS_H2,
    FS_SMALL,
    FS_TITLE,
    GAP,
    LINE_CLR,
    MUTED_CLR,
    PAD,
    PRIMARY_CLR,
    RADIO_RADIUS,
    SOFT_BG,
    SUB_CLR,
    TEXT_CLR,
    TITLE_RESERVE,
    ZEBRA_BG,
    content_box,
    draw_checkbox,
    draw_kv,
    draw_panel,
    draw_radio,
    draw_stamp,
    draw_text,
    fit_line,
    fonts,
    hex_color,
    kv_height,
    load_image,
    text_height,
)
from .report_data import (
    AcknowledgmentData,
    ChecklistData,
    DamageBlockData,
    DamageSummaryData,
    DisclaimerData,
    FooterData,
    HeaderData,
    KeyValueRow,
    PhotoBlockData,
    RadioGroupData,
    SignatureData,
    SummaryData,
)

TABLE_ROW_H = 5.2 * mm
RADIO_ROW_H = 6 * mm
DAMAGE_ROW_H = 8.6 * mm
CONFIRM_BOX_H = 9 * mm
SIGNATURE_BOX_H = 16 * mm
PHOTO_CAPTION_H = 5 * mm
PHOTO_FRAME_H = 52 * mm
PHOTO_ROW_GAP = 3 * mm
HEADER_H = 24 * mm
FOOTER_H = 8 * mm
LABEL_W = 30 * mm


def _rows_height(rows: tuple[KeyValueRow, ...], value_w: float) -> float:
    return sum(kv_height(row.value, value_w, max_lines=row.max_lines) for row in rows)


def _draw_rows(
    c: Canvas, x: float, y: float, rows: tuple[KeyValueRow, ...], value_w: float
) -> float:
    for row in rows:
        y = draw_kv(
            c,
            x,
            y,
            row.label,
            row.value,
            label_w=LABEL_W,
            value_w=value_w,
            max_lines=row.max_lines,
        )
    return y


# ---------------------------------------------------------------------------
# Page chrome
# ---------------------------------------------------------------------------


class HeaderSection:
    """Company identity, document title and job references; repeated on every page."""

    name = "header"

    def estimate_height(self, data: HeaderData, page_width: float) -> float:
        return HEADER_H

    def render(
        self,
        c: Canvas,
        cursor_y: float,
        page_width: float,
        data: HeaderData,
        page_number: int = 1,
        page_count: int = 1,
    ) -> float:
        x, w = content_box(page_width)
        h = HEADER_H - 2 * mm
        draw_panel(c, x, cursor_y - h, w, h, fill=SOFT_BG)
        # Accent stripe on the left edge.
        c.setFillColor(hex_color(PRIMARY_CLR))
        c.rect(x, cursor_y - h + 3, 2.2, h - 6, stroke=0, fill=1)

        left_w = w * 0.62
        draw_text(
            c,
            x + PAD,
            cursor_y - 6.5 * mm + FS_TITLE,
            left_w - PAD,
            data.company_name,
            font=fonts().bold,
            size=FS_TITLE,
            max_lines=1,
        )
        draw_text(
            c,
            x + PAD,
            cursor_y - 8.2 * mm,
            left_w - PAD,
            data.company_contact,
            size=FS_SMALL,
            color=SUB_CLR,
            max_lines=1,
        )
        draw_text(
            c,
            x + PAD,
            cursor_y - 17.5 * mm + 11,
            left_w - PAD,
            data.title,
            font=fonts().bold,
            size=11,
            color=PRIMARY_CLR,
            max_lines=1,
        )

        right_x = x + w - PAD
        right_w = w - left_w - 2 * PAD
        bold = fonts().bold
        c.setFillColor(hex_color(TEXT_CLR))
        c.setFont(bold, FS_BODY)
        for label, offset in ((data.job_label, 6.5 * mm), (data.registration_label, 10.3 * mm)):
            c.drawRightString(
                right_x, cursor_y - offset, fit_line(label, right_w, font=bold, size=FS_BODY)
            )
        c.setFont(fonts().regular, FS_SMALL)
        c.setFillColor(hex_color(SUB_CLR))
        c.drawRightString(right_x, cursor_y - 14 * mm, data.generated_label)
        c.setFillColor(hex_color(MUTED_CLR))
        c.drawRightString(
            right_x,
            cursor_y - 18.5 * mm,
            tr("PAGE_OF", page=page_number, total=page_count),
        )
        return cursor_y - HEADER_H


class FooterSection:
    """Thin rule plus the company registration line at the bottom of every page."""

    name = "footer"

    def estimate_height(self, data: FooterData, page_width: float) -> float:
        return FOOTER_H

    def render(
        self,
        c: Canvas,
        cursor_y: float,
        page_width: float,
        data: FooterData,
        page_number: int = 1,
        page_count: int = 1,
    ) -> float:
        x, w = content_box(page_width)
        c.setStrokeColor(hex_color(LINE_CLR))
        c.setLineWidth(0.6)
        c.line(x, cursor_y - 2 * mm, x + w, cursor_y - 2 * mm)
        c.setFillColor(hex_color(MUTED_CLR))
        c.setFont(fonts().regular, FS_SMALL)
        c.drawCentredString(x + w / 2, cursor_y - 5.5 * mm, fit_line(data.line, w, size=FS_SMALL))
        return cursor_y - FOOTER_H


# ---------------------------------------------------------------------------
# Body sections
# ---------------------------------------------------------------------------


class SummarySection:
    """Job details and vehicle details side by side."""

    name = "summary"

    def _geometry(self, page_width: float) -> tuple[float, float, float]:
        x, w = content_box(page_width)
        col_w = (w - GAP) / 2
        value_w = col_w - 2 * PAD - LABEL_W
        return x, col_w, value_w

    def estimate_height(self, data: SummaryData, page_width: float) -> float:
        _, _, value_w = self._geometry(page_width)
        body = max(_rows_height(data.left_rows, value_w), _rows_height(data.right_rows, value_w))
        return TITLE_RESERVE + body + BOTTOM_PAD + GAP

    def render(self, c: Canvas, cursor_y: float, page_width: float, data: SummaryData) -> float:
        x, col_w, value_w = self._geometry(page_width)
        panel_h = self.estimate_height(data, page_width) - GAP
        bottom = cursor_y - panel_h
        for col_x, title, rows in (
            (x, data.left_title, data.left_rows),
            (x + col_w + GAP, data.right_title, data.right_rows),
        ):
            draw_panel(c, col_x, bottom, col_w, panel_h, title)
            _draw_rows(c, col_x + PAD, cursor_y - TITLE_RESERVE, rows, value_w)
        return bottom - GAP


class ChecklistSection:
    """Item | Collection | Delivery table drawn with checkboxes."""

    name = "checklist"

    def estimate_height(self, data: ChecklistData, page_width: float) -> float:
        return TITLE_RESERVE + (len(data.rows) + 1) * TABLE_ROW_H + BOTTOM_PAD + GAP

    def render(self, c: Canvas, cursor_y: float, page_width: float, data: ChecklistData) -> float:
        x, w = content_box(page_width)
        panel_h = self.estimate_height(data, page_width) - GAP
        bottom = cursor_y - panel_h
        draw_panel(c, x, bottom, w, panel_h, data.title)

        tx = x + PAD
        tw = w - 2 * PAD
        col_delivery = tx + tw - 18 * mm
        col_collection = col_delivery - 30 * mm
        y = cursor_y - TITLE_RESERVE

        c.setFillColor(hex_color(REPORT_COLORS["table_header_bg"]))
        c.rect(tx, y - TABLE_ROW_H, tw, TABLE_ROW_H, stroke=0, fill=1)
        c.setFillColor(hex_color(SUB_CLR))
        c.setFont(fonts().bold, FS_SMALL)
        text_y = y - TABLE_ROW_H + 1.7 * mm
        c.drawString(tx + 2 * mm, text_y, data.item_heading)
        c.drawCentredString(col_collection, text_y, data.collection_heading)
        c.drawCentredString(col_delivery, text_y, data.delivery_heading)
        y -= TABLE_ROW_H

        for idx, row in enumerate(data.rows):
            row_bottom = y - TABLE_ROW_H
            if idx % 2 == 1:
                c.setFillColor(hex_color(ZEBRA_BG))
                c.rect(tx, row_bottom, tw, TABLE_ROW_H, stroke=0, fill=1)
            c.setStrokeColor(hex_color(REPORT_COLORS["table_row_border"]))
            c.setLineWidth(0.4)
            c.line(tx, row_bottom, tx + tw, row_bottom)
            c.setFillColor(hex_color(TEXT_CLR))
            c.setFont(fonts().regular, FS_BODY)
            c.drawString(tx + 2 * mm, row_bottom + 1.6 * mm, row.label)
            box_y = row_bottom + (TABLE_ROW_H - CHECKBOX_SIZE) / 2
            draw_checkbox(c, col_collection - CHECKBOX_SIZE / 2, box_y, row.at_collection)
            draw_checkbox(c, col_delivery - CHECKBOX_SIZE / 2, box_y, row.at_delivery)
            y = row_bottom
        return bottom - GAP


class RadioGroupSection:
    """Mutually exclusive options (fuel, charge, weather) drawn as radio buttons."""

    name = "readings"
    label_w = 38 * mm
    max_slot_w = 24 * mm

    def estimate_height(self, data: RadioGroupData, page_width: float) -> float:
        note_h = RADIO_ROW_H if data.note else 0.0
        return TITLE_RESERVE + len(data.rows) * RADIO_ROW_H + note_h + BOTTOM_PAD + GAP

    def render(
        self, c: Canvas, cursor_y: float, page_width: float, data: RadioGroupData
    ) -> float:
        x, w = content_box(page_width)
        panel_h = self.estimate_height(data, page_width) - GAP
        bottom = cursor_y - panel_h
        draw_panel(c, x, bottom, w, panel_h, data.title)

        options_x = x + PAD + self.label_w
        options_w = w - 2 * PAD - self.label_w
        y = cursor_y - TITLE_RESERVE
        for row in data.rows:
            mid = y - RADIO_ROW_H / 2
            c.setFillColor(hex_color(SUB_CLR))
            c.setFont(fonts().regular, FS_BODY)
            c.drawString(x + PAD, mid - FS_BODY * 0.35, row.label)
            slot_w = min(options_w / max(len(row.options), 1), self.max_slot_w)
            for i, option in enumerate(row.options):
                cx = options_x + i * slot_w + RADIO_RADIUS
                selected = row.selected == i
                draw_radio(c, cx, mid, selected)
                c.setFillColor(hex_color(TEXT_CLR if selected else SUB_CLR))
                c.setFont(fonts().bold if selected else fonts().regular, FS_SMALL)
                c.drawString(cx + RADIO_RADIUS + 1.5, mid - FS_SMALL * 0.35, option)
            y -= RADIO_ROW_H
        if data.note:
            c.setFillColor(hex_color(TEXT_CLR))
            c.setFont(fonts().bold, FS_BODY)
            c.drawString(x + PAD, y - RADIO_ROW_H / 2 - FS_BODY * 0.35, data.note)
        return bottom - GAP


class AcknowledgmentSection:
    """Mileage, fuel, keys, documents and notes with the customer confirmation box."""

    name = "acknowledgment"

    def _value_w(self, page_width: float) -> float:
        _, w = content_box(page_width)
        return w - 2 * PAD - LABEL_W

    def estimate_height(self, data: AcknowledgmentData, page_width: float) -> float:
        rows_h = _rows_height(data.rows, self._value_w(page_width))
        return TITLE_RESERVE + rows_h + 1 * mm + CONFIRM_BOX_H + BOTTOM_PAD + GAP

    def render(
        self, c: Canvas, cursor_y: float, page_width: float, data: AcknowledgmentData
    ) -> float:
        x, w = content_box(page_width)
        panel_h = self.estimate_height(data, page_width) - GAP
        bottom = cursor_y - panel_h
        draw_panel(c, x, bottom, w, panel_h, data.title)
        y = _draw_rows(c, x + PAD, cursor_y - TITLE_RESERVE, data.rows, self._value_w(page_width))

        tone = "success" if data.confirmed else "error"
        bg, border, accent = TONE_COLORS[tone]
        box_top = y - 1 * mm
        box_x = x + PAD
        box_w = w - 2 * PAD
        c.setFillColor(hex_color(bg))
        c.setStrokeColor(hex_color(border))
        c.setLineWidth(0.8)
        c.roundRect(box_x, box_top - CONFIRM_BOX_H, box_w, CONFIRM_BOX_H, 3, stroke=1, fill=1)
        mid = box_top - CONFIRM_BOX_H / 2
        draw_checkbox(c, box_x + 3 * mm, mid - CHECKBOX_SIZE / 2, data.confirmed, color=accent)
        c.setFillColor(hex_color(accent))
        c.setFont(fonts().bold, FS_BODY + 0.5)
        c.drawString(box_x + 3 * mm + CHECKBOX_SIZE + 2 * mm, mid - 2.8, data.confirmation_text)
        return bottom - GAP


class DamageSummarySection:
    """Counts of carried-over, new and total damage."""

    name = "damage_summary"

    def estimate_height(self, data: DamageSummaryData, page_width: float) -> float:
        _, w = content_box(page_width)
        rows_h = _rows_height(data.rows, w - 2 * PAD - LABEL_W)
        return TITLE_RESERVE + rows_h + BOTTOM_PAD + GAP

    def render(
        self, c: Canvas, cursor_y: float, page_width: float, data: DamageSummaryData
    ) -> float:
        x, w = content_box(page_width)
        panel_h = self.estimate_height(data, page_width) - GAP
        bottom = cursor_y - panel_h
        draw_panel(c, x, bottom, w, panel_h, data.title)
        _draw_rows(c, x + PAD, cursor_y - TITLE_RESERVE, data.rows, w - 2 * PAD - LABEL_W)
        return bottom - GAP


class DamageBlockSection:
    """One titled, tone-coloured group of damage entries, or an empty-state banner.

    Long groups are split into several blocks before layout so that each
    block has a fixed height and never has to straddle a page.
    """

    name = "damage"
    # Column offsets as fractions of the table width.
    columns = (0.0, 0.07, 0.42, 0.64, 0.82)

    def _message_h(self, data: DamageBlockData, inner_w: float) -> float:
        if not data.message:
            return 0.0
        return text_height(data.message, inner_w, size=FS_BODY)

    def _note_h(self, data: DamageBlockData, inner_w: float) -> float:
        if not data.trailing_note:
            return 0.0
        note_h = text_height(data.trailing_note, inner_w, font=fonts().italic, size=FS_BODY)
        return 1.5 * mm + note_h

    def estimate_height(self, data: DamageBlockData, page_width: float) -> float:
        _, w = content_box(page_width)
        inner_w = w - 2 * PAD
        if data.rows:
            body = TABLE_ROW_H + len(data.rows) * DAMAGE_ROW_H
        else:
            body = 6 * mm + self._message_h(data, inner_w)
        return TITLE_RESERVE + body + self._note_h(data, inner_w) + BOTTOM_PAD + GAP

    def render(
        self, c: Canvas, cursor_y: float, page_width: float, data: DamageBlockData
    ) -> float:
        x, w = content_box(page_width)
        inner_x = x + PAD
        inner_w = w - 2 * PAD
        panel_h = self.estimate_height(data, page_width) - GAP
        bottom = cursor_y - panel_h
        bg, border, accent = TONE_COLORS.get(data.tone, TONE_COLORS["neutral"])
        draw_panel(
            c, x, bottom, w, panel_h, data.title, fill=bg, border=border, title_color=accent
        )
        y = cursor_y - TITLE_RESERVE

        if not data.rows:
            c.setFillColor(hex_color(accent))
            c.setFont(fonts().bold, 10)
            c.drawString(inner_x, y - 4.5 * mm, data.banner)
            y -= 6 * mm
            if data.message:
                y = draw_text(c, inner_x, y, inner_w, data.message, color=SUB_CLR)
        else:
            col_x = [inner_x + 2 * mm + f * inner_w for f in self.columns]
            c.setFillColor(hex_color("#ffffff"))
            c.rect(inner_x, y - TABLE_ROW_H, inner_w, TABLE_ROW_H, stroke=0, fill=1)
            c.setFillColor(hex_color(SUB_CLR))
            c.setFont(fonts().bold, FS_SMALL)
            for cx, heading in zip(col_x, data.column_headings, strict=True):
                c.drawString(cx, y - TABLE_ROW_H + 1.7 * mm, heading)
            y -= TABLE_ROW_H
            for row in data.rows:
                row_bottom = y - DAMAGE_ROW_H
                c.setStrokeColor(hex_color(border))
                c.setLineWidth(0.4)
                c.line(inner_x, row_bottom, inner_x + inner_w, row_bottom)
                line1 = y - 3.6 * mm
                c.setFillColor(hex_color(accent))
                c.setFont(fonts().bold, FS_BODY)
                c.drawString(col_x[0], line1, row.number)
                c.setFillColor(hex_color(TEXT_CLR))
                c.setFont(fonts().regular, FS_BODY)
                values = (row.location, row.damage_type, row.size, row.photos)
                for cx, value in zip(col_x[1:], values, strict=True):
                    c.drawString(cx, line1, value)
                if row.note:
                    draw_text(
                        c,
                        col_x[1],
                        y - 4.4 * mm,
                        inner_x + inner_w - col_x[1] - 2 * mm,
                        row.note,
                        font=fonts().italic,
                        size=FS_SMALL,
                        color=SUB_CLR,
                        max_lines=1,
                    )
                y = row_bottom

        if data.trailing_note:
            draw_text(
                c,
                inner_x,
                y - 1.5 * mm,
                inner_w,
                data.trailing_note,
                font=fonts().italic,
                size=FS_BODY,
                color=accent,
            )
        return bottom - GAP


class PhotoEvidenceSection:
    """Captioned photo frames in a two-column grid.

    Frames have a fixed height, so the block height depends only on the
    number of rows.  A photo without image bytes, or with bytes that cannot
    be decoded, gets a centred placeholder in its frame.
    """

    name = "photos"
    columns = 2

    def _rows(self, data: PhotoBlockData) -> int:
        return max((len(data.cells) + self.columns - 1) // self.columns, 1)

    def estimate_height(self, data: PhotoBlockData, page_width: float) -> float:
        row_h = PHOTO_CAPTION_H + PHOTO_FRAME_H + PHOTO_ROW_GAP
        return TITLE_RESERVE + self._rows(data) * row_h + BOTTOM_PAD + GAP

    def render(
        self, c: Canvas, cursor_y: float, page_width: float, data: PhotoBlockData
    ) -> float:
        x, w = content_box(page_width)
        panel_h = self.estimate_height(data, page_width) - GAP
        bottom = cursor_y - panel_h
        draw_panel(c, x, bottom, w, panel_h, data.title)

        cell_w = (w - 2 * PAD - (self.columns - 1) * GAP) / self.columns
        row_h = PHOTO_CAPTION_H + PHOTO_FRAME_H + PHOTO_ROW_GAP
        for idx, cell in enumerate(data.cells):
            row, col = divmod(idx, self.columns)
            cx = x + PAD + col * (cell_w + GAP)
            top = cursor_y - TITLE_RESERVE - row * row_h
            draw_text(c, cx, top, cell_w, cell.caption, font=fonts().bold, max_lines=1)
            frame_y = top - PHOTO_CAPTION_H - PHOTO_FRAME_H
            c.setStrokeColor(hex_color(LINE_CLR))
            c.setFillColor(hex_color("#ffffff"))
            c.setLineWidth(0.8)
            c.rect(cx, frame_y, cell_w, PHOTO_FRAME_H, stroke=1, fill=1)

            image = load_image(cell.image)
            if image is not None:
                c.drawImage(
                    image,
                    cx + 2,
                    frame_y + 2,
                    cell_w - 4,
                    PHOTO_FRAME_H - 4,
                    preserveAspectRatio=True,
                    anchor="c",
                    mask="auto",
                )
                continue
            text = data.unreadable_text if cell.image else data.placeholder
            c.setFillColor(hex_color(MUTED_CLR))
            c.setFont(fonts().italic, FS_BODY)
            c.drawCentredString(cx + cell_w / 2, frame_y + PHOTO_FRAME_H / 2 - 2.5, text)
        return bottom - GAP


class DisclaimerSection:
    """Justified legal paragraph."""

    name = "disclaimer"

    def _paragraph(self, data: DisclaimerData) -> Paragraph:
        style = ParagraphStyle(
            "disclaimer",
            fontName=fonts().regular,
            fontSize=FS_SMALL + 0.5,
            leading=FS_SMALL + 3,
            alignment=TA_JUSTIFY,
            textColor=hex_color(SUB_CLR),
        )
        return Paragraph(escape(data.text), style)

    def _inner_w(self, page_width: float) -> float:
        _, w = content_box(page_width)
        return w - 2 * PAD

    def estimate_height(self, data: DisclaimerData, page_width: float) -> float:
        _, para_h = self._paragraph(data).wrap(self._inner_w(page_width), 10_000)
        return TITLE_RESERVE + para_h + BOTTOM_PAD + GAP

    def render(
        self, c: Canvas, cursor_y: float, page_width: float, data: DisclaimerData
    ) -> float:
        x, w = content_box(page_width)
        panel_h = self.estimate_height(data, page_width) - GAP
        bottom = cursor_y - panel_h
        draw_panel(c, x, bottom, w, panel_h, data.title, fill=SOFT_BG)
        para = self._paragraph(data)
        _, para_h = para.wrap(self._inner_w(page_width), 10_000)
        para.drawOn(c, x + PAD, cursor_y - TITLE_RESERVE - para_h)
        return bottom - GAP


class SignatureSection:
    """Confirmation statement plus customer and company signature blocks."""

    name = "signatures"
    statement_max_lines = 3

    def _statement_h(self, data: SignatureData, page_width: float) -> float:
        _, w = content_box(page_width)
        return text_height(
            data.statement,
            w - 2 * PAD,
            font=fonts().bold,
            size=FS_BODY,
            max_lines=self.statement_max_lines,
        )

    def estimate_height(self, data: SignatureData, page_width: float) -> float:
        party_h = 5 * mm + SIGNATURE_BOX_H + 2 * mm + 2 * (FS_BODY + 2)
        return (
            TITLE_RESERVE
            + self._statement_h(data, page_width)
            + 2 * mm
            + party_h
            + BOTTOM_PAD
            + GAP
        )

    def render(
        self, c: Canvas, cursor_y: float, page_width: float, data: SignatureData
    ) -> float:
        x, w = content_box(page_width)
        panel_h = self.estimate_height(data, page_width) - GAP
        bottom = cursor_y - panel_h
        draw_panel(c, x, bottom, w, panel_h, data.title)
        y = draw_text(
            c,
            x + PAD,
            cursor_y - TITLE_RESERVE,
            w - 2 * PAD,
            data.statement,
            font=fonts().bold,
            max_lines=self.statement_max_lines,
        )
        y -= 2 * mm

        n = max(len(data.parties), 1)
        col_w = (w - 2 * PAD - (n - 1) * GAP) / n
        for i, party in enumerate(data.parties):
            px = x + PAD + i * (col_w + GAP)
            draw_text(c, px, y, col_w, party.heading, font=fonts().bold, max_lines=1)
            box_top = y - 5 * mm
            box_bottom = box_top - SIGNATURE_BOX_H
            c.setStrokeColor(hex_color(LINE_CLR))
            c.setFillColor(hex_color("#ffffff"))
            c.setLineWidth(0.8)
            c.rect(px, box_bottom, col_w, SIGNATURE_BOX_H, stroke=1, fill=1)
            if party.signed:
                draw_stamp(
                    c,
                    px + 4 * mm,
                    box_bottom + (SIGNATURE_BOX_H - 8 - 3 * mm) / 2,
                    party.stamp_text,
                    color=REPORT_COLORS["success"],
                )
            else:
                c.setFillColor(hex_color(MUTED_CLR))
                c.setFont(fonts().italic, FS_BODY)
                c.drawCentredString(
                    px + col_w / 2, box_bottom + SIGNATURE_BOX_H / 2 - 2.5, party.unsigned_text
                )
            line_y = box_bottom - 2 * mm
            line_y = draw_text(c, px, line_y, col_w, party.name_label, color=SUB_CLR, max_lines=1)
            draw_text(c, px, line_y, col_w, party.date_label, color=SUB_CLR, max_lines=1)
        return bottom - GAP
