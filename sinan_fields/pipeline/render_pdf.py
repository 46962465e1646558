from __future__ import annotations

from dataclasses import replace
from functools import lru_cache
from io import BytesIO
import logging
from pathlib import Path
import re
from typing import BinaryIO, List, Sequence, Tuple, Union
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle
from reportlab.pdfbase import pdfmetrics
from reportlab.platypus import Flowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from reportlab.platypus.doctemplate import LayoutError

from . import paint
from ..config import DEFAULT_STYLE, PAGE_MARGINS, PAGE_SIZE, ROW_SPACING, Style
from ..errors import RenderFailure
from ..models import Align, Border, Box, FontRole, Grid, LayoutBox, Painter, Rect, Text, VAlign
from ..storage import atomic_output


logger = logging.getLogger(__name__)

ALIGNMENTS = {Align.LEFT: TA_LEFT, Align.CENTER: TA_CENTER, Align.RIGHT: TA_RIGHT}


class PaintedTable(Table):
    """
    Table that runs paint callbacks once ReportLab has fixed its geometry.

    ``painted`` holds ``(col, row, span, painters)`` entries; each painter gets the
    cell rectangle in the table's own coordinates.
    """

    def __init__(self, data, *args, painted=(), paint_style: Style = DEFAULT_STYLE, **kwargs):
        Table.__init__(self, data, *args, **kwargs)
        self.painted = tuple(painted)
        self.paint_style = paint_style

    def cell_rect(self, col: int, row: int, span: int = 1) -> Rect:
        left = self._colpositions[col]
        right = self._colpositions[col + span]
        top = self._rowpositions[row]
        bottom = self._rowpositions[row + 1]
        return Rect(left, bottom, right - left, top - bottom)

    def draw(self) -> None:
        Table.draw(self)
        for col, row, span, painters in self.painted:
            rect = self.cell_rect(col, row, span)
            for painter in painters:
                painter(self.canv, rect, self.paint_style)


class MinHeight(Flowable):
    """Report at least ``min_height`` and place the content by vertical alignment."""

    def __init__(self, content: Flowable, min_height: float, valign: VAlign = VAlign.TOP) -> None:
        Flowable.__init__(self)
        self.content = content
        self.min_height = float(min_height)
        self.valign = valign
        self._content_height = 0.0

    def wrap(self, availWidth, availHeight):
        _, h = self.content.wrap(availWidth, availHeight)
        self._content_height = h
        self.width = availWidth
        self.height = max(h, self.min_height)
        return self.width, self.height

    def draw(self) -> None:
        extra = self.height - self._content_height
        if self.valign == VAlign.TOP:
            y = extra
        elif self.valign == VAlign.MIDDLE:
            y = extra / 2.0
        else:
            y = 0.0
        self.content.drawOn(self.canv, 0, y)


@lru_cache(maxsize=None)
def _paragraph_style(style: Style, role: FontRole, align: Align) -> ParagraphStyle:
    font, size = style.font(role.value)
    return ParagraphStyle(
        name=f"{role.value}-{align.value.lower()}",
        fontName=font,
        fontSize=size,
        leading=size * 1.2,
        alignment=ALIGNMENTS[align],
    )


def _markup(content: str) -> str:
    # Paragraph collapses whitespace; legend codes are lined up with runs of spaces
    markup = re.sub(r" {2,}", lambda m: " " + "&nbsp;" * (len(m.group()) - 1), escape(content or ""))
    return markup.replace("\n", "<br/>")


def _gap(width: float, font: str, size: float) -> str:
    space = pdfmetrics.stringWidth(" ", font, size) or 1.0
    return "&nbsp;" * max(1, int(round(width / space)))


def text_markup(text: Text, style: Style = DEFAULT_STYLE) -> str:
    markup = _markup(text.content)
    for run in text.inline:
        font, size = style.font(run.role.value)
        markup += _gap(style.legend_spacing, font, size)
        markup += f'<font name="{font}" size="{size:g}">{_markup(run.content)}</font>'
    return markup


def render_text(text: Text, style: Style = DEFAULT_STYLE) -> Paragraph:
    return Paragraph(text_markup(text, style), _paragraph_style(style, text.role, text.align))


def _cell_content(box: Box, style: Style):
    child = box.child
    if child is None:
        content = None
    elif isinstance(child, Text):
        content = render_text(child, style)
    else:
        content = render_grid(child, style)

    if box.min_height > 0:
        inner = max(0.0, box.min_height - box.padding.top - box.padding.bottom)
        return MinHeight(content if content is not None else Spacer(0, 0), inner, box.valign)
    return "" if content is None else content


def _cell_commands(box: Box, col: int, row: int, style: Style) -> List[tuple]:
    start, end = (col, row), (col + box.span - 1, row)
    commands: List[tuple] = [
        ("LEFTPADDING", start, end, box.padding.left),
        ("RIGHTPADDING", start, end, box.padding.right),
        ("TOPPADDING", start, end, box.padding.top),
        ("BOTTOMPADDING", start, end, box.padding.bottom),
        ("VALIGN", start, end, box.valign.value),
    ]
    if box.span > 1:
        commands.append(("SPAN", start, end))
    if box.border == Border.BOX:
        commands.append(("BOX", start, end, style.border_width, colors.black))
    elif box.border == Border.BOTTOM:
        commands.append(("LINEBELOW", start, end, style.border_width, colors.black))
    return commands


def cell_painters(box: Box) -> Tuple[Painter, ...]:
    if box.border == Border.ROUNDED_BOTTOM:
        return (paint.rounded_bottom_border,) + tuple(box.painters)
    return tuple(box.painters)


def render_grid(grid: Grid, style: Style = DEFAULT_STYLE) -> Flowable:
    rows = grid.rows()
    if not rows:
        return Spacer(0, 0)

    data: List[list] = []
    commands: List[tuple] = []
    painted: List[tuple] = []
    for r, row in enumerate(rows):
        line: list = []
        col = 0
        for box in row:
            line.append(_cell_content(box, style))
            line.extend([""] * (box.span - 1))
            commands.extend(_cell_commands(box, col, r, style))
            painters = cell_painters(box)
            if painters:
                painted.append((col, r, box.span, painters))
            col += box.span
        data.append(line)

    return PaintedTable(
        data,
        colWidths=[f"{w}%" for w in grid.widths],
        style=TableStyle(commands),
        hAlign="LEFT",
        painted=painted,
        paint_style=style,
    )


def render(layout: LayoutBox, style: Style = DEFAULT_STYLE) -> Flowable:
    """Turn one top-level layout tree into a flowable spanning the frame width."""
    if isinstance(layout, Box):
        layout = Grid((100.0,), (replace(layout, span=1),))
    return render_grid(layout, style)


def check_fonts(style: Style) -> None:
    for role in FontRole:
        name, _ = style.font(role.value)
        try:
            pdfmetrics.getFont(name)
        except KeyError as exc:
            raise RenderFailure(f"Font {name!r} for {role.value} text is not registered") from exc


def _build(layouts: Sequence[LayoutBox], sink: Union[str, BinaryIO], style: Style, title: str) -> None:
    check_fonts(style)
    story: List[Flowable] = []
    for layout in layouts:
        if story:
            story.append(Spacer(1, ROW_SPACING))
        story.append(render(layout, style))

    left, right, top, bottom = PAGE_MARGINS
    doc = SimpleDocTemplate(
        sink,
        pagesize=PAGE_SIZE,
        leftMargin=left,
        rightMargin=right,
        topMargin=top,
        bottomMargin=bottom,
        title=title,
    )
    try:
        doc.build(story)
    except LayoutError as exc:
        raise RenderFailure(f"Could not lay out document: {exc}") from exc


def render_bytes(layouts: Sequence[LayoutBox], style: Style = DEFAULT_STYLE, title: str = "") -> bytes:
    buffer = BytesIO()
    _build(layouts, buffer, style, title)
    return buffer.getvalue()


def write_document(
    layouts: Sequence[LayoutBox],
    output: Path,
    style: Style = DEFAULT_STYLE,
    title: str = "",
) -> Path:
    output = Path(output)
    with atomic_output(output) as tmp_path:
        _build(layouts, str(tmp_path), style, title)
    logger.info("Wrote %s (%d rows)", output, len(layouts))
    return output
