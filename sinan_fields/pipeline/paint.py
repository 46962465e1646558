"""
Custom cell decorations.

Each painter is called with the canvas, the cell rectangle that the table
engine resolved during layout, and the active Style. Geometry lives in small
pure helpers so it can be checked without a canvas.
"""
from __future__ import annotations

from typing import List, Tuple

from reportlab.lib import colors
from reportlab.pdfgen import canvas

from ..config import Style
from ..models import Rect


PathOp = Tuple[str, Tuple[float, ...]]


def rounded_bottom_path(rect: Rect, radius: float, kappa: float, stroke: float = 0.0) -> List[PathOp]:
    """
    Left edge top->down, quarter turn into the bottom edge, bottom edge, quarter
    turn up the right edge. The top edge is left open.
    """
    inset = stroke / 2.0
    left = rect.x + inset
    right = rect.right - inset
    bottom = rect.y + inset
    top = rect.top - inset
    r = max(0.0, min(radius, (right - left) / 2.0, top - bottom))
    k = kappa * r
    return [
        ("moveTo", (left, top)),
        ("lineTo", (left, bottom + r)),
        ("curveTo", (left, bottom + r - k, left + r - k, bottom, left + r, bottom)),
        ("lineTo", (right - r, bottom)),
        ("curveTo", (right - r + k, bottom, right, bottom + r - k, right, bottom + r)),
        ("lineTo", (right, top)),
    ]


def top_left_square_origin(rect: Rect, size: float, stroke: float) -> Tuple[float, float]:
    # bottom-left corner of a square hanging from the cell's top-left corner
    inset = stroke / 2.0
    return rect.x + inset, rect.top - inset - size


def centered_square_origin(rect: Rect, size: float) -> Tuple[float, float]:
    return rect.x + (rect.width - size) / 2.0, rect.y + (rect.height - size) / 2.0


def centered_baseline(center_y: float, font_size: float, nudge: float) -> float:
    # cap height of the standard fonts is ~0.7em
    return center_y - font_size * 0.35 + nudge


def _apply_path(canv: canvas.Canvas, ops: List[PathOp]):
    path = canv.beginPath()
    for name, args in ops:
        getattr(path, name)(*args)
    return path


def rounded_bottom_border(canv: canvas.Canvas, rect: Rect, style: Style) -> None:
    ops = rounded_bottom_path(rect, style.corner_radius, style.bezier_kappa, style.border_width)
    canv.saveState()
    canv.setStrokeColor(colors.black)
    canv.setLineWidth(style.border_width)
    canv.drawPath(_apply_path(canv, ops), stroke=1, fill=0)
    canv.restoreState()


def top_left_square(canv: canvas.Canvas, rect: Rect, style: Style, size: float, text: str = "") -> None:
    x, y = top_left_square_origin(rect, size, style.square_width)
    canv.saveState()
    canv.setStrokeColor(colors.black)
    canv.setFillColor(colors.black)
    canv.setLineWidth(style.square_width)
    canv.rect(x, y, size, size, stroke=1, fill=1)
    if text:
        font, font_size = style.font("number")
        canv.setFillColor(colors.white)
        canv.setFont(font, font_size)
        baseline = centered_baseline(y + size / 2.0, font_size, style.text_nudge)
        canv.drawCentredString(x + size / 2.0, baseline, text)
    canv.restoreState()


def centered_square(canv: canvas.Canvas, rect: Rect, style: Style, size: float) -> None:
    # narrow option columns shrink the square so it stays inside its cell
    size = min(size, rect.width, rect.height)
    x, y = centered_square_origin(rect, size)
    canv.saveState()
    canv.setStrokeColor(colors.black)
    canv.setLineWidth(style.square_width)
    canv.rect(x, y, size, size, stroke=1, fill=0)
    canv.restoreState()
