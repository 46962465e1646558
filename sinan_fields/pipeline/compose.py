from __future__ import annotations

from dataclasses import replace
from functools import partial
from typing import List, Sequence, Tuple, Type, TypeVar

from . import paint
from ..config import DEFAULT_STYLE, OTHER_LABEL, Style
from ..errors import InvalidInput
from ..models import (
    Align,
    Border,
    Box,
    Descriptive,
    FieldSpec,
    FontRole,
    Grid,
    LayoutBox,
    LegendWithAnswer,
    MultipleChoice,
    OtherField,
    Padding,
    Text,
    VAlign,
)


K = TypeVar("K")

CONTENT_PADDING = 5.0
LEGEND_TOP_PADDING = 1.0
HEADER_BOTTOM_PADDING = 5.0
OPTION_PADDING = 2.0
LABEL_PADDING = 3.0
ANSWER_SIDE_WEIGHTS = (85.0, 15.0)
OPTION_WEIGHTS = (12.0, 88.0)


def _kind(spec: FieldSpec, expected: Type[K]) -> K:
    if not isinstance(spec.kind, expected):
        raise InvalidInput(
            f"Field {spec.number} is {type(spec.kind).__name__}, expected {expected.__name__}"
        )
    return spec.kind


def equal_widths(columns: int) -> Tuple[float, ...]:
    if isinstance(columns, bool) or not isinstance(columns, int) or columns < 1:
        raise InvalidInput(f"Column count must be a positive integer, got {columns!r}")
    return normalize_weights([1.0] * columns)


def normalize_weights(weights: Sequence[float]) -> Tuple[float, ...]:
    """Scale positive weights to percentages that sum to exactly 100."""
    values = [float(w) for w in weights]
    if not values:
        raise InvalidInput("At least one weight is required")
    if any(w <= 0 for w in values):
        raise InvalidInput(f"Weights must be positive: {list(weights)}")
    total = sum(values)
    scaled = [w * 100.0 / total for w in values]
    # absorb float drift in the last column
    scaled[-1] = 100.0 - sum(scaled[:-1])
    return tuple(scaled)


def _field_box(body: Grid, style: Style, min_height: float = 0.0) -> Box:
    return Box(
        child=body,
        border=Border.ROUNDED_BOTTOM,
        padding=Padding.all(style.field_padding),
        min_height=max(0.0, float(min_height or 0.0)),
    )


def _header_box(spec: FieldSpec, style: Style, legend: str = "", bottom: float = 0.0) -> Box:
    inline = (Text(legend, FontRole.LEGEND),) if legend else ()
    return Box(
        child=Text(spec.title or "", FontRole.TITLE, inline=inline),
        padding=Padding(top=1.5, bottom=bottom, left=style.title_indent),
        min_height=style.number_square,
        painters=(partial(paint.top_left_square, size=style.number_square, text=spec.number),),
    )


def _checkbox_box(value: str, style: Style) -> Box:
    return Box(
        child=Text(value or "", FontRole.CHECKBOX, Align.CENTER),
        min_height=style.checkbox_square + 2 * OPTION_PADDING,
        valign=VAlign.MIDDLE,
        painters=(partial(paint.centered_square, size=style.checkbox_square),),
    )


def _option_box(label: str, answer: str, style: Style) -> Box:
    label_box = Box(
        child=Text(label, FontRole.LEGEND),
        padding=Padding(left=LABEL_PADDING),
        valign=VAlign.MIDDLE,
    )
    return Box(
        child=Grid(OPTION_WEIGHTS, (_checkbox_box(answer, style), label_box)),
        padding=Padding.all(OPTION_PADDING),
    )


def compose_descriptive(spec: FieldSpec, style: Style = DEFAULT_STYLE) -> Box:
    kind = _kind(spec, Descriptive)
    content = Box(
        child=Text(kind.content or "", FontRole.CONTENT),
        padding=Padding.all(CONTENT_PADDING),
    )
    body = Grid((100.0,), (_header_box(spec, style), content))
    return _field_box(body, style, min_height=kind.min_height or 0.0)


def compose_legend_with_answer(spec: FieldSpec, style: Style = DEFAULT_STYLE) -> Box:
    kind = _kind(spec, LegendWithAnswer)
    left_cells: List[Box] = [_header_box(spec, style)]
    for line in kind.legend_lines:
        left_cells.append(
            Box(
                child=Text(line, FontRole.LEGEND),
                padding=Padding(top=LEGEND_TOP_PADDING, left=style.title_indent),
            )
        )
    left = Box(child=Grid((100.0,), tuple(left_cells)))

    # kept in its own grid so the square hugs the title row instead of the field's centre
    answer = Box(
        child=Text(kind.answer or "", FontRole.CONTENT, Align.CENTER),
        min_height=style.answer_square,
        valign=VAlign.MIDDLE,
        painters=(partial(paint.centered_square, size=style.answer_square),),
    )
    right = Box(child=Grid((100.0,), (answer,)), valign=VAlign.TOP)

    return _field_box(Grid(ANSWER_SIDE_WEIGHTS, (left, right)), style)


def option_grid(kind: MultipleChoice, style: Style = DEFAULT_STYLE) -> Grid:
    widths = equal_widths(kind.columns)
    cells = [_option_box(option.label, option.answer or "", style) for option in kind.options]
    remainder = len(cells) % kind.columns
    if remainder:
        cells.extend(Box() for _ in range(kind.columns - remainder))
    return Grid(widths, tuple(cells))


def other_grid(other: OtherField, columns: int, style: Style = DEFAULT_STYLE) -> Grid:
    widths = equal_widths(columns)
    line = Box(
        child=Text(other.value or "", FontRole.CONTENT),
        border=Border.BOTTOM,
        padding=Padding(bottom=2.0, left=LABEL_PADDING),
        valign=VAlign.BOTTOM,
        span=max(1, columns - 1),
    )
    # with a single column the fill-in line wraps onto its own row
    return Grid(widths, (_option_box(OTHER_LABEL, "", style), line))


def compose_multiple_choice(spec: FieldSpec, style: Style = DEFAULT_STYLE) -> Box:
    kind = _kind(spec, MultipleChoice)
    rows: List[Box] = [
        _header_box(spec, style, legend=kind.legend, bottom=HEADER_BOTTOM_PADDING),
        Box(child=option_grid(kind, style)),
    ]
    if kind.other is not None:
        rows.append(Box(child=other_grid(kind.other, kind.columns, style), padding=Padding(top=5.0)))
    return _field_box(Grid((100.0,), tuple(rows)), style)


COMPOSERS = {
    Descriptive: compose_descriptive,
    LegendWithAnswer: compose_legend_with_answer,
    MultipleChoice: compose_multiple_choice,
}


def compose_field(spec: FieldSpec, style: Style = DEFAULT_STYLE) -> Box:
    composer = COMPOSERS.get(type(spec.kind))
    if composer is None:
        raise InvalidInput(f"Unsupported field kind for field {spec.number}: {type(spec.kind).__name__}")
    return composer(spec, style)


def compose_row(boxes: Sequence[LayoutBox], weights: Sequence[float]) -> Grid:
    """
    Place boxes side by side in one row.

    The outer border of every box becomes a plain full box, whatever border the
    field composer gave it.
    """
    boxes = list(boxes)
    weights = list(weights)
    if len(boxes) != len(weights):
        raise InvalidInput(f"Row has {len(boxes)} boxes but {len(weights)} weights")
    widths = normalize_weights(weights)
    cells = []
    for box in boxes:
        if isinstance(box, Grid):
            box = Box(child=box)
        cells.append(replace(box, border=Border.BOX, span=1))
    return Grid(widths, tuple(cells))
