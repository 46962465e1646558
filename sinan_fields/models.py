from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import math
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple, Union

from .errors import InvalidInput


# --- field descriptions ---


@dataclass(frozen=True)
class OptionAnswer:
    label: str
    answer: Optional[str] = None


@dataclass(frozen=True)
class OtherField:
    value: Optional[str] = None


@dataclass(frozen=True)
class Descriptive:
    content: Optional[str] = None
    min_height: Optional[float] = None


@dataclass(frozen=True)
class LegendWithAnswer:
    legend_lines: Tuple[str, ...] = ()
    answer: Optional[str] = None


@dataclass(frozen=True)
class MultipleChoice:
    legend: str
    options: Tuple[OptionAnswer, ...]
    columns: int
    other: Optional[OtherField] = None

    @classmethod
    def from_lists(
        cls,
        legend: str,
        labels: Sequence[str],
        answers: Optional[Sequence[Optional[str]]] = None,
        columns: int = 1,
        other: Optional[OtherField] = None,
    ) -> "MultipleChoice":
        # answer i belongs to option i; a short answer list leaves the rest empty
        answers = list(answers or [])
        options = tuple(
            OptionAnswer(label, answers[i] if i < len(answers) and answers[i] is not None else "")
            for i, label in enumerate(labels)
        )
        return cls(legend=legend, options=options, columns=columns, other=other)


FieldKind = Union[Descriptive, LegendWithAnswer, MultipleChoice]


@dataclass(frozen=True)
class FieldSpec:
    number: str
    title: str
    kind: FieldKind


# --- layout tree ---


class Border(str, Enum):
    NONE = "none"
    BOX = "box"
    BOTTOM = "bottom"
    ROUNDED_BOTTOM = "rounded_bottom"


class FontRole(str, Enum):
    TITLE = "title"
    LEGEND = "legend"
    CONTENT = "content"
    NUMBER = "number"
    CHECKBOX = "checkbox"


class Align(str, Enum):
    LEFT = "LEFT"
    CENTER = "CENTER"
    RIGHT = "RIGHT"


class VAlign(str, Enum):
    TOP = "TOP"
    MIDDLE = "MIDDLE"
    BOTTOM = "BOTTOM"


class Rect(NamedTuple):
    """Resolved cell geometry in the coordinates of the drawing canvas."""

    x: float
    y: float
    width: float
    height: float

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width


Painter = Callable[..., None]


@dataclass(frozen=True)
class Text:
    content: str
    role: FontRole = FontRole.CONTENT
    align: Align = Align.LEFT
    # runs continuing the same line, each preceded by legend spacing
    inline: Tuple["Text", ...] = ()


@dataclass(frozen=True)
class Padding:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    @classmethod
    def all(cls, value: float) -> "Padding":
        return cls(value, value, value, value)


@dataclass(frozen=True)
class Box:
    child: Optional[Union[Text, "Grid"]] = None
    border: Border = Border.NONE
    padding: Padding = Padding()
    min_height: float = 0.0
    valign: VAlign = VAlign.TOP
    span: int = 1
    painters: Tuple[Painter, ...] = ()


@dataclass(frozen=True)
class Grid:
    widths: Tuple[float, ...]
    cells: Tuple[Box, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.widths:
            raise InvalidInput("Grid needs at least one column")
        if any(w <= 0 for w in self.widths):
            raise InvalidInput("Grid column weights must be positive")
        if not math.isclose(sum(self.widths), 100.0, abs_tol=1e-6):
            raise InvalidInput(f"Grid column weights must sum to 100, got {sum(self.widths)}")
        self.rows()

    @property
    def columns(self) -> int:
        return len(self.widths)

    def rows(self) -> List[List[Box]]:
        rows: List[List[Box]] = []
        current: List[Box] = []
        filled = 0
        for cell in self.cells:
            if cell.span < 1 or filled + cell.span > self.columns:
                raise InvalidInput(
                    f"Cell spanning {cell.span} columns does not fit a {self.columns}-column row"
                )
            current.append(cell)
            filled += cell.span
            if filled == self.columns:
                rows.append(current)
                current, filled = [], 0
        if current:
            raise InvalidInput(f"Last row has {filled} of {self.columns} columns filled")
        return rows


LayoutBox = Union[Box, Grid]


# --- documents ---


@dataclass(frozen=True)
class FormRow:
    fields: Tuple[FieldSpec, ...]
    # None places a lone field as-is; several fields share the row equally
    widths: Optional[Tuple[float, ...]] = None


@dataclass(frozen=True)
class Form:
    title: str
    rows: Tuple[FormRow, ...]
