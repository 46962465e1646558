from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Dict, Optional
import json

from reportlab.lib.pagesizes import A4

from .errors import InvalidInput


# None means "out" under the working directory, resolved when a path is needed
OUT_DIR: Optional[Path] = None

PAGE_SIZE = A4
PAGE_MARGINS = (20.0, 20.0, 20.0, 20.0)  # left, right, top, bottom
ROW_SPACING = 6.0

OTHER_LABEL = "Outros:"


@dataclass(frozen=True)
class Style:
    title_font: str = "Helvetica-Bold"
    title_size: float = 8.0
    legend_font: str = "Helvetica"
    legend_size: float = 7.0
    content_font: str = "Helvetica"
    content_size: float = 9.0
    number_font: str = "Helvetica-Bold"
    number_size: float = 7.0
    checkbox_font: str = "Helvetica"
    checkbox_size: float = 7.0

    number_square: float = 12.0
    answer_square: float = 16.0
    checkbox_square: float = 10.0
    title_margin: float = 4.0
    legend_spacing: float = 12.0

    border_width: float = 0.5
    square_width: float = 0.5
    corner_radius: float = 6.0
    bezier_kappa: float = 0.5523
    # cap-height text sits slightly low when centred on its metrics
    text_nudge: float = 0.5

    field_padding: float = 4.0

    def font(self, role: str) -> tuple[str, float]:
        return getattr(self, f"{role}_font"), float(getattr(self, f"{role}_size"))

    @property
    def title_indent(self) -> float:
        return self.number_square + self.title_margin


def load_style(path: Optional[Path] = None) -> Style:
    if path is None:
        return DEFAULT_STYLE
    with Path(path).open("r", encoding="utf-8") as handle:
        try:
            overrides = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidInput(f"{path} is not valid UTF-8 JSON: {exc}") from exc
    if not isinstance(overrides, dict):
        raise InvalidInput(f"Style preset must be a JSON object: {path}")
    return style_with(overrides)


def style_with(overrides: Dict[str, object]) -> Style:
    known = {f.name for f in fields(Style)}
    unknown = sorted(set(overrides) - set(known))
    if unknown:
        raise InvalidInput(f"Unknown style keys: {', '.join(unknown)}")
    base = Style()
    cleaned = {}
    for key, value in overrides.items():
        default = getattr(base, key)
        if isinstance(default, float):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidInput(f"Style key {key} must be a number")
            cleaned[key] = float(value)
        else:
            if not isinstance(value, str) or not value:
                raise InvalidInput(f"Style key {key} must be a font name")
            cleaned[key] = value
    return replace(base, **cleaned)


def set_out_dir(path: Optional[Path]) -> None:
    global OUT_DIR
    OUT_DIR = path


def out_dir() -> Path:
    return OUT_DIR if OUT_DIR is not None else Path.cwd() / "out"


DEFAULT_STYLE = Style()
