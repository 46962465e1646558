from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from ..config import DEFAULT_STYLE, Style
from ..models import Form, FormRow, LayoutBox
from ..storage import output_path
from .compose import compose_field, compose_row
from .render_pdf import write_document


logger = logging.getLogger(__name__)


def compose_form_row(row: FormRow, style: Style = DEFAULT_STYLE) -> LayoutBox:
    boxes = [compose_field(spec, style) for spec in row.fields]
    if row.widths is None and len(boxes) == 1:
        return boxes[0]
    widths = row.widths if row.widths is not None else [1.0] * len(boxes)
    return compose_row(boxes, widths)


def compose_form(form: Form, style: Style = DEFAULT_STYLE) -> List[LayoutBox]:
    layouts = [compose_form_row(row, style) for row in form.rows]
    logger.debug(
        "Composed %s: %d rows, %d fields",
        form.title,
        len(layouts),
        sum(len(row.fields) for row in form.rows),
    )
    return layouts


def build_form(form: Form, out: Optional[Path] = None, style: Style = DEFAULT_STYLE) -> Path:
    target = Path(out) if out else output_path(form.title)
    try:
        layouts = compose_form(form, style)
        return write_document(layouts, target, style=style, title=form.title)
    except Exception:
        logger.exception("Form build failed for %s", form.title)
        raise
