from __future__ import annotations

from dataclasses import replace
from functools import partial
from io import BytesIO
from pathlib import Path

import pytest
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, Spacer

from sinan_fields.config import Style
from sinan_fields.errors import RenderFailure
from sinan_fields.models import (
    Border,
    Box,
    Descriptive,
    FieldSpec,
    FontRole,
    Grid,
    LegendWithAnswer,
    Padding,
    Text,
    VAlign,
)
from sinan_fields.pipeline import paint
from sinan_fields.pipeline.compose import compose_descriptive, compose_legend_with_answer, compose_row
from sinan_fields.pipeline.demo import demo_form
from sinan_fields.pipeline.render_pdf import (
    MinHeight,
    PaintedTable,
    cell_painters,
    check_fonts,
    render,
    render_bytes,
    render_grid,
    render_text,
    text_markup,
    write_document,
)
from sinan_fields.pipeline.run import compose_form


def _record(seen: list, name: str, canv, rect, style) -> None:
    seen.append((name, rect))


def test_painters_receive_resolved_cell_rects() -> None:
    seen: list = []
    grid = Grid(
        (50.0, 50.0),
        (
            Box(child=Text("left"), painters=(partial(_record, seen, "left"),)),
            Box(child=Text("right\nsecond line"), painters=(partial(_record, seen, "right"),)),
        ),
    )
    table = render_grid(grid, Style())
    assert isinstance(table, PaintedTable)

    canv = canvas.Canvas(BytesIO())
    width, height = table.wrapOn(canv, 200, 500)
    table.drawOn(canv, 0, 0)

    assert width == pytest.approx(200)
    assert [name for name, _ in seen] == ["left", "right"]
    left, right = (rect for _, rect in seen)
    assert left.x == pytest.approx(0)
    assert right.x == pytest.approx(100)
    assert left.width == pytest.approx(100)
    assert right.width == pytest.approx(100)
    # both cells share the row height set by the taller one
    assert left.height == pytest.approx(height)
    assert right.height == pytest.approx(height)
    assert left.y == pytest.approx(0)


def test_spanned_cell_rect_covers_all_columns() -> None:
    seen: list = []
    grid = Grid(
        (25.0, 25.0, 25.0, 25.0),
        (Box(child=Text("a")), Box(child=Text("b"), span=3, painters=(partial(_record, seen, "line"),))),
    )
    table = render_grid(grid, Style())
    canv = canvas.Canvas(BytesIO())
    table.wrapOn(canv, 400, 500)
    table.drawOn(canv, 0, 0)
    ((_, rect),) = seen
    assert rect.x == pytest.approx(100)
    assert rect.width == pytest.approx(300)


def test_rounded_border_painted_only_for_rounded_boxes() -> None:
    field = compose_descriptive(FieldSpec("32", "Ocupação", Descriptive("x")))
    assert cell_painters(field)[0] is paint.rounded_bottom_border
    (row_cell,) = compose_row([field], [100]).cells
    assert paint.rounded_bottom_border not in cell_painters(row_cell)
    assert cell_painters(Box(border=Border.BOTTOM)) == ()


def test_render_wraps_top_level_box_in_single_cell() -> None:
    field = compose_descriptive(FieldSpec("32", "Ocupação", Descriptive("x")))
    flowable = render(field)
    assert isinstance(flowable, PaintedTable)
    ((col, row, span, painters),) = flowable.painted
    assert (col, row, span) == (0, 0, 1)
    assert painters[0] is paint.rounded_bottom_border


def test_empty_grid_renders_nothing() -> None:
    assert isinstance(render_grid(Grid((100.0,), ())), Spacer)


def test_min_height_is_a_floor_not_a_cap() -> None:
    short = MinHeight(Spacer(10, 5), 40)
    assert short.wrap(100, 500) == (100, 40)

    tall = MinHeight(Spacer(10, 60), 40)
    assert tall.wrap(100, 500) == (100, 60)


def test_min_height_field_grows_with_content() -> None:
    style = Style()
    short = compose_descriptive(FieldSpec("32", "x", Descriptive("y", min_height=80)), style)
    long_text = " ".join(["palavra"] * 600)
    tall = compose_descriptive(FieldSpec("32", "x", Descriptive(long_text, min_height=80)), style)
    none = compose_descriptive(FieldSpec("32", "x", Descriptive("y")), style)

    canv = canvas.Canvas(BytesIO())
    _, short_h = render(short, style).wrapOn(canv, 300, 2000)
    _, tall_h = render(tall, style).wrapOn(canv, 300, 2000)
    _, none_h = render(none, style).wrapOn(canv, 300, 2000)
    assert short_h == pytest.approx(80)
    assert tall_h > 80
    assert none_h < 80


def test_text_markup_inline_legend() -> None:
    style = Style()
    text = Text("Sinais e Sintomas", FontRole.TITLE, inline=(Text("1 - Sim & 2 - Não", FontRole.LEGEND),))
    markup = text_markup(text, style)
    assert markup.startswith("Sinais e Sintomas&nbsp;")
    assert '<font name="Helvetica" size="7">1 - Sim &amp; 2 - Não</font>' in markup
    assert isinstance(render_text(text, style), Paragraph)


def test_text_markup_keeps_line_breaks() -> None:
    assert text_markup(Text("linha 1\nlinha 2")) == "linha 1<br/>linha 2"


def test_render_bytes_demo_form() -> None:
    data = render_bytes(compose_form(demo_form()), title="demo")
    assert data.startswith(b"%PDF")


def test_unknown_font_is_render_failure() -> None:
    with pytest.raises(RenderFailure):
        check_fonts(replace(Style(), content_font="NoSuchFont-Regular"))


def test_failed_render_leaves_no_output(tmp_path: Path) -> None:
    target = tmp_path / "form.pdf"
    style = replace(Style(), title_font="NoSuchFont-Bold")
    layouts = [compose_descriptive(FieldSpec("32", "x", Descriptive("y")))]
    with pytest.raises(RenderFailure):
        write_document(layouts, target, style=style)
    assert not target.exists()
    assert list(tmp_path.iterdir()) == []


def test_oversized_field_is_render_failure(tmp_path: Path) -> None:
    huge = Box(child=Text("x"), min_height=5000, valign=VAlign.TOP, padding=Padding())
    with pytest.raises(RenderFailure):
        write_document([huge], tmp_path / "huge.pdf")
    assert list(tmp_path.iterdir()) == []


def test_text_markup_keeps_space_runs() -> None:
    assert text_markup(Text("1 - Sim    2 - Não")) == "1 - Sim &nbsp;&nbsp;&nbsp;2 - Não"


def test_legend_spacing_survives_in_pdf(tmp_path: Path) -> None:
    import fitz  # PyMuPDF

    field = compose_legend_with_answer(
        FieldSpec("29", "Zona", LegendWithAnswer(("1 - Urbana    2 - Rural",), "1"))
    )
    target = write_document([field], tmp_path / "zona.pdf")
    with fitz.open(target) as doc:
        text = "".join(page.get_text() for page in doc).replace("\xa0", " ")
    assert "1 - Urbana    2 - Rural" in text
