from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..errors import InvalidInput
from ..models import (
    Descriptive,
    FieldSpec,
    Form,
    FormRow,
    LegendWithAnswer,
    MultipleChoice,
    OtherField,
)


REQUIRED_FIELD_KEYS = {"number", "title", "kind"}


def load_form(path: Path) -> Form:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Form definition not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            raw = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidInput(f"{path} is not valid UTF-8 JSON: {exc}") from exc
    return parse_form(raw, default_title=path.stem)


def parse_form(raw: Any, default_title: str = "form") -> Form:
    if not isinstance(raw, dict):
        raise InvalidInput("Form definition must be a JSON object")
    rows = raw.get("rows")
    if not isinstance(rows, list) or not rows:
        raise InvalidInput("Form definition needs a non-empty 'rows' list")
    title = _text(raw.get("title"), "title") or default_title
    return Form(title=title, rows=tuple(parse_row(row, i) for i, row in enumerate(rows)))


def parse_row(raw: Any, index: int) -> FormRow:
    where = f"row {index}"
    if not isinstance(raw, dict):
        raise InvalidInput(f"{where}: must be an object")
    fields = raw.get("fields")
    if not isinstance(fields, list) or not fields:
        raise InvalidInput(f"{where}: needs a non-empty 'fields' list")
    specs = tuple(parse_field(item, f"{where}, field {i}") for i, item in enumerate(fields))

    widths: Optional[Tuple[float, ...]] = None
    if raw.get("widths") is not None:
        widths = tuple(_number(w, f"{where} widths") for w in _list(raw["widths"], f"{where} widths"))
        if len(widths) != len(specs):
            raise InvalidInput(f"{where}: {len(specs)} fields but {len(widths)} widths")
    elif len(specs) > 1:
        widths = tuple(100.0 / len(specs) for _ in specs)
    return FormRow(fields=specs, widths=widths)


def parse_field(raw: Any, where: str) -> FieldSpec:
    if not isinstance(raw, dict):
        raise InvalidInput(f"{where}: must be an object")
    missing = REQUIRED_FIELD_KEYS - set(raw)
    if missing:
        raise InvalidInput(f"{where}: missing keys: {', '.join(sorted(missing))}")
    number = _text(raw["number"], f"{where} number")
    if not number:
        raise InvalidInput(f"{where}: number must not be empty")
    title = _text(raw["title"], f"{where} title") or ""
    where = f"{where} ({number})"

    kind = raw["kind"]
    parser = KIND_PARSERS.get(kind) if isinstance(kind, str) else None
    if parser is None:
        raise InvalidInput(f"{where}: unknown kind {kind!r}")
    return FieldSpec(number=number, title=title, kind=parser(raw, where))


def _descriptive(raw: Dict[str, Any], where: str) -> Descriptive:
    min_height = raw.get("min_height")
    return Descriptive(
        content=_text(raw.get("content"), f"{where} content"),
        min_height=None if min_height is None else _number(min_height, f"{where} min_height"),
    )


def _legend_with_answer(raw: Dict[str, Any], where: str) -> LegendWithAnswer:
    lines = [_text(line, f"{where} legend_lines") for line in _list(raw.get("legend_lines") or [], where)]
    return LegendWithAnswer(
        legend_lines=tuple(lines),
        answer=_text(raw.get("answer"), f"{where} answer"),
    )


def _multiple_choice(raw: Dict[str, Any], where: str) -> MultipleChoice:
    labels = [_text(label, f"{where} options") for label in _list(raw.get("options") or [], f"{where} options")]
    answers = [_text(a, f"{where} answers") for a in _list(raw.get("answers") or [], f"{where} answers")]
    columns = raw.get("columns", 1)
    if isinstance(columns, bool) or not isinstance(columns, int) or columns < 1:
        raise InvalidInput(f"{where}: columns must be a positive integer, got {columns!r}")
    other = None
    if "other" in raw and raw["other"] is not None:
        other = OtherField(value=_text(raw["other"], f"{where} other"))
    return MultipleChoice.from_lists(
        legend=_text(raw.get("legend"), f"{where} legend") or "",
        labels=labels,
        answers=answers,
        columns=columns,
        other=other,
    )


KIND_PARSERS = {
    "descriptive": _descriptive,
    "legend_with_answer": _legend_with_answer,
    "multiple_choice": _multiple_choice,
}


def _text(value: Any, where: str) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise InvalidInput(f"{where}: expected text, got {type(value).__name__}")
    return str(value)


def _number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInput(f"{where}: expected a number, got {value!r}")
    return float(value)


def _list(value: Any, where: str) -> List[Any]:
    if not isinstance(value, list):
        raise InvalidInput(f"{where}: expected a list, got {type(value).__name__}")
    return value
