from __future__ import annotations

import json
from pathlib import Path
import unittest

from sinan_fields.errors import InvalidInput
from sinan_fields.models import Descriptive, LegendWithAnswer, MultipleChoice, OtherField
from sinan_fields.pipeline.ingest import load_form, parse_form


FORM = {
    "title": "Ficha de Investigação",
    "rows": [
        {
            "widths": [30, 25, 45],
            "fields": [
                {"number": "28", "title": "(DDD) Telefone", "kind": "descriptive", "content": "(11) 99999-9999"},
                {
                    "number": 29,
                    "title": "Zona",
                    "kind": "legend_with_answer",
                    "legend_lines": ["1 - Urbana    2 - Rural", "3 - Periurbana  9 - Ignorado"],
                    "answer": "1",
                },
                {"number": "30", "title": "País", "kind": "descriptive"},
            ],
        },
        {"fields": [{"number": "32", "title": "Ocupação", "kind": "descriptive", "min_height": 40}]},
        {
            "fields": [
                {
                    "number": "33",
                    "title": "Sinais e Sintomas",
                    "kind": "multiple_choice",
                    "legend": "1 - Sim    2 - Não    9 - Ignorado",
                    "options": ["Febre", "Cefaléia", "Mialgia"],
                    "answers": ["1"],
                    "columns": 2,
                    "other": "",
                },
                {
                    "number": "34",
                    "title": "Resultado",
                    "kind": "multiple_choice",
                    "options": ["Positivo", "Negativo"],
                    "other": None,
                },
            ]
        },
    ],
}


class IngestTests(unittest.TestCase):
    def test_parse_form(self) -> None:
        form = parse_form(FORM)
        self.assertEqual(form.title, "Ficha de Investigação")
        self.assertEqual(len(form.rows), 3)

        first = form.rows[0]
        self.assertEqual(first.widths, (30.0, 25.0, 45.0))
        telefone, zona, pais = first.fields
        self.assertEqual(telefone.kind, Descriptive("(11) 99999-9999", None))
        self.assertEqual(zona.number, "29")
        self.assertEqual(
            zona.kind,
            LegendWithAnswer(("1 - Urbana    2 - Rural", "3 - Periurbana  9 - Ignorado"), "1"),
        )
        self.assertEqual(pais.kind, Descriptive(None, None))

    def test_lone_field_has_no_widths(self) -> None:
        row = parse_form(FORM).rows[1]
        self.assertIsNone(row.widths)
        self.assertEqual(row.fields[0].kind.min_height, 40.0)

    def test_several_fields_default_to_equal_widths(self) -> None:
        row = parse_form(FORM).rows[2]
        self.assertEqual(row.widths, (50.0, 50.0))

    def test_multiple_choice_answers_and_other(self) -> None:
        sintomas, resultado = parse_form(FORM).rows[2].fields
        self.assertIsInstance(sintomas.kind, MultipleChoice)
        self.assertEqual([o.answer for o in sintomas.kind.options], ["1", "", ""])
        self.assertEqual(sintomas.kind.columns, 2)
        self.assertEqual(sintomas.kind.other, OtherField(""))
        self.assertIsNone(resultado.kind.other)
        self.assertEqual(resultado.kind.columns, 1)
        self.assertEqual(resultado.kind.legend, "")

    def test_errors(self) -> None:
        bad_forms = [
            [],
            {"rows": []},
            {"rows": [{"fields": []}]},
            {"rows": [{"fields": [{"number": "1", "title": "x"}]}]},
            {"rows": [{"fields": [{"number": "1", "title": "x", "kind": "table"}]}]},
            {"rows": [{"fields": [{"number": "", "title": "x", "kind": "descriptive"}]}]},
            {"rows": [{"widths": [50], "fields": [
                {"number": "1", "title": "x", "kind": "descriptive"},
                {"number": "2", "title": "y", "kind": "descriptive"},
            ]}]},
            {"rows": [{"fields": [
                {"number": "1", "title": "x", "kind": "multiple_choice", "options": ["a"], "columns": 0},
            ]}]},
            {"rows": [{"fields": [
                {"number": "1", "title": "x", "kind": "descriptive", "min_height": "tall"},
            ]}]},
        ]
        for raw in bad_forms:
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidInput):
                    parse_form(raw)

    def test_load_form_from_file(self) -> None:
        import tempfile

        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "ficha_dengue.json"
            path.write_text(json.dumps({"rows": FORM["rows"]}), encoding="utf-8")
            form = load_form(path)
            self.assertEqual(form.title, "ficha_dengue")

            broken = Path(temp_dir) / "broken.json"
            broken.write_text("{not json", encoding="utf-8")
            with self.assertRaises(InvalidInput):
                load_form(broken)

            latin1 = Path(temp_dir) / "latin1.json"
            latin1.write_bytes(b'{"title": "Ficha de Investiga\xe7\xe3o", "rows": []}')
            with self.assertRaises(InvalidInput):
                load_form(latin1)

            with self.assertRaises(FileNotFoundError):
                load_form(Path(temp_dir) / "missing.json")


if __name__ == "__main__":
    unittest.main()
