"""Tests for the 'ollama ps' table parser."""

import pytest

from app.core.errors import ParseError
from app.core.ps_parser import parse_ollama_ps, resolve_column_layout
from app.core.units import GB_TO_GIB
from app.schemas.snapshot import LoadedModel
from app.utils.diagnostics import DiagnosticLog
from fakes import ps_table


class TestParseOllamaPs:
    def test_empty_output(self):
        assert parse_ollama_ps("") == ([], 0.0)

    def test_header_only(self):
        assert parse_ollama_ps("NAME    ID    SIZE    PROCESSOR    UNTIL\n") == ([], 0.0)

    def test_single_model_row(self):
        # Given: one loaded model
        output = ps_table([("llama3:8b", "a1b2c3", "4.7GB", "100% GPU", "5 minutes from now")])

        # When
        models, total = parse_ollama_ps(output)

        # Then
        assert models == [
            LoadedModel(
                name="llama3:8b",
                id="a1b2c3",
                size="4.7GB",
                processor="100% GPU",
                until="5 minutes from now",
            )
        ]
        assert total == pytest.approx(4.7 * GB_TO_GIB)
        assert total == pytest.approx(4.377, abs=1e-3)

    def test_real_ollama_output(self):
        output = (
            "NAME                ID              SIZE      PROCESSOR    UNTIL              \r\n"
            "llama3.1:8b         46e0c10c039e    6.7 GB    100% GPU     4 minutes from now    \r\n"
            "nomic-embed-text    0a109f422b47    849 MB    100% GPU     Forever               \r\n"
        )

        models, total = parse_ollama_ps(output)

        assert [m.name for m in models] == ["llama3.1:8b", "nomic-embed-text"]
        assert models[0].size == "6.7 GB"
        assert models[1].until == "Forever"
        assert total == pytest.approx(6.7 * GB_TO_GIB + 849 / 1024 * GB_TO_GIB)

    def test_row_order_is_preserved(self):
        rows = [
            ("b-model", "2", "1GiB", "100% GPU", "now"),
            ("a-model", "1", "2GiB", "100% GPU", "now"),
            ("c-model", "3", "3GiB", "100% GPU", "now"),
        ]

        models, total = parse_ollama_ps(ps_table(rows))

        assert [m.name for m in models] == ["b-model", "a-model", "c-model"]
        assert total == pytest.approx(6.0)

    def test_reordered_header_still_resolves(self):
        # Given: ID before NAME
        output = ps_table(
            [("a1b2c3", "llama3:8b", "2GiB", "100% GPU", "Forever")],
            widths=(8, 11, 7, 10),
            header=("ID", "NAME", "SIZE", "PROCESSOR", "UNTIL"),
        )

        # When
        models, total = parse_ollama_ps(output)

        # Then
        assert models[0].name == "llama3:8b"
        assert models[0].id == "a1b2c3"
        assert total == 2.0

    def test_header_missing_processor_is_rejected(self):
        diagnostics = DiagnosticLog()
        output = "NAME    ID    SIZE    UNTIL\nllama   x     4GB     Forever\n"

        result = parse_ollama_ps(output, diagnostics)

        assert result == ([], 0.0)
        assert diagnostics.counts["parse"] == 1
        assert "PROCESSOR" in diagnostics.messages("parse")[0]

    def test_truncated_row_is_skipped(self):
        # Given: a valid row, a row cut before the UNTIL column, another valid row
        output = ps_table([
            ("first", "1", "1GiB", "100% GPU", "Forever"),
            ("second", "2", "8GiB", "100% GPU", "Forever"),
            ("third", "3", "2GiB", "100% GPU", "Forever"),
        ])
        lines = output.splitlines()
        lines[2] = lines[2][:20]

        # When
        models, total = parse_ollama_ps("\n".join(lines))

        # Then
        assert [m.name for m in models] == ["first", "third"]
        assert total == pytest.approx(3.0)

    def test_unknown_unit_row_is_kept_but_not_counted(self):
        diagnostics = DiagnosticLog()
        output = ps_table([
            ("odd", "1", "3 TB", "100% GPU", "Forever"),
            ("fine", "2", "3GiB", "100% GPU", "Forever"),
        ])

        models, total = parse_ollama_ps(output, diagnostics)

        assert len(models) == 2
        assert total == 3.0
        assert diagnostics.counts["conversion"] == 1


class TestResolveColumnLayout:
    def test_offsets_from_header(self):
        layout = resolve_column_layout("name       id      size   processor  until")

        assert layout.offsets == {"NAME": 0, "ID": 11, "SIZE": 19, "PROCESSOR": 26, "UNTIL": 37}
        assert layout.last_offset == 37

    def test_missing_columns_listed(self):
        with pytest.raises(ParseError) as exc_info:
            resolve_column_layout("NAME SIZE")

        assert exc_info.value.missing == ["ID", "PROCESSOR", "UNTIL"]
