"""Tests for the CSV tokenizer."""

import pytest

from tradejournal.domain.errors import MalformedInputError, ValidationError
from tradejournal.utils.csv_parser import (
    MAX_FILE_SIZE,
    format_csv_line,
    parse_csv_content,
    parse_csv_line,
    read_csv_file,
)


class TestParseCsvLine:
    """Tests for single-line parsing."""

    def test_simple_fields(self):
        assert parse_csv_line("a,b,c") == ["a", "b", "c"]

    def test_fields_are_trimmed(self):
        assert parse_csv_line("  AAPL , 100 ,Long  ") == ["AAPL", "100", "Long"]

    def test_quoted_field_keeps_commas(self):
        assert parse_csv_line('ES,"1,234.50",Long') == ["ES", "1,234.50", "Long"]

    def test_doubled_quote_is_literal(self):
        assert parse_csv_line('"He said ""buy""",x') == ['He said "buy"', "x"]

    def test_empty_fields(self):
        assert parse_csv_line("a,,c,") == ["a", "", "c", ""]

    def test_unterminated_quote_runs_to_end_of_line(self):
        assert parse_csv_line('a,"b,c') == ["a", "b,c"]


class TestParseCsvContent:
    """Tests for whole-content parsing."""

    def test_headers_and_rows(self):
        parsed = parse_csv_content(
            "Symbol,Date,Type,Entry,Exit,Size\nAAPL,01/15/2024,Long,100,110,10"
        )

        assert parsed.headers == ("Symbol", "Date", "Type", "Entry", "Exit", "Size")
        assert len(parsed.rows) == 1
        assert parsed.rows[0]["Symbol"] == "AAPL"
        assert parsed.rows[0]["Size"] == "10"

    def test_blank_lines_and_crlf_are_ignored(self):
        parsed = parse_csv_content("A,B\r\n\r\n1,2\r\n   \r\n3,4\r\n")

        assert parsed.headers == ("A", "B")
        assert [row["A"] for row in parsed.rows] == ["1", "3"]

    def test_missing_trailing_fields_are_empty(self):
        parsed = parse_csv_content("A,B,C\n1")

        assert parsed.rows[0] == {"A": "1", "B": "", "C": ""}

    def test_extra_fields_are_ignored(self):
        parsed = parse_csv_content("A,B\n1,2,3")

        assert parsed.rows[0] == {"A": "1", "B": "2"}

    def test_header_only(self):
        parsed = parse_csv_content("A,B\n")

        assert parsed.headers == ("A", "B")
        assert parsed.rows == ()

    def test_empty_content_raises(self):
        with pytest.raises(MalformedInputError) as excinfo:
            parse_csv_content("\n  \n")

        assert "empty" in str(excinfo.value).lower()

    def test_blank_header_raises(self):
        with pytest.raises(MalformedInputError):
            parse_csv_content(',,\n1,2,3')

    def test_round_trip_is_stable(self):
        content = 'Symbol,Notes,Size\nES,"scaled in, then out",2\nNQ,"said ""wait""",1\n'
        parsed = parse_csv_content(content)

        lines = [format_csv_line(list(parsed.headers))]
        lines += [format_csv_line([row[h] for h in parsed.headers]) for row in parsed.rows]
        reparsed = parse_csv_content("\n".join(lines))

        assert reparsed == parsed


class TestReadCsvFile:
    """Tests for file upload checks."""

    def test_reads_csv_file(self, fixtures_dir):
        content = read_csv_file(str(fixtures_dir / "sample_trades.csv"))

        assert content.startswith("Symbol,Date,Type")

    def test_strips_byte_order_mark(self, tmp_path):
        csv_path = tmp_path / "bom.csv"
        csv_path.write_text("\ufeffSymbol,Date\nES,2024-01-15\n", encoding="utf-8")

        assert read_csv_file(str(csv_path)).startswith("Symbol")

    def test_non_utf8_file_is_malformed(self, tmp_path):
        csv_path = tmp_path / "latin1.csv"
        csv_path.write_bytes(b"Symbol,Date\n\xff\xfeES,2024-01-15\n")

        with pytest.raises(MalformedInputError) as excinfo:
            read_csv_file(str(csv_path))

        assert "UTF-8" in str(excinfo.value)

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            read_csv_file("/nonexistent/trades.csv")

    def test_rejects_non_csv_extension(self, tmp_path):
        txt_path = tmp_path / "trades.txt"
        txt_path.write_text("Symbol\nES\n", encoding="utf-8")

        with pytest.raises(ValidationError) as excinfo:
            read_csv_file(str(txt_path))

        assert "csv" in str(excinfo.value).lower()

    def test_accepts_declared_csv_content_type(self, tmp_path):
        txt_path = tmp_path / "upload.bin"
        txt_path.write_text("Symbol\nES\n", encoding="utf-8")

        assert read_csv_file(str(txt_path), content_type="text/csv") == "Symbol\nES\n"

    def test_rejects_large_file(self, tmp_path):
        csv_path = tmp_path / "large.csv"
        csv_path.write_bytes(b"a" * (MAX_FILE_SIZE + 1))

        with pytest.raises(ValidationError) as excinfo:
            read_csv_file(str(csv_path))

        assert "5MB" in str(excinfo.value)
