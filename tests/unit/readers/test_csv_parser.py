"""Unit tests for the CSV parser."""

import pytest

from billing_records.exceptions import ParseError
from billing_records.readers.csv_parser import CSVRow, SkippedRow, parse_csv


class TestParseCsvBasics:
    """Test headers, rows and values."""

    def test_headers_and_rows(self):
        """Test that rows are keyed by header in file order."""
        parsed = parse_csv("a,b\n1,2\n3,4")

        assert parsed.headers == ["a", "b"]
        assert parsed.data == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]
        assert parsed.skipped_rows == []

    def test_header_names_are_trimmed_but_keep_case(self):
        """Test that header whitespace is removed and casing preserved."""
        parsed = parse_csv(" ClientName , Date \nAcme,2023-01-01")
        assert parsed.headers == ["ClientName", "Date"]

    def test_row_numbers_start_after_header(self):
        """Test that the first data row is row 2."""
        parsed = parse_csv("a\nx\ny")
        assert [row.row_number for row in parsed.rows] == [2, 3]

    def test_trailing_newline_is_ignored(self):
        """Test that a final line break does not add a row."""
        parsed = parse_csv("a,b\n1,2\n")
        assert len(parsed.rows) == 1

    @pytest.mark.parametrize("newline", ["\n", "\r\n", "\r"])
    def test_line_endings(self, newline):
        """Test that LF, CRLF and CR line endings are accepted."""
        parsed = parse_csv(newline.join(["a,b", "1,2", "3,4"]))
        assert parsed.data == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]

    def test_byte_order_mark_is_ignored(self):
        """Test that a UTF-8 BOM does not end up in the first header."""
        parsed = parse_csv("\ufeffemployeeIdentifier,date\ne1,2023-01-01")
        assert parsed.headers[0] == "employeeIdentifier"

    def test_custom_delimiter(self):
        """Test parsing with a semicolon delimiter."""
        parsed = parse_csv("a;b\n1;2", delimiter=";")
        assert parsed.data == [{"a": "1", "b": "2"}]


class TestParseCsvQuoting:
    """Test quoted fields."""

    def test_quoted_field_with_delimiter(self):
        """Test that a quoted field may contain the delimiter."""
        parsed = parse_csv('name,amount\n"Doe, Jane",10')
        assert parsed.data == [{"name": "Doe, Jane", "amount": "10"}]

    def test_escaped_quotes(self):
        """Test that doubled quotes inside a quoted field become one quote."""
        parsed = parse_csv('note\n"He said ""hi"""')
        assert parsed.data == [{"note": 'He said "hi"'}]

    def test_quoted_field_with_line_break(self):
        """Test that a quoted field may span lines and numbering continues."""
        parsed = parse_csv('a,b\n"line one\nline two",1\nx,2')

        assert parsed.rows[0].values["a"] == "line one\nline two"
        assert parsed.rows[1].row_number == 3

    def test_unterminated_quote_raises(self):
        """Test that an unterminated quoted field is a parse error."""
        with pytest.raises(ParseError):
            parse_csv('a,b\n"open,1')


class TestParseCsvSkippedRows:
    """Test rows dropped for structural defects."""

    def test_column_count_mismatch_is_skipped(self):
        """Test that a short row is skipped and reported with its number."""
        parsed = parse_csv("a,b,c\n1,2,3\n4,5\n6,7,8")

        assert [row.row_number for row in parsed.rows] == [2, 4]
        assert len(parsed.skipped_rows) == 1
        skipped = parsed.skipped_rows[0]
        assert skipped.row_number == 3
        assert skipped.reason == "column count mismatch (expected 3, got 2)"
        assert skipped.row_content == "4,5"

    def test_blank_lines_are_not_counted(self):
        """Test that blank and whitespace-only lines are skipped silently."""
        parsed = parse_csv("a,b\n\n1,2\n   \n3,4\n")

        assert parsed.skipped_rows == []
        assert [row.row_number for row in parsed.rows] == [2, 3]

    def test_leading_blank_lines_before_header(self):
        """Test that the first non-blank record is the header."""
        parsed = parse_csv("\n\na,b\n1,2")

        assert parsed.headers == ["a", "b"]
        assert parsed.rows[0].row_number == 2

    def test_skipped_row_preview(self):
        """Test that the preview truncates the raw content."""
        skipped = SkippedRow(row_number=5, reason="r", row_content="x" * 80)

        assert skipped.preview() == "x" * 50
        assert skipped.preview(10) == "x" * 10


class TestParseCsvErrors:
    """Test unrecoverable input."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\n", "\ufeff"])
    def test_empty_content(self, text):
        """Test that empty content raises ParseError."""
        with pytest.raises(ParseError, match="empty"):
            parse_csv(text)

    @pytest.mark.parametrize(
        "header", ["status,notes,status", "Status,notes,STATUS"]
    )
    def test_duplicate_headers(self, header):
        """Test a column named twice is rejected instead of merged."""
        with pytest.raises(ParseError, match="Duplicate CSV headers"):
            parse_csv(f"{header}\npaid,x,pending")


class TestCSVRow:
    """Test row value lookup."""

    def test_get_ignores_header_case_and_trims(self):
        """Test case-insensitive lookup with trimmed values."""
        row = CSVRow(row_number=2, values={"ClientName": "  Acme  "})
        assert row.get("clientname") == "Acme"

    def test_get_missing_header(self):
        """Test that a missing header returns the default."""
        row = CSVRow(row_number=2, values={})
        assert row.get("notes") == ""
        assert row.get("notes", "n/a") == "n/a"
