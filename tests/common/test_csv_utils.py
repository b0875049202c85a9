"""Tests for storeharvest/common/csv_utils.py and numbers.py"""

import csv
import io

from storeharvest.common.csv_utils import format_row, parse_csv, quote_field, render_csv
from storeharvest.common.numbers import format_number, parse_number, to_number_string


class TestQuoteField:
    def test_plain_value_quoted(self):
        assert quote_field("Tee") == '"Tee"'

    def test_embedded_quotes_doubled(self):
        assert quote_field('12" pizza') == '"12"" pizza"'

    def test_none_is_empty(self):
        assert quote_field(None) == '""'

    def test_numbers_stringified(self):
        assert quote_field(3) == '"3"'


class TestRenderCsv:
    def test_header_and_rows_quoted(self):
        text = render_csv(["A", "B"], [["1", ""], ["x,y", "z"]])
        assert text == '"A","B"\n"1",""\n"x,y","z"\n'

    def test_special_characters_survive_parsing(self):
        values = ['comma, inside', 'quote " inside', 'new\nline']
        text = render_csv(["a", "b", "c"], [values])
        assert parse_csv(text)[1] == values

    def test_format_row_no_terminator(self):
        assert format_row(["a", "b"]) == '"a","b"'

    def test_matches_csv_module_quote_all(self):
        rows = [["1", None, 'say "hi"'], ["multi\nline", "", "3"]]
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(["A", "B", "C"])
        writer.writerows(rows)
        assert render_csv(["A", "B", "C"], rows) == buffer.getvalue()


class TestNumbers:
    def test_parse_leading_number(self):
        assert parse_number(" 2 kg") == 2
        assert parse_number("19.99") == 19.99

    def test_parse_rejects_garbage(self):
        assert parse_number("abc") is None
        assert parse_number(True) is None
        assert parse_number(None) is None
        assert parse_number(float("nan")) is None

    def test_format_integral(self):
        assert format_number(20.0) == "20"
        assert format_number(0.907184) == "0.907184"

    def test_to_number_string_default(self):
        assert to_number_string("") == "0"
        assert to_number_string("19.990") == "19.99"
