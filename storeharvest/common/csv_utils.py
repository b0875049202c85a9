"""
CSV Utilities

Safe quoting for delimited export text and reading exported CSV back.
"""

import csv
import io
from typing import Any, Iterable, List, Sequence

ROW_SEPARATOR = '\n'


def configure_csv(field_size_limit: int = 10 * 1024 * 1024) -> None:
    """
    Configure CSV module for large fields.

    Args:
        field_size_limit: Maximum field size in bytes (default: 10MB)
    """
    csv.field_size_limit(field_size_limit)


def _writer(buffer: io.StringIO):
    return csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator=ROW_SEPARATOR)


def quote_field(value: Any) -> str:
    """
    Quote a single field.

    Every field is wrapped in double quotes and embedded quotes are doubled,
    so commas, quotes and newlines inside a value are always safe.

    Example:
        >>> quote_field('12" pizza, large')
        '"12"" pizza, large"'
    """
    return format_row([value])


def format_row(values: Iterable[Any]) -> str:
    """Join quoted fields into one CSV line (no line terminator)."""
    buffer = io.StringIO()
    _writer(buffer).writerow(values)
    return buffer.getvalue()[:-len(ROW_SEPARATOR)]


def render_csv(header: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    """
    Render a header and positional rows as CSV text.

    Args:
        header: Column names
        rows: Rows with one value per column

    Returns:
        CSV text, one line per row, newline-separated
    """
    buffer = io.StringIO()
    writer = _writer(buffer)
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def parse_csv(text: str) -> List[List[str]]:
    """
    Parse CSV text into positional rows (header included).

    Args:
        text: CSV document

    Returns:
        List of rows, each a list of field strings
    """
    configure_csv()
    return list(csv.reader(io.StringIO(text)))


# Initialize CSV configuration on module import
configure_csv()
