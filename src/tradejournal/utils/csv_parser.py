"""CSV tokenizing utilities for trade imports."""

import csv
import io
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from tradejournal.domain.errors import MalformedInputError, ValidationError

MAX_FILE_SIZE = 5 * 1024 * 1024

_LINE_SPLIT = re.compile(r"\r?\n")


@dataclass(frozen=True)
class ParsedCSV:
    """Header names and rows keyed by header."""

    headers: tuple[str, ...]
    rows: tuple[dict[str, str], ...]


def parse_csv_line(line: str) -> list[str]:
    """Split a single CSV line into trimmed fields.

    Double quotes toggle quoted mode, a doubled quote inside a quoted field
    is a literal quote, and commas only separate fields outside quotes.

    Args:
        line: One line of CSV text without its line terminator

    Returns:
        List of field values with surrounding whitespace removed
    """
    fields = []
    current = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"' and not in_quotes:
            in_quotes = True
        elif char == '"' and in_quotes:
            if i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = False
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current).strip())
    return fields


def parse_csv_content(content: str) -> ParsedCSV:
    """Parse CSV text into headers and rows.

    Blank lines are ignored. The first remaining line holds the headers;
    every following line becomes a row, with missing trailing cells mapped
    to an empty string.

    Args:
        content: Raw CSV text (uploaded file or pasted content)

    Returns:
        ParsedCSV with headers and rows

    Raises:
        MalformedInputError: If the content is empty or has no headers
    """
    lines = [line for line in _LINE_SPLIT.split(content) if line.strip()]
    if not lines:
        raise MalformedInputError("CSV file appears to be empty")

    headers = parse_csv_line(lines[0])
    if not any(headers):
        raise MalformedInputError("Could not parse CSV headers")

    rows = []
    for line in lines[1:]:
        values = parse_csv_line(line)
        rows.append(
            {
                header: values[index] if index < len(values) else ""
                for index, header in enumerate(headers)
            }
        )

    return ParsedCSV(headers=tuple(headers), rows=tuple(rows))


def format_csv_line(values: list[str]) -> str:
    """Serialize values into one CSV line, quoting only where needed."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="")
    writer.writerow(values)
    return buffer.getvalue()


def read_csv_file(csv_file_path: str, content_type: Optional[str] = None) -> str:
    """Read an uploaded CSV file after checking its size and type.

    Args:
        csv_file_path: Path to CSV file
        content_type: Optional declared content type (e.g. 'text/csv')

    Returns:
        File content as text

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If the file is too large or not a CSV file
        MalformedInputError: If the file is not UTF-8 text
    """
    csv_path = Path(csv_file_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

    if csv_path.stat().st_size > MAX_FILE_SIZE:
        raise ValidationError("File is too large: maximum file size is 5MB")

    if content_type != "text/csv" and csv_path.suffix.lower() != ".csv":
        raise ValidationError("Invalid file type: please upload a CSV file")

    try:
        with open(csv_path, "r", encoding="utf-8-sig") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise MalformedInputError("Could not decode CSV file as UTF-8") from e
