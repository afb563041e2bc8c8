"""
app/importers/csv_parser.py

Header-less CSV row parsing for the customer bulk import.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Iterator, Union


@dataclass(frozen=True)
class ParsedRow:
    """
    One row split into its field values.
    """

    row_number: int
    values: tuple[str, ...]


@dataclass(frozen=True)
class RowParseError:
    """
    One row that could not be split into the expected column shape.
    """

    row_number: int
    raw: tuple[str, ...]
    reason: str
    key: str


RowResult = Union[ParsedRow, RowParseError]


class CSVRowSource:
    """
    Lazy, restartable sequence of rows parsed from raw CSV text.

    Every iteration re-reads the text from the start, so the source can be
    walked more than once. Blank lines are ignored; a row whose field count
    differs from ``expected_columns`` is yielded as a RowParseError and
    parsing continues with the next row.
    """

    def __init__(self, text: str, *, expected_columns: int) -> None:
        self._text = text[1:] if text.startswith("\ufeff") else text
        self._expected_columns = expected_columns

    def __iter__(self) -> Iterator[RowResult]:
        reader = csv.reader(io.StringIO(self._text, newline=""), skipinitialspace=True)
        while True:
            try:
                fields = next(reader)
            except StopIteration:
                return
            except csv.Error as exc:
                row_number = reader.line_num
                yield RowParseError(
                    row_number=row_number,
                    raw=(),
                    reason=f"Malformed CSV row: {exc}",
                    key=best_effort_key((), row_number),
                )
                continue

            if not fields or all(not value.strip() for value in fields):
                continue

            row_number = reader.line_num
            values = tuple(value.strip() for value in fields)
            if len(values) != self._expected_columns:
                yield RowParseError(
                    row_number=row_number,
                    raw=values,
                    reason=(
                        f"Malformed CSV row: expected {self._expected_columns} fields, "
                        f"found {len(values)}."
                    ),
                    key=best_effort_key(values, row_number),
                )
                continue

            yield ParsedRow(row_number=row_number, values=values)


def best_effort_key(values: tuple[str, ...], row_number: int) -> str:
    """
    Identifier used to report a row that never produced a record.
    """

    if values and values[0]:
        return values[0]
    return f"row-{row_number}"
