"""Row reader for delimited text tables.

Wraps csv.reader behind a read_row()/current_row() pair. read_row() returns
False both at end of input and on malformed input; ``error`` tells them
apart (None at end of input, a TabularFormatError otherwise).
"""

import csv
from typing import Iterator, List, Optional, TextIO


class TabularFormatError(Exception):
    """Raised when the input table cannot be parsed."""
    pass


class TabularReader:
    """Sequential reader over CSV rows."""

    def __init__(self, stream: TextIO, delimiter: str = ","):
        self._reader = csv.reader(stream, delimiter=delimiter, strict=True)
        self._row: List[str] = []
        self.error: Optional[TabularFormatError] = None

    def read_row(self) -> bool:
        """Advance to the next row. False at end of input or on error."""
        self._row = []
        self.error = None
        row: List[str] = []
        while not row:  # blank lines
            try:
                row = next(self._reader)
            except StopIteration:
                return False
            except csv.Error as e:
                self.error = TabularFormatError(f"line {self._reader.line_num}: {e}")
                return False
        self._row = row
        return True

    def current_row(self) -> List[str]:
        """Return the row loaded by the last read_row().

        Raises:
            TabularFormatError: if the last read failed on malformed input
        """
        if self.error is not None:
            raise self.error
        return list(self._row)

    def __iter__(self) -> Iterator[List[str]]:
        while self.read_row():
            yield self.current_row()
        if self.error is not None:
            raise self.error
