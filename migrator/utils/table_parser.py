"""Parser for fixed-width tables printed by PowerShell ``Format-Table``.

Example input:

    ifIndex PhysicalMediaType MediaConnectionState Name     DeviceID
    ------- ----------------- -------------------- ----     --------
         13 802.3                     Disconnected Ethernet {C79407AC-...}
          9 Native 802.11                Connected Wi-Fi    {99D15E59-...}

Column positions come from the dashed separator line only. Header text is
never read, so localized headers do not matter as long as the query asked for
the columns by name in a fixed order.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from migrator.exceptions import ColumnCountMismatch

SEPARATOR_MARKER = "-----"


class Column(BaseModel):
    """Character span ``[start, end)`` of one table column."""

    model_config = ConfigDict(frozen=True)

    title: str
    start: int
    end: int

    def slice(self, line: str) -> str:
        """Return this column's trimmed text from a data line."""
        return line[self.start : self.end].strip()


def read_columns(names: list[str], line: str) -> list[Column]:
    """Compute column spans from a separator line.

    Column *i* starts where column *i-1* ended and ends at the next space
    followed by a dash. The last column ends at the end of the line.

    Args:
        names: Column names, in the order the query requested them.
        line: The separator line, e.g. ``"----- ---- ---"``.

    Returns:
        One Column per name; spans are contiguous and cover the line.

    Raises:
        ColumnCountMismatch: If the line has fewer columns than names.
    """
    line = line.rstrip("\r\n")
    columns: list[Column] = []
    start = 0
    for i, name in enumerate(names):
        if i == len(names) - 1:
            end = len(line)
        else:
            end = line.find(" -", start + 1)
            if end == -1:
                raise ColumnCountMismatch(len(names), i + 1)
        columns.append(Column(title=name, start=start, end=end))
        start = end
    return columns


class TableParser:
    """Decodes the rows of one query's table output into dictionaries.

    Example:
        >>> parser = TableParser(["InterfaceIndex", "Name"])
        >>> parser.parse(text)
        [{"InterfaceIndex": "9", "Name": "gal47lows"}]
    """

    def __init__(self, names: list[str]) -> None:
        if not names:
            raise ValueError("TableParser requires at least one column name")
        self.names = list(names)

    def parse(self, text: str) -> list[dict[str, str]]:
        """Parse table text.

        Lines before the separator are ignored. Rows whose first column is
        blank (trailing blank lines, continuation rows) are skipped.

        Raises:
            ColumnCountMismatch: If the separator line does not match the
                requested column count.
        """
        rows: list[dict[str, str]] = []
        columns: list[Column] | None = None

        for line in text.splitlines():
            if columns is None:
                if SEPARATOR_MARKER in line:
                    columns = read_columns(self.names, line)
                continue

            if not columns[0].slice(line):
                continue

            row = {column.title: column.slice(line) for column in columns[:-1]}
            # Values in the last column may run past the separator dashes
            last = columns[-1]
            row[last.title] = line[last.start :].strip()
            rows.append(row)

        return rows
