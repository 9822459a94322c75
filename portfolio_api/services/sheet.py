"""Tabular sheet model and keyed row lookup."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

logger = logging.getLogger(__name__)

SHEET_DATE_FORMAT = "%d-%m-%Y"


def cell_text(value: Any) -> str:
    """Normalize a raw cell value to text. Strings pass through untouched."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.strftime(SHEET_DATE_FORMAT)
    return str(value)


class HeaderIndex:
    """Case-insensitive column name -> index mapping, built once per header row.

    Duplicate names resolve to the first occurrence.
    """

    def __init__(self, header: list[str]):
        self.columns = list(header)
        self._positions: dict[str, int] = {}
        for position, name in enumerate(self.columns):
            self._positions.setdefault(name.strip().lower(), position)

    def __contains__(self, name: str) -> bool:
        return name.strip().lower() in self._positions

    def position(self, name: str) -> int | None:
        return self._positions.get(name.strip().lower())

    def value(self, row: list[str], name: str) -> str:
        """Cell of `row` under column `name`; absent column or short row reads as ""."""
        position = self.position(name)
        if position is None:
            return ""
        return cell_at(row, position)


def cell_at(row: list[str], position: int) -> str:
    if position < len(row):
        return row[position]
    return ""


@dataclass
class Sheet:
    """A header row plus data rows. The header is never part of `rows`."""

    name: str
    header: list[str]
    rows: list[list[str]] = field(default_factory=list)
    index: HeaderIndex = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.index = HeaderIndex(self.header)

    @classmethod
    def from_values(cls, name: str, values: list[list[Any]] | None) -> "Sheet":
        """Build a sheet from raw values where the first row is the header."""
        if not values:
            return cls(name=name, header=[])
        header = [cell_text(value) for value in values[0]]
        rows = [[cell_text(value) for value in row] for row in values[1:]]
        return cls(name=name, header=header, rows=rows)


def locate(sheet: Sheet, key_column: str, key_value: str) -> list[str] | None:
    """Return the first data row whose key cell equals `key_value` exactly.

    Returns None when the key column is absent or no row matches.
    """
    position = sheet.index.position(key_column)
    if position is None:
        logger.debug(f"[ROW LOCATE] Sheet '{sheet.name}' has no '{key_column}' column")
        return None

    for row in sheet.rows:
        if cell_at(row, position) == key_value:
            return row
    return None


def filter_rows(sheet: Sheet, key_column: str, key_value: str) -> list[list[str]]:
    """Return every data row whose key cell equals `key_value`, in sheet order."""
    position = sheet.index.position(key_column)
    if position is None:
        return []
    return [row for row in sheet.rows if cell_at(row, position) == key_value]
