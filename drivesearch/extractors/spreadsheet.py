"""
Spreadsheet Extractor

Renders every grid sheet of a spreadsheet as pipe-separated rows.

Declared grid sizes are often far larger than the populated area, so each
sheet is first scanned over a bounded window to find the minimal range that
holds values, and only that range is fetched for rendering. A sheet whose
values cannot be read is skipped; only the metadata fetch fails the file.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..common.drive_client import DriveClient, DriveError
from ..common.schemas import FileFormat
from .base import BaseExtractor, join_cells, require_payload

logger = logging.getLogger("drivesearch.extractors.spreadsheet")

SHEET_HEADER = "===== Sheet: {title} ====="


def column_letter(index: int) -> str:
    """Convert a 1-based column index to A1 letters (1 -> A, 27 -> AA)."""
    letters = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def a1_range(title: str, rows: int, columns: int) -> str:
    """Build an A1 range anchored at A1 for a sheet title."""
    quoted = title.replace("'", "''")
    return f"'{quoted}'!A1:{column_letter(columns)}{rows}"


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def populated_extent(values: List[List[Any]]) -> Tuple[int, int]:
    """Return (rows, columns) of the smallest A1-anchored box holding values."""
    last_row = 0
    last_column = 0
    for row_index, row in enumerate(values, start=1):
        filled = [i for i, cell in enumerate(row, start=1) if format_cell(cell).strip()]
        if filled:
            last_row = row_index
            last_column = max(last_column, filled[-1])
    return last_row, last_column


def render_rows(values: List[List[Any]]) -> List[str]:
    lines = []
    for row in values:
        cells = [format_cell(cell) for cell in row]
        if any(cell.strip() for cell in cells):
            lines.append(join_cells(cells))
    return lines


class SpreadsheetExtractor(BaseExtractor):
    """Extractor for spreadsheets with multiple grids."""

    file_format = FileFormat.SPREADSHEET

    def __init__(self, client: DriveClient, scan_rows: int = 1000, scan_columns: int = 52):
        """
        Initialize spreadsheet extractor.

        Args:
            client: Drive client used to fetch sheet metadata and values
            scan_rows: Maximum rows scanned when locating populated cells
            scan_columns: Maximum columns scanned when locating populated cells
        """
        super().__init__(client)
        self.scan_rows = scan_rows
        self.scan_columns = scan_columns

    async def extract_text(self, file_id: str) -> str:
        spreadsheet = require_payload(
            await self._client.get_spreadsheet(file_id), file_id, "spreadsheets.get"
        )
        sheets = [s.get("properties", {}) for s in spreadsheet.get("sheets", [])]
        sheets.sort(key=lambda p: p.get("index", 0))

        sections = []
        for properties in sheets:
            if properties.get("sheetType", "GRID") != "GRID":
                continue
            lines = await self._extract_sheet(file_id, properties)
            if lines:
                title = properties.get("title", "")
                sections.append("\n".join([SHEET_HEADER.format(title=title)] + lines))

        return "\n\n".join(sections)

    async def _extract_sheet(self, file_id: str, properties: Dict[str, Any]) -> List[str]:
        title = properties.get("title", "")
        grid = properties.get("gridProperties", {})
        rows = min(grid.get("rowCount") or self.scan_rows, self.scan_rows)
        columns = min(grid.get("columnCount") or self.scan_columns, self.scan_columns)
        if rows <= 0 or columns <= 0:
            return []

        window = await self._fetch(file_id, a1_range(title, rows, columns), "FORMATTED_VALUE")
        if window is None:
            return []

        used_rows, used_columns = populated_extent(window)
        if not used_rows:
            return []

        values = await self._fetch(file_id, a1_range(title, used_rows, used_columns), "UNFORMATTED_VALUE")
        if values is None:
            return []
        return render_rows(values)

    async def _fetch(self, file_id: str, range_a1: str, render: str) -> Optional[List[List[Any]]]:
        try:
            return await self._client.get_values(file_id, range_a1, value_render_option=render)
        except DriveError as e:
            # One unreadable sheet must not discard the others
            logger.warning("Skipping range %s of %s (status %s): %s", range_a1, file_id, e.status, e)
            return None
