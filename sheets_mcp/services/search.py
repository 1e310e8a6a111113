"""Case-insensitive cell search over a fetched grid."""

import logging
from collections.abc import Iterator
from itertools import islice

from sheets_mcp.models.sheets import CellMatch, CellValue, SearchResult
from sheets_mcp.services import sheets as sheets_service
from sheets_mcp.url_parser import build_a1_notation, column_index_to_letter, column_letter_to_index

logger = logging.getLogger(__name__)

# Stand-in for "the whole sheet"
MAX_SCAN_ROWS = 10000
MAX_SCAN_COLUMN = "ZZ"


def _cell_text(cell: CellValue) -> str:
    return "" if cell is None else str(cell)


def cell_matches(cell: CellValue, search_text: str, match_type: str = "contains") -> bool:
    cell_lower = _cell_text(cell).lower()
    needle = search_text.lower()
    if match_type == "exact":
        return cell_lower == needle
    return needle in cell_lower


def iter_matches(
    values: list[list[CellValue]],
    search_text: str,
    match_type: str = "contains",
    first_column: int = 0,
) -> Iterator[CellMatch]:
    """Yield matching cells in row-major order. ``first_column`` offsets letters for column slices."""
    for row_idx, row in enumerate(values):
        for col_idx, cell in enumerate(row):
            if cell_matches(cell, search_text, match_type):
                col = column_index_to_letter(first_column + col_idx)
                yield CellMatch(cell_ref=f"{col}{row_idx + 1}", value=_cell_text(cell), row=row_idx + 1, col=col)


def collect_matches(matches: Iterator[CellMatch], max_results: int | None) -> SearchResult:
    """Stop scanning at the first match past ``max_results``; that match only sets ``truncated``."""
    if max_results is None:
        return SearchResult(matches=list(matches))
    found = list(islice(matches, max_results + 1))
    return SearchResult(matches=found[:max_results], truncated=len(found) > max_results)


def search_values(
    spreadsheet_id: str,
    sheet_name: str,
    search_text: str,
    match_type: str = "contains",
    max_results: int | None = 50,
) -> SearchResult:
    range = build_a1_notation(sheet_name, f"A1:{MAX_SCAN_COLUMN}{MAX_SCAN_ROWS}")
    logger.info("Searching %s in %s for %r (%s)", range, spreadsheet_id, search_text, match_type)
    grid = sheets_service.get_values(spreadsheet_id, range)
    return collect_matches(iter_matches(grid.values, search_text, match_type), max_results)


def find_in_column(
    spreadsheet_id: str,
    sheet_name: str,
    column: str,
    search_text: str,
    match_type: str = "contains",
    max_results: int | None = None,
) -> SearchResult:
    column = column.upper()
    range = build_a1_notation(sheet_name, f"{column}1:{column}{MAX_SCAN_ROWS}")
    logger.info("Searching column %s in %s for %r (%s)", range, spreadsheet_id, search_text, match_type)
    grid = sheets_service.get_values(spreadsheet_id, range)
    first_column = column_letter_to_index(column)
    # a single-column fetch only ever has the first cell of each row
    rows = [row[:1] for row in grid.values]
    return collect_matches(iter_matches(rows, search_text, match_type, first_column), max_results)
