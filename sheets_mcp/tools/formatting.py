"""Text rendering shared by the tool handlers."""

import json

from sheets_mcp.models.sheets import CellValue, SheetInfo


def sheet_size(sheet: SheetInfo) -> str:
    return f"{sheet.row_count} rows × {sheet.column_count} columns"


def sheet_details(sheet: SheetInfo) -> str:
    lines = [
        f"**Sheet ID (gid):** `{sheet.sheet_id}`",
        f"**Index:** {sheet.index}",
        f"**Type:** {sheet.sheet_type}",
        f"**Size:** {sheet_size(sheet)}",
        f"**Frozen Rows:** {sheet.frozen_row_count}",
        f"**Frozen Columns:** {sheet.frozen_column_count}",
    ]
    if sheet.hidden:
        lines.append("**Status:** Hidden")
    return "\n".join(lines)


def values_table(values: list[list[CellValue]]) -> str:
    if not values:
        return "(empty)"
    return "\n".join(
        f"Row {i}: [{', '.join(json.dumps(cell) for cell in row)}]" for i, row in enumerate(values, start=1)
    )


def grid_size(values: list[list[CellValue]]) -> str:
    columns = max((len(row) for row in values), default=0)
    return f"{len(values)} rows × {columns} columns"


def plural(count: int, word: str, suffix: str = "s") -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}{suffix}"
