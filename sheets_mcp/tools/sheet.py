import json

from sheets_mcp.models.common import ToolResult
from sheets_mcp.models.tools import GetSheetByGidParams, SheetParams, SheetPreviewParams, SpreadsheetParams
from sheets_mcp.services import sheets as sheets_service
from sheets_mcp.tools.formatting import grid_size, sheet_details, sheet_size
from sheets_mcp.tools.registry import ToolSpec
from sheets_mcp.url_parser import build_a1_notation, cell_ref, parse_spreadsheet_input

MAX_PREVIEW_ROWS = 50


def list_sheets(params: SpreadsheetParams) -> ToolResult:
    spreadsheet_id, _ = parse_spreadsheet_input(params.spreadsheet_id)
    spreadsheet = sheets_service.get_spreadsheet(spreadsheet_id)
    entries = []
    for position, sheet in enumerate(spreadsheet.sheets, start=1):
        entry = f"{position}. **{sheet.title}**\n   - Sheet ID (gid): `{sheet.sheet_id}`\n   - Size: {sheet_size(sheet)}"
        if sheet.hidden:
            entry += "\n   - Status: Hidden"
        entries.append(entry)
    return ToolResult.ok(
        f'**Sheets in "{spreadsheet.title}"**\n\n'
        f"Total: {len(spreadsheet.sheets)} sheets\n\n" + ("\n\n".join(entries) or "No sheets found")
    )


def get_sheet_by_gid(params: GetSheetByGidParams) -> ToolResult:
    source = params.spreadsheet_id or params.url
    if not source:
        return ToolResult.fail(
            "**Missing spreadsheet ID**\n\n"
            "Provide either a full Google Sheets URL with a gid, or a spreadsheet ID plus the gid parameter."
        )
    spreadsheet_id, gid = parse_spreadsheet_input(source)
    gid = gid or params.gid
    if not gid:
        return ToolResult.fail(
            "**No gid provided**\n\n"
            "Provide a URL with a gid (https://docs.google.com/spreadsheets/d/{ID}/edit?gid={GID}) "
            "or pass gid as a parameter."
        )

    sheet = sheets_service.get_sheet_by_gid(spreadsheet_id, gid)
    if sheet is None:
        return ToolResult.fail(
            f"**Sheet not found**\n\nNo sheet found with gid: `{gid}`\n\nUse `list-sheets` to see all available sheets."
        )
    return ToolResult.ok(
        f"**Sheet Found**\n\n**Name:** `{sheet.title}`\n{sheet_details(sheet)}\n\n"
        f'Use sheet name "{sheet.title}" for reading/writing data.'
    )


def get_sheet_info(params: SheetParams) -> ToolResult:
    spreadsheet_id, _ = parse_spreadsheet_input(params.spreadsheet_id)
    sheet = sheets_service.get_sheet_by_title(spreadsheet_id, params.sheet_name)
    if sheet is None:
        return ToolResult.fail(
            f'**Sheet not found**\n\nNo sheet named "{params.sheet_name}"\n\n'
            "Use `list-sheets` to see all available sheets."
        )
    text = (
        f"**Sheet: {sheet.title}**\n\n{sheet_details(sheet)}\n"
        f"**Gridlines Hidden:** {sheet.hide_gridlines}\n"
        f"**Right-to-Left:** {sheet.right_to_left}"
    )
    if sheet.tab_color:
        color = sheet.tab_color
        text += f"\n**Tab Color:** RGB({color.get('red', 0)}, {color.get('green', 0)}, {color.get('blue', 0)})"
    return ToolResult.ok(text)


def get_sheet_preview(params: SheetPreviewParams) -> ToolResult:
    spreadsheet_id, _ = parse_spreadsheet_input(params.spreadsheet_id)
    num_rows = min(params.num_rows, MAX_PREVIEW_ROWS)
    result = sheets_service.get_values(spreadsheet_id, build_a1_notation(params.sheet_name, f"A1:ZZ{num_rows}"))
    header = f"**Sheet Preview: {params.sheet_name}**\n\n"
    if not result.values:
        return ToolResult.ok(header + "This sheet appears to be empty.")

    rows = []
    for row_idx, row in enumerate(result.values):
        cells = [
            f"  {cell_ref(row_idx, col_idx)}: {json.dumps(cell if cell not in (None, '') else '(empty)')}"
            for col_idx, cell in enumerate(row)
        ]
        rows.append(f"**Row {row_idx + 1}:**\n" + "\n".join(cells))
    return ToolResult.ok(
        header
        + f"**Size:** {grid_size(result.values)} (showing first {num_rows} rows)\n\n"
        + "\n\n".join(rows)
        + "\n\nUse cell references (A1, B2, ...) to read/write specific cells."
    )


TOOLS = [
    ToolSpec(
        name="list-sheets",
        description="List all sheets in a spreadsheet with their names, gids and sizes. "
        "Accepts either a spreadsheet ID or a full Google Sheets URL.",
        params=SpreadsheetParams,
        handler=list_sheets,
    ),
    ToolSpec(
        name="get-sheet-by-gid",
        description="Get a sheet by its gid (the sheet ID in a URL). When the user pastes a Google Sheets URL "
        "with a gid, use this first to find the sheet name, then use the name with the other tools. "
        "Provide either spreadsheet_id or url.",
        params=GetSheetByGidParams,
        handler=get_sheet_by_gid,
    ),
    ToolSpec(
        name="get-sheet-info",
        description="Get detailed properties of a sheet by name: gid, size, frozen rows/columns, tab color.",
        params=SheetParams,
        handler=get_sheet_info,
    ),
    ToolSpec(
        name="get-sheet-preview",
        description="Preview the first rows of a sheet with cell references (A1, B2, ...) and values. "
        "Makes no assumptions about headers.",
        params=SheetPreviewParams,
        handler=get_sheet_preview,
    ),
]
