from sheets_mcp.models.common import ToolResult
from sheets_mcp.models.tools import CreateSpreadsheetParams, GetSpreadsheetParams
from sheets_mcp.services import sheets as sheets_service
from sheets_mcp.tools.formatting import sheet_size
from sheets_mcp.tools.registry import ToolSpec
from sheets_mcp.url_parser import parse_spreadsheet_input


def create_spreadsheet(params: CreateSpreadsheetParams) -> ToolResult:
    spreadsheet = sheets_service.create_spreadsheet(params.title, locale=params.locale, time_zone=params.time_zone)
    return ToolResult.ok(
        "**Spreadsheet created successfully**\n\n"
        f"**Title:** {spreadsheet.title}\n"
        f"**ID:** `{spreadsheet.id}`\n"
        f"**URL:** {spreadsheet.url}\n\n"
        "The spreadsheet has one default sheet. Use the ID to read/write data."
    )


def get_spreadsheet(params: GetSpreadsheetParams) -> ToolResult:
    spreadsheet_id, _ = parse_spreadsheet_input(params.spreadsheet_id)
    spreadsheet = sheets_service.get_spreadsheet(spreadsheet_id, include_grid_data=params.include_grid_data)
    sheet_lines = []
    for sheet in spreadsheet.sheets:
        entry = f"- **{sheet.title}** (ID: {sheet.sheet_id})\n  - Type: {sheet.sheet_type}\n  - Size: {sheet_size(sheet)}"
        if sheet.hidden:
            entry += "\n  - Status: Hidden"
        sheet_lines.append(entry)
    return ToolResult.ok(
        f"**Spreadsheet: {spreadsheet.title}**\n\n"
        f"**ID:** `{spreadsheet.id}`\n"
        f"**URL:** {spreadsheet.url}\n"
        f"**Locale:** {spreadsheet.locale or 'N/A'}\n"
        f"**Time Zone:** {spreadsheet.time_zone or 'N/A'}\n\n"
        f"**Sheets ({len(spreadsheet.sheets)}):**\n" + ("\n".join(sheet_lines) or "None")
    )


TOOLS = [
    ToolSpec(
        name="create-spreadsheet",
        description="Create a new Google Spreadsheet. Returns the spreadsheet ID and URL. "
        "Optionally set locale and time zone.",
        params=CreateSpreadsheetParams,
        handler=create_spreadsheet,
    ),
    ToolSpec(
        name="get-spreadsheet",
        description="Get spreadsheet metadata including properties, sheet names and structure. "
        "Use this to understand the layout before reading/writing data. "
        "Accepts either a spreadsheet ID or a full Google Sheets URL.",
        params=GetSpreadsheetParams,
        handler=get_spreadsheet,
    ),
]
